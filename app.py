import logging

import click
from flask import Flask, jsonify
from flask_migrate import Migrate
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.middleware.proxy_fix import ProxyFix

from config import Config
from errors import ApiError
from models import db
from routes import health_bp, auth_bp, movies_bp, comments_bp, ratings_bp, subtitles_bp
from security.rate_limit import init_rate_limiter
from services.pexels import PexelsClient
from services.tmdb import TMDBClient
from services.video_pool import init_video_pool
from utils.auth_context import load_current_user

logger = logging.getLogger(__name__)


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    # client IP comes from the hop the trusted proxy appended, not the client's claim
    hops = app.config.get("TRUSTED_PROXY_HOPS", 1)
    if hops:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops)

    logging.basicConfig(
        level=logging.DEBUG if app.config.get("DEBUG") else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(movies_bp)
    app.register_blueprint(comments_bp)
    app.register_blueprint(ratings_bp)
    app.register_blueprint(subtitles_bp)

    # Database init
    db.init_app(app)

    # Migrations
    Migrate(app, db)

    # Process-scoped collaborators
    init_rate_limiter(app)
    app.extensions["tmdb"] = TMDBClient.from_config(app.config)
    app.extensions["pexels"] = PexelsClient.from_config(app.config)
    init_video_pool(app, provider=app.extensions["pexels"])

    @app.before_request
    def _load_user():
        load_current_user()

    @app.errorhandler(ApiError)
    def _api_error(err):
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(SQLAlchemyError)
    def _db_error(err):
        db.session.rollback()
        logger.error("Database error: %s", err)
        return jsonify(error="Internal server error"), 500

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp

    register_cli(app)

    return app

#-------------------------

def register_cli(app):
    @app.cli.command("init-video-pool")
    def init_video_pool_cmd():
        """Fill the video pool up to its minimum size."""
        pool = app.extensions["video_pool"]
        count = pool.initialize_pool()
        click.echo(f"Video pool ready: {count} videos")

    @app.cli.command("refresh-video-pool")
    def refresh_video_pool_cmd():
        """Evict the oldest videos when full, then top the pool up."""
        pool = app.extensions["video_pool"]
        added = pool.refresh_pool()
        click.echo(f"Video pool refreshed: {added} videos added")

#-------------------------


if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=3000)
