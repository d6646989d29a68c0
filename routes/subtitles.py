from flask import Blueprint, request, jsonify, g

from dao import subtitle_dao
from models.subtitle import SUBTITLE_LABELS
from security.validators import is_http_url
from utils.audit import log_event
from utils.auth_context import login_required

subtitles_bp = Blueprint("subtitles", __name__, url_prefix="/api/subtitles")

INVALID_LANGUAGE = "Invalid language. Supported languages are: es (Spanish), en (English)"


@subtitles_bp.get("/movie/<movie_id>")
@login_required
def subtitles_for_movie(movie_id):
    subs = subtitle_dao.by_movie(movie_id)
    if not subs:
        return jsonify(error="Subtitles not available", subtitles=[]), 404
    return jsonify(subtitles=[s.to_dict() for s in subs]), 200


@subtitles_bp.get("/movie/<movie_id>/<language>")
@login_required
def subtitle_for_language(movie_id, language):
    if language not in SUBTITLE_LABELS:
        return jsonify(error=INVALID_LANGUAGE), 400
    sub = subtitle_dao.find_one(movie_id=movie_id, language=language)
    if not sub:
        return jsonify(error=f"Subtitles not available for language: {language}"), 404
    return jsonify(sub.to_dict()), 200


@subtitles_bp.post("")
@login_required
def upsert_subtitle():
    data = request.get_json(silent=True) or {}
    movie_id = str(data.get("movieId") or "").strip()
    language = data.get("language")
    url = data.get("url")

    if not movie_id or not language or not url:
        return jsonify(error="Movie ID, language, and URL are required"), 400
    if language not in SUBTITLE_LABELS:
        return jsonify(error=INVALID_LANGUAGE), 400
    if not is_http_url(url):
        return jsonify(error="Invalid URL format"), 400

    sub = subtitle_dao.upsert(movie_id, language, url.strip(), data.get("label"), data.get("isDefault", False))
    log_event("SUBTITLE_SET", user_id=g.user.id, entity="subtitle", entity_id=sub.id)
    return jsonify(sub.to_dict()), 201


@subtitles_bp.delete("/movie/<movie_id>/<language>")
@login_required
def delete_subtitle(movie_id, language):
    if language not in SUBTITLE_LABELS:
        return jsonify(error=INVALID_LANGUAGE), 400
    sub = subtitle_dao.remove(movie_id, language)
    if not sub:
        return jsonify(error="Subtitle not found"), 404
    log_event("SUBTITLE_DELETE", user_id=g.user.id, entity="subtitle", entity_id=sub.id)
    return jsonify(sub.to_dict()), 200
