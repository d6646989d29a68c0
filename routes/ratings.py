from flask import Blueprint, request, jsonify, g

from dao import rating_dao
from utils.audit import log_event
from utils.auth_context import login_required

ratings_bp = Blueprint("ratings", __name__, url_prefix="/api/ratings")


def _parse_stars(value):
    if isinstance(value, bool):
        return None
    try:
        stars = int(value)
    except (TypeError, ValueError):
        return None
    return stars if 1 <= stars <= 5 else None


@ratings_bp.post("")
@login_required
def rate_movie():
    data = request.get_json(silent=True) or {}
    movie_id = str(data.get("movieId") or "").strip()
    if not movie_id or data.get("stars") is None:
        return jsonify(error="Movie ID and stars are required"), 400
    stars = _parse_stars(data.get("stars"))
    if stars is None:
        return jsonify(error="Stars must be a number between 1 and 5"), 400

    rating = rating_dao.upsert(g.user.id, movie_id, stars)
    log_event("RATING_SET", user_id=g.user.id, entity="rating", entity_id=rating.id, metadata={"stars": stars})
    return jsonify(rating.to_dict()), 201


@ratings_bp.put("/<int:rating_id>")
@login_required
def update_rating(rating_id: int):
    data = request.get_json(silent=True) or {}
    if data.get("stars") is None:
        return jsonify(error="Stars value is required"), 400
    stars = _parse_stars(data.get("stars"))
    if stars is None:
        return jsonify(error="Stars must be a number between 1 and 5"), 400

    rating_dao.owned(rating_id, g.user.id)
    rating = rating_dao.update(rating_id, stars=stars)
    log_event("RATING_SET", user_id=g.user.id, entity="rating", entity_id=rating_id, metadata={"stars": stars})
    return jsonify(rating.to_dict()), 200


@ratings_bp.get("/movie/<movie_id>")
@login_required
def rating_stats(movie_id):
    return jsonify(rating_dao.stats(movie_id)), 200


@ratings_bp.get("/movie/<movie_id>/user")
@login_required
def my_rating(movie_id):
    rating = rating_dao.find_one(user_id=g.user.id, movie_id=movie_id)
    if not rating:
        return jsonify(error="Rating not found"), 404
    return jsonify(rating.to_dict()), 200


@ratings_bp.get("/movie/<movie_id>/all")
@login_required
def ratings_for_movie(movie_id):
    page = max(request.args.get("page", 1, type=int) or 1, 1)
    limit = min(max(request.args.get("limit", 10, type=int) or 10, 1), 100)
    return jsonify(rating_dao.by_movie(movie_id, page, limit)), 200


@ratings_bp.delete("/<int:rating_id>")
@login_required
def delete_rating(rating_id: int):
    rating_dao.owned(rating_id, g.user.id)
    rating = rating_dao.delete(rating_id)
    log_event("RATING_DELETE", user_id=g.user.id, entity="rating", entity_id=rating_id)
    return jsonify(rating.to_dict()), 200
