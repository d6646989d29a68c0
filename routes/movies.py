import logging

from flask import Blueprint, request, jsonify, g

from dao import favorite_dao
from errors import UpstreamError
from services import get_pexels, get_tmdb, get_video_pool
from utils.audit import log_event
from utils.auth_context import login_required

logger = logging.getLogger(__name__)

movies_bp = Blueprint("movies", __name__, url_prefix="/api/movies")


def _page() -> int:
    return max(request.args.get("page", 1, type=int) or 1, 1)


def _language():
    return request.args.get("language") or None


def _query_text() -> str:
    return (request.args.get("q") or request.args.get("query") or "").strip()


def _upstream_failure(e: UpstreamError):
    status = 404 if e.upstream_status == 404 else 502
    return jsonify(error=e.message), status


# ---- Catalog (TMDB) ----

@movies_bp.get("/catalog/genres")
def catalog_genres():
    try:
        return jsonify(genres=get_tmdb().genres(_language())), 200
    except UpstreamError as e:
        return _upstream_failure(e)


@movies_bp.get("/catalog/popular")
def catalog_popular():
    try:
        return jsonify(get_tmdb().popular(_page(), _language())), 200
    except UpstreamError as e:
        return _upstream_failure(e)


@movies_bp.get("/catalog/search")
def catalog_search():
    q = _query_text()
    if not q:
        return jsonify(error="Missing query parameter q"), 400
    try:
        return jsonify(get_tmdb().search(q, _page(), _language())), 200
    except UpstreamError as e:
        return _upstream_failure(e)


@movies_bp.get("/catalog/genre/<genre_id>")
def catalog_by_genre(genre_id):
    try:
        return jsonify(get_tmdb().discover_by_genre(genre_id, _page(), _language())), 200
    except UpstreamError as e:
        return _upstream_failure(e)


@movies_bp.get("/catalog/<int:movie_id>")
def catalog_details(movie_id: int):
    try:
        return jsonify(movie=get_tmdb().details(movie_id, _language())), 200
    except UpstreamError as e:
        return _upstream_failure(e)


@movies_bp.get("")
def list_movies():
    """q -> search, genreId -> discover by genre, otherwise popular."""
    tmdb = get_tmdb()
    q = _query_text()
    genre_id = (request.args.get("genreId") or "").strip()
    try:
        if q:
            data = tmdb.search(q, _page(), _language())
        elif genre_id:
            data = tmdb.discover_by_genre(genre_id, _page(), _language())
        else:
            data = tmdb.popular(_page(), _language())
    except UpstreamError as e:
        return _upstream_failure(e)
    return jsonify(data), 200


# ---- Stock videos (Pexels) ----

@movies_bp.post("/videos/search")
@login_required
def search_videos():
    data = request.get_json(silent=True) or {}
    query = (data.get("query") or "").strip()
    if not query:
        return jsonify(error="query is required"), 400
    try:
        return jsonify(get_pexels().search(query)), 200
    except UpstreamError as e:
        return _upstream_failure(e)


@movies_bp.get("/videos/popular")
@login_required
def popular_videos():
    try:
        return jsonify(get_pexels().popular(per_page=20)), 200
    except UpstreamError as e:
        return _upstream_failure(e)


# ---- Watch ----

@movies_bp.get("/watch/<movie_id>")
@login_required
def watch(movie_id):
    try:
        catalog_id = int(movie_id)
    except ValueError:
        return jsonify(error="Invalid movie id"), 400

    try:
        movie = get_tmdb().details(catalog_id, _language())
    except UpstreamError as e:
        return _upstream_failure(e)

    video = get_video_pool().select_video(catalog_id)
    if video is None:
        return jsonify(error="No playable video available"), 404

    return jsonify(movie=movie, video=video.payload, provider="pexels"), 200


# ---- Favorites ----

@movies_bp.get("/favorites")
@login_required
def list_favorites():
    tmdb = get_tmdb()
    movies = []
    for fav in favorite_dao.by_user(g.user.id):
        try:
            movies.append(tmdb.details(fav.movie_id))
        except UpstreamError as e:
            logger.warning("Skipping favorite %s: %s", fav.movie_id, e.message)
    return jsonify(movies=movies, total=len(movies)), 200


@movies_bp.post("/favorite")
@login_required
def add_favorite():
    data = request.get_json(silent=True) or {}
    movie_id = str(data.get("movieId") or "").strip()
    if not movie_id:
        return jsonify(error="movieId is required"), 400

    fav = favorite_dao.add(g.user.id, movie_id)
    log_event("FAVORITE_ADD", user_id=g.user.id, entity="favorite", entity_id=fav.id)
    return jsonify(fav.to_dict()), 201


@movies_bp.delete("/favorite")
@login_required
def remove_favorite():
    data = request.get_json(silent=True) or {}
    movie_id = str(data.get("movieId") or "").strip()
    if not movie_id:
        return jsonify(error="movieId is required"), 400

    fav = favorite_dao.remove(g.user.id, movie_id)
    if not fav:
        return jsonify(error="Favorite not found"), 404
    log_event("FAVORITE_REMOVE", user_id=g.user.id, entity="favorite", entity_id=fav.id)
    return jsonify(fav.to_dict()), 200
