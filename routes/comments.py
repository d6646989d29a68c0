from flask import Blueprint, request, jsonify, g

from dao import comment_dao
from models.comment import Comment
from utils.audit import log_event
from utils.auth_context import login_required

comments_bp = Blueprint("comments", __name__, url_prefix="/api/comments")


def _paging():
    page = max(request.args.get("page", 1, type=int) or 1, 1)
    limit = min(max(request.args.get("limit", 10, type=int) or 10, 1), 100)
    return page, limit


def _clean_content(value):
    if not isinstance(value, str):
        return None, "content is required"
    content = value.strip()
    if not content:
        return None, "content is required"
    if len(content) > Comment.MAX_LENGTH:
        return None, f"content must be at most {Comment.MAX_LENGTH} characters"
    return content, None


@comments_bp.get("/movie/<movie_id>")
def comments_for_movie(movie_id):
    page, limit = _paging()
    return jsonify(comment_dao.by_movie(movie_id, page, limit)), 200


@comments_bp.get("/user")
@login_required
def my_comments():
    page, limit = _paging()
    return jsonify(comment_dao.by_user(g.user.id, page, limit)), 200


@comments_bp.post("")
@login_required
def create_comment():
    data = request.get_json(silent=True) or {}
    movie_id = str(data.get("movieId") or "").strip()
    if not movie_id:
        return jsonify(error="movieId is required"), 400
    content, error = _clean_content(data.get("content"))
    if error:
        return jsonify(error=error), 400

    comment = comment_dao.create(user_id=g.user.id, movie_id=movie_id, content=content)
    log_event("COMMENT_CREATE", user_id=g.user.id, entity="comment", entity_id=comment.id)
    return jsonify(comment.to_dict()), 201


@comments_bp.put("/<int:comment_id>")
@login_required
def update_comment(comment_id: int):
    data = request.get_json(silent=True) or {}
    content, error = _clean_content(data.get("content"))
    if error:
        return jsonify(error=error), 400

    comment_dao.owned(comment_id, g.user.id)
    comment = comment_dao.update(comment_id, content=content)
    log_event("COMMENT_UPDATE", user_id=g.user.id, entity="comment", entity_id=comment_id)
    return jsonify(comment.to_dict()), 200


@comments_bp.delete("/<int:comment_id>")
@login_required
def delete_comment(comment_id: int):
    comment_dao.owned(comment_id, g.user.id)
    comment_dao.delete(comment_id)
    log_event("COMMENT_DELETE", user_id=g.user.id, entity="comment", entity_id=comment_id)
    return jsonify(message="Comment deleted"), 200
