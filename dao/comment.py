from dao.base import BaseDAO, paginate
from errors import ForbiddenError
from models.comment import Comment


class CommentDAO(BaseDAO):
    model = Comment

    def by_movie(self, movie_id: str, page: int = 1, limit: int = 10) -> dict:
        q = Comment.query.filter_by(movie_id=movie_id).order_by(Comment.created_at.desc(), Comment.id.desc())
        items, total, pages = paginate(q, page, limit)
        return {
            "comments": [c.to_dict() for c in items],
            "totalPages": pages,
            "currentPage": page,
            "totalComments": total,
        }

    def by_user(self, user_id: int, page: int = 1, limit: int = 10) -> dict:
        q = Comment.query.filter_by(user_id=user_id).order_by(Comment.created_at.desc(), Comment.id.desc())
        items, total, pages = paginate(q, page, limit)
        return {
            "comments": [c.to_dict() for c in items],
            "totalPages": pages,
            "currentPage": page,
            "totalComments": total,
        }

    def owned(self, comment_id: int, user_id: int):
        comment = self.read(comment_id)
        if comment.user_id != user_id:
            raise ForbiddenError("You can only modify your own comments")
        return comment
