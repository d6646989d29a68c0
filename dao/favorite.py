from sqlalchemy.exc import IntegrityError

from dao.base import BaseDAO
from errors import ConflictError
from models import db
from models.favorite import Favorite


class FavoriteDAO(BaseDAO):
    model = Favorite

    def by_user(self, user_id: int):
        return (
            Favorite.query
            .filter_by(user_id=user_id)
            .order_by(Favorite.created_at.desc())
            .all()
        )

    def add(self, user_id: int, movie_id: str):
        try:
            return self.create(user_id=user_id, movie_id=movie_id)
        except IntegrityError:
            raise ConflictError("Movie already in favorites")

    def remove(self, user_id: int, movie_id: str):
        """Deletes and returns the favorite, or None if it was not there."""
        fav = self.find_one(user_id=user_id, movie_id=movie_id)
        if not fav:
            return None
        db.session.delete(fav)
        self._commit()
        return fav
