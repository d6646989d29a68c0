"""
Generic data access object shared by every model.

Each concrete DAO binds a model class and adds the queries specific to it:

    from dao import favorite_dao
    favorite_dao.find(user_id=user.id)
"""

from sqlalchemy.exc import SQLAlchemyError

from errors import NotFoundError
from models import db


class BaseDAO:
    """CRUD over a single model with filter-by-field lookups."""

    model = None

    def __init__(self, model=None):
        if model is not None:
            self.model = model

    def _commit(self):
        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            raise

    def create(self, **fields):
        """Insert and return a new row"""
        item = self.model(**fields)
        db.session.add(item)
        self._commit()
        return item

    def get(self, id):
        """Row by primary key, or None"""
        return db.session.get(self.model, id)

    def read(self, id):
        """Row by primary key; raises NotFoundError when absent"""
        item = self.get(id)
        if item is None:
            raise NotFoundError(f"{self.model.__name__} not found")
        return item

    def update(self, id, **patch):
        """Apply a partial update and return the row"""
        item = self.read(id)
        for key, value in patch.items():
            if not hasattr(item, key):
                raise AttributeError(f"{self.model.__name__} has no field {key!r}")
            setattr(item, key, value)
        self._commit()
        return item

    def delete(self, id):
        """Remove the row and return it"""
        item = self.read(id)
        db.session.delete(item)
        self._commit()
        return item

    def find(self, **filters):
        return self.model.query.filter_by(**filters).all()

    def find_one(self, **filters):
        return self.model.query.filter_by(**filters).first()

    def count(self, **filters) -> int:
        return self.model.query.filter_by(**filters).count()


def paginate(query, page: int, limit: int):
    """Returns (items, total, total_pages) for a 1-based page."""
    page = max(page, 1)
    limit = max(limit, 1)
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    total_pages = (total + limit - 1) // limit
    return items, total, total_pages
