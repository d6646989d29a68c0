from dao.base import BaseDAO
from models.user import User


class UserDAO(BaseDAO):
    model = User

    def find_by_email(self, email: str):
        return self.find_one(email=email)

    def email_taken(self, email: str, exclude_id=None) -> bool:
        q = User.query.filter(User.email == email)
        if exclude_id is not None:
            q = q.filter(User.id != exclude_id)
        return q.first() is not None

    def find_by_reset_token(self, token: str, now):
        """Account holding a reset token that has not expired yet."""
        return (
            User.query
            .filter(User.reset_password_token == token)
            .filter(User.reset_password_expires > now)
            .first()
        )
