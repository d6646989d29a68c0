from datetime import datetime
from models.db import db


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)

    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    firstname = db.Column(db.String(120), nullable=False)
    lastname = db.Column(db.String(120), nullable=False)
    age = db.Column(db.Integer, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    reset_password_token = db.Column(db.String(128), nullable=True, index=True)
    reset_password_expires = db.Column(db.DateTime, nullable=True)

    # consecutive failures since last success or unlock
    failed_attempts = db.Column(db.Integer, default=0, nullable=False)
    locked_until = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def summary(self) -> dict:
        """Public view of the account; never includes the password hash."""
        return {
            "id": self.id,
            "email": self.email,
            "firstName": self.firstname,
            "lastName": self.lastname,
            "age": self.age,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
