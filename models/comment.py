from datetime import datetime
from models.db import db


class Comment(db.Model):
    __tablename__ = "comments"

    MAX_LENGTH = 500

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    movie_id = db.Column(db.String(32), nullable=False, index=True)
    content = db.Column(db.String(MAX_LENGTH), nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = db.relationship("User", lazy="joined")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "movieId": self.movie_id,
            "content": self.content,
            "user": {
                "id": self.user_id,
                "firstName": self.user.firstname if self.user else None,
                "lastName": self.user.lastname if self.user else None,
            },
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
