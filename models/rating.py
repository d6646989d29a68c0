from datetime import datetime
from models.db import db


class Rating(db.Model):
    __tablename__ = "ratings"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    movie_id = db.Column(db.String(32), nullable=False, index=True)
    stars = db.Column(db.Integer, nullable=False)  # 1..5

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("user_id", "movie_id", name="uq_ratings_user_movie"),
        db.CheckConstraint("stars BETWEEN 1 AND 5", name="ck_ratings_stars"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "movieId": self.movie_id,
            "stars": self.stars,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
