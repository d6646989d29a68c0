from datetime import datetime
from models.db import db

SUBTITLE_LABELS = {"es": "Spanish", "en": "English"}


class Subtitle(db.Model):
    __tablename__ = "subtitles"

    id = db.Column(db.Integer, primary_key=True)
    movie_id = db.Column(db.String(32), nullable=False, index=True)
    language = db.Column(db.String(2), nullable=False, index=True)  # es | en
    url = db.Column(db.String(512), nullable=False)
    label = db.Column(db.String(60), nullable=False)
    is_default = db.Column(db.Boolean, default=False, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("movie_id", "language", name="uq_subtitles_movie_language"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "movieId": self.movie_id,
            "language": self.language,
            "url": self.url,
            "label": self.label,
            "isDefault": self.is_default,
        }
