from datetime import datetime
from models.db import db


class PexelsVideo(db.Model):
    __tablename__ = "pexels_videos"

    # insertion order doubles as pool order
    id = db.Column(db.Integer, primary_key=True)
    external_id = db.Column(db.BigInteger, unique=True, nullable=False, index=True)

    # full provider response, replayed verbatim by the watch endpoint
    payload = db.Column(db.JSON, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
