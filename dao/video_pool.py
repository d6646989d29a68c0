import logging

from sqlalchemy.exc import IntegrityError

from dao.base import BaseDAO
from models import db
from models.pexels_video import PexelsVideo

logger = logging.getLogger(__name__)


class VideoPoolDAO(BaseDAO):
    """Persisted pool of provider videos."""

    model = PexelsVideo

    def all_ordered(self):
        return PexelsVideo.query.order_by(PexelsVideo.id.asc()).all()

    def add_if_absent(self, payload):
        """
        Stores a provider payload once per external id.
        Returns (row, created); row is None for payloads without an id.
        """
        external_id = (payload or {}).get("id")
        if not external_id:
            return None, False

        existing = self.find_one(external_id=external_id)
        if existing:
            return existing, False

        row = PexelsVideo(external_id=external_id, payload=payload)
        db.session.add(row)
        try:
            db.session.commit()
        except IntegrityError:
            # another writer stored it first
            db.session.rollback()
            return self.find_one(external_id=external_id), False
        return row, True

    def delete_oldest(self, n: int) -> int:
        if n <= 0:
            return 0
        oldest = (
            PexelsVideo.query
            .order_by(PexelsVideo.created_at.asc(), PexelsVideo.id.asc())
            .limit(n)
            .all()
        )
        for row in oldest:
            db.session.delete(row)
        self._commit()
        logger.info("Removed %d old videos from pool", len(oldest))
        return len(oldest)
