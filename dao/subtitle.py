from dao.base import BaseDAO
from models import db
from models.subtitle import Subtitle, SUBTITLE_LABELS


class SubtitleDAO(BaseDAO):
    model = Subtitle

    def by_movie(self, movie_id: str):
        return (
            Subtitle.query
            .filter_by(movie_id=movie_id)
            .order_by(Subtitle.is_default.desc(), Subtitle.language.asc())
            .all()
        )

    def upsert(self, movie_id: str, language: str, url: str, label=None, is_default=False):
        label = (label or "").strip() or SUBTITLE_LABELS[language]
        sub = self.find_one(movie_id=movie_id, language=language)
        if sub:
            return self.update(sub.id, url=url, label=label, is_default=bool(is_default))
        return self.create(
            movie_id=movie_id,
            language=language,
            url=url,
            label=label,
            is_default=bool(is_default),
        )

    def remove(self, movie_id: str, language: str):
        sub = self.find_one(movie_id=movie_id, language=language)
        if not sub:
            return None
        db.session.delete(sub)
        self._commit()
        return sub
