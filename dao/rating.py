from dao.base import BaseDAO, paginate
from errors import ForbiddenError
from models.rating import Rating


class RatingDAO(BaseDAO):
    model = Rating

    def upsert(self, user_id: int, movie_id: str, stars: int):
        """One rating per user and movie; a second rating replaces the first."""
        rating = self.find_one(user_id=user_id, movie_id=movie_id)
        if rating:
            return self.update(rating.id, stars=stars)
        return self.create(user_id=user_id, movie_id=movie_id, stars=stars)

    def owned(self, rating_id: int, user_id: int):
        rating = self.read(rating_id)
        if rating.user_id != user_id:
            raise ForbiddenError("You can only modify your own ratings")
        return rating

    def stats(self, movie_id: str) -> dict:
        distribution = {star: 0 for star in range(1, 6)}
        stars = [r.stars for r in Rating.query.filter_by(movie_id=movie_id).all()]
        for s in stars:
            distribution[s] += 1

        average = round(sum(stars) / len(stars), 1) if stars else 0
        return {
            "average": average,
            "totalRatings": len(stars),
            "distribution": distribution,
        }

    def by_movie(self, movie_id: str, page: int = 1, limit: int = 10) -> dict:
        q = Rating.query.filter_by(movie_id=movie_id).order_by(Rating.created_at.desc(), Rating.id.desc())
        items, total, pages = paginate(q, page, limit)
        return {
            "ratings": [r.to_dict() for r in items],
            "totalPages": pages,
            "currentPage": page,
            "totalRatings": total,
        }
