"""
Pytest fixtures for the LumiFlix API tests.

External providers are never called: TMDB and Pexels clients are replaced
with in-memory fakes on `app.extensions`.
"""
import pytest

from app import create_app
from config import Config
from dao import user_dao
from errors import UpstreamError
from models import db
from security.password import hash_password
from security.tokens import issue_token
from services.tmdb import map_movie

DEFAULT_PASSWORD = "Sup3r$ecret"


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SECRET_KEY = "test-secret-key"
    JWT_SECRET = "test-secret-key"
    BCRYPT_ROUNDS = 4
    TMDB_API_KEY = "tmdb-test"
    PEXELS_API_KEY = "pexels-test"
    VIDEO_POOL_QUERY_DELAY_SECONDS = 0
    SMTP_HOST = None


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeTMDB:
    def __init__(self, movies=None):
        self.movies = movies or {
            550: {"id": 550, "title": "Fight Club", "release_date": "1999-10-15",
                  "poster_path": "/fc.jpg", "genres": [{"id": 18, "name": "Drama"}], "vote_average": 8.4},
            603: {"id": 603, "title": "The Matrix", "release_date": "1999-03-30",
                  "genre_ids": [28, 878], "vote_average": 8.2},
        }
        self.calls = []

    def details(self, movie_id, language=None):
        self.calls.append(("details", movie_id))
        movie = self.movies.get(int(movie_id))
        if movie is None:
            raise UpstreamError("TMDB request failed: 404 Not Found", upstream_status=404)
        return map_movie(movie)

    def _page(self, movies, page):
        return {"page": page, "totalPages": 1, "movies": [map_movie(m) for m in movies]}

    def popular(self, page=1, language=None):
        self.calls.append(("popular", page))
        return self._page(self.movies.values(), page)

    def search(self, query, page=1, language=None):
        self.calls.append(("search", query))
        hits = [m for m in self.movies.values() if query.lower() in m["title"].lower()]
        return self._page(hits, page)

    def discover_by_genre(self, genre_id, page=1, language=None):
        self.calls.append(("discover", str(genre_id)))
        return self._page([], page)

    def genres(self, language=None):
        return [{"id": 18, "name": "Drama"}, {"id": 28, "name": "Action"}]


class FakePexels:
    """Answers each search term with a fixed list of videos, or raises."""

    def __init__(self, videos_by_query=None, failing=()):
        self.videos_by_query = videos_by_query or {}
        self.failing = set(failing)
        self.calls = []

    def search(self, query, per_page=15, page=1):
        self.calls.append(query)
        if query in self.failing:
            raise UpstreamError(f"Pexels request failed for {query}", upstream_status=500)
        return {"videos": list(self.videos_by_query.get(query, []))[:per_page]}

    def popular(self, per_page=20, page=1):
        return {"videos": []}


def make_videos(ids):
    return [{"id": i, "url": f"https://pexels.example/video/{i}", "video_files": []} for i in ids]


@pytest.fixture
def app():
    app = create_app(TestConfig)
    app.extensions["tmdb"] = FakeTMDB()
    app.extensions["pexels"] = FakePexels()
    app.extensions["video_pool"].provider = app.extensions["pexels"]

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def rate_clock(app):
    clock = FakeClock()
    limiter = app.extensions["login_rate_limiter"]
    limiter.reset()
    limiter.clock = clock
    return clock


@pytest.fixture
def make_user(app):
    def _make(email="ana@example.com", password=DEFAULT_PASSWORD, **fields):
        defaults = {"firstname": "Ana", "lastname": "Lopez", "age": 25}
        defaults.update(fields)
        return user_dao.create(email=email, password_hash=hash_password(password), **defaults)
    return _make


@pytest.fixture
def auth_headers(make_user):
    """Bearer header for a user, created on first use."""
    def _headers(email="viewer@example.com", **fields):
        user = user_dao.find_by_email(email) or make_user(email=email, **fields)
        return {"Authorization": f"Bearer {issue_token(user.id)}"}
    return _headers
