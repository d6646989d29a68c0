import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")
    JWT_SECRET = os.getenv("JWT_SECRET") or SECRET_KEY
    JWT_ALGORITHM = "HS256"

    # SQLite database file stored next to the app as lumiflix.db
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "lumiflix.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Auth token: signed JWT, sent as cookie or bearer header
    AUTH_COOKIE_NAME = "token"
    TOKEN_LIFETIME_SECONDS = 2 * 60 * 60

    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = os.getenv("SESSION_COOKIE_SAMESITE", "Lax")
    SESSION_COOKIE_SECURE = _env_bool("SESSION_COOKIE_SECURE", "false")  # set True when using HTTPS

    # Password hashing cost
    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "10"))

    # Brute-force protection (per account)
    MAX_LOGIN_ATTEMPTS = 5
    LOCKOUT_MINUTES = 15

    # In-memory IP rate limit for the login endpoint
    LOGIN_RATE_WINDOW_SECONDS = 15 * 60
    LOGIN_RATE_MAX_REQUESTS = 10

    # Reverse proxies in front of the app; X-Forwarded-For is trusted for this many hops
    TRUSTED_PROXY_HOPS = int(os.getenv("TRUSTED_PROXY_HOPS", "1"))

    # Password reset
    PASSWORD_RESET_TTL_MINUTES = 60
    FRONTEND_RESET_URL = os.getenv("FRONTEND_RESET_URL", "http://localhost:5173/reset-password")

    # Movie metadata provider (TMDB)
    TMDB_API_KEY = os.getenv("TMDB_API_KEY")
    TMDB_READ_TOKEN = os.getenv("TMDB_READ_TOKEN") or os.getenv("TMDB_READ_ACCESS_TOKEN")
    TMDB_LANGUAGE = os.getenv("TMDB_LANGUAGE", "en-US")
    TMDB_BASE_URL = os.getenv("TMDB_BASE_URL", "https://api.themoviedb.org/3")

    # Stock video provider (Pexels)
    PEXELS_API_KEY = os.getenv("PEXELS_API_KEY")
    PEXELS_BASE_URL = os.getenv("PEXELS_BASE_URL", "https://api.pexels.com")

    HTTP_TIMEOUT_SECONDS = int(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))

    # Video pool used by the watch endpoint
    VIDEO_POOL_MIN_SIZE = 50
    VIDEO_POOL_MAX_SIZE = 500
    VIDEO_POOL_EVICT_MARGIN = 50
    VIDEO_POOL_QUERIES = ["cinematic", "movie", "film", "trailer"]
    VIDEO_POOL_PER_PAGE = 30
    VIDEO_POOL_QUERY_DELAY_SECONDS = 2

    # Email (SMTP)
    SMTP_HOST = os.getenv("SMTP_HOST")
    SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USERNAME = os.getenv("SMTP_USERNAME")
    SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
    SMTP_FROM_EMAIL = os.getenv("SMTP_FROM_EMAIL")
    SMTP_USE_TLS = _env_bool("SMTP_USE_TLS", "true")

    # Basic app settings
    DEBUG = False
