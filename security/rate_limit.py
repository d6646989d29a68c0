import threading
import time
from functools import wraps

from flask import request, current_app

from errors import RateLimitError
from utils.audit import log_event


def client_ip() -> str:
    # remote_addr is already the trusted proxy hop (ProxyFix in create_app)
    return request.remote_addr or "unknown"


class LoginRateLimiter:
    """
    Per-IP request counter for the login endpoint.

    Process-local: the table lives in memory, is lost on restart and is not
    shared between workers. Entries are never evicted.
    """

    def __init__(self, window_seconds: int = 900, max_requests: int = 10, clock=time.monotonic):
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self.clock = clock
        self._entries = {}  # ip -> {"count": int, "window_start": float}
        self._lock = threading.Lock()

    def check(self, ip: str) -> tuple[bool, int]:
        """
        Counts one request from `ip`. Returns (allowed, retry_after_seconds).
        """
        now = self.clock()
        with self._lock:
            entry = self._entries.get(ip)
            if entry is None:
                entry = {"count": 1, "window_start": now}
                self._entries[ip] = entry
            elif now - entry["window_start"] > self.window_seconds:
                entry["count"] = 1
                entry["window_start"] = now
            else:
                entry["count"] += 1

            count = entry["count"]
            window_end = entry["window_start"] + self.window_seconds

        if count > self.max_requests:
            return False, max(int(window_end - now), 1)
        return True, 0

    def count_for(self, ip: str) -> int:
        with self._lock:
            entry = self._entries.get(ip)
            return entry["count"] if entry else 0

    def reset(self):
        with self._lock:
            self._entries.clear()


def init_rate_limiter(app, clock=time.monotonic) -> LoginRateLimiter:
    limiter = LoginRateLimiter(
        window_seconds=app.config.get("LOGIN_RATE_WINDOW_SECONDS", 900),
        max_requests=app.config.get("LOGIN_RATE_MAX_REQUESTS", 10),
        clock=clock,
    )
    app.extensions["login_rate_limiter"] = limiter
    return limiter


def login_rate_limited(fn):
    """
    Usage: @login_rate_limited on the login view. Rejected requests never
    reach the view.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        limiter = current_app.extensions["login_rate_limiter"]
        ip = client_ip()
        allowed, retry_after = limiter.check(ip)
        if not allowed:
            log_event("LOGIN_RATE_LIMIT", metadata={"ip": ip, "retry_after": retry_after})
            raise RateLimitError(
                "Too many login attempts. Try again later.",
                retry_after_seconds=retry_after,
            )
        return fn(*args, **kwargs)
    return wrapper
