from datetime import datetime, timedelta
from flask import current_app

from dao import user_dao


def _max_attempts() -> int:
    return current_app.config.get("MAX_LOGIN_ATTEMPTS", 5)


def _lockout() -> timedelta:
    return timedelta(minutes=current_app.config.get("LOCKOUT_MINUTES", 15))


def is_locked(user, now: datetime) -> tuple[bool, int]:
    """
    Returns (locked, seconds_remaining)
    """
    if not user.locked_until or user.locked_until <= now:
        return False, 0

    seconds = int((user.locked_until - now).total_seconds())
    return True, max(seconds, 1)


def register_failure(user, now: datetime) -> tuple[int, bool]:
    """
    Increments the account's failure counter. Returns (fail_count, locked_now)
    """
    previous = user.failed_attempts or 0
    if user.locked_until and user.locked_until <= now:
        # lock elapsed: counting starts over
        previous = 0

    fail_count = previous + 1
    locked_until = None
    locked_now = False
    if fail_count >= _max_attempts():
        locked_until = now + _lockout()
        locked_now = True

    user_dao.update(user.id, failed_attempts=fail_count, locked_until=locked_until)
    return fail_count, locked_now


def reset_attempts(user):
    """
    Clears failure counter after successful login.
    """
    if not user.failed_attempts and user.locked_until is None:
        return
    user_dao.update(user.id, failed_attempts=0, locked_until=None)
