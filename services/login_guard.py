"""
Credential check for the login endpoint.

Runs after the IP rate limiter has let the request through and before a
token is issued. Lockout state lives on the user row (`failed_attempts`,
`locked_until`).
"""

from dao import user_dao
from errors import AccountLockedError, AuthenticationError, ValidationError
from security.bruteforce import is_locked, register_failure, reset_attempts
from security.password import verify_password
from security.validators import is_valid_email, normalize_email
from utils.clock import utcnow

INVALID_CREDENTIALS = "Invalid credentials"
ACCOUNT_LOCKED = "Account locked. Try later"


def authenticate(email, password, now=None):
    """
    Returns the authenticated user or raises:
      ValidationError      missing / malformed input (no store access)
      AuthenticationError  unknown email or wrong password, same message for both
      AccountLockedError   lock active, or this failure reached the threshold
    """
    email = normalize_email(email)
    if not email or not password or not isinstance(password, str):
        raise ValidationError("Missing email or password")
    if not is_valid_email(email):
        raise ValidationError("Invalid email format")

    user = user_dao.find_by_email(email)
    if user is None:
        raise AuthenticationError(INVALID_CREDENTIALS)

    now = now or utcnow()
    locked, seconds_left = is_locked(user, now)
    if locked:
        raise AccountLockedError(ACCOUNT_LOCKED, retry_after_seconds=seconds_left)

    if not verify_password(password, user.password_hash):
        fail_count, locked_now = register_failure(user, now)
        if locked_now:
            raise AccountLockedError(ACCOUNT_LOCKED, failed_attempts=fail_count)
        raise AuthenticationError(INVALID_CREDENTIALS)

    reset_attempts(user)
    return user
