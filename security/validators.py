import re
from typing import List, Tuple
from urllib.parse import urlparse

EMAIL_RE = re.compile(
    r"^[A-Za-z0-9_'^&+\-`{}~!#$%*?/|=]+(?:\.[A-Za-z0-9_'^&+\-`{}~!#$%*?/|=]+)*"
    r"@(?:[A-Za-z0-9-]+\.)+[A-Za-z]{2,}$"
)

_UPPER = re.compile(r"[A-Z]")
_LOWER = re.compile(r"[a-z]")
_DIGIT = re.compile(r"\d")
_SYMBOL = re.compile(r"[\W_]")

PASSWORD_MIN_LEN = 8
MIN_AGE = 13


def normalize_email(value) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip().lower()


def is_valid_email(email: str) -> bool:
    return isinstance(email, str) and len(email) <= 255 and EMAIL_RE.match(email) is not None


def validate_password(pw) -> Tuple[bool, List[str]]:
    errors: List[str] = []

    if not isinstance(pw, str):
        return False, ["Password must be a string"]

    if len(pw) < PASSWORD_MIN_LEN:
        errors.append(f"Password must be at least {PASSWORD_MIN_LEN} characters")
    if not _UPPER.search(pw):
        errors.append("Password must include at least 1 uppercase letter")
    if not _LOWER.search(pw):
        errors.append("Password must include at least 1 lowercase letter")
    if not _DIGIT.search(pw):
        errors.append("Password must include at least 1 number")
    if not _SYMBOL.search(pw):
        errors.append("Password must include at least 1 symbol")

    return (len(errors) == 0), errors


def parse_age(value):
    """Integer age >= 13, or None."""
    if isinstance(value, bool):
        return None
    try:
        age = int(value)
    except (TypeError, ValueError):
        return None
    if isinstance(value, float) and value != age:
        return None
    if age < MIN_AGE:
        return None
    return age


def is_http_url(value) -> bool:
    if not isinstance(value, str):
        return False
    parts = urlparse(value.strip())
    return parts.scheme in ("http", "https") and bool(parts.netloc)
