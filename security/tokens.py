from datetime import datetime, timedelta, timezone

import jwt
from flask import request, current_app

from errors import AuthenticationError


def _secret() -> str:
    return current_app.config.get("JWT_SECRET") or current_app.config["SECRET_KEY"]


def _algorithm() -> str:
    return current_app.config.get("JWT_ALGORITHM", "HS256")


def issue_token(user_id: int, now: datetime = None) -> str:
    """
    Signs a session token for the user. Stateless: nothing is stored
    server side, expiry is carried in the token itself.
    """
    now = now or datetime.now(timezone.utc)
    lifetime = current_app.config.get("TOKEN_LIFETIME_SECONDS", 7200)
    claims = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + timedelta(seconds=lifetime),
    }
    return jwt.encode(claims, _secret(), algorithm=_algorithm())


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(
            token,
            _secret(),
            algorithms=[_algorithm()],
            options={"require": ["sub", "exp"]},
        )
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid or expired token")


def token_from_request():
    """Cookie first, then `Authorization: Bearer <token>`."""
    cookie_name = current_app.config.get("AUTH_COOKIE_NAME", "token")
    token = request.cookies.get(cookie_name)
    if token:
        return token

    auth = request.headers.get("Authorization", "")
    scheme, _, value = auth.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return None


def set_auth_cookie(resp, token: str):
    resp.set_cookie(
        current_app.config.get("AUTH_COOKIE_NAME", "token"),
        token,
        httponly=True,
        secure=current_app.config.get("SESSION_COOKIE_SECURE", False),
        samesite=current_app.config.get("SESSION_COOKIE_SAMESITE", "Lax"),
        max_age=current_app.config.get("TOKEN_LIFETIME_SECONDS", 7200),
        path="/",
    )
    return resp


def clear_auth_cookie(resp):
    resp.delete_cookie(current_app.config.get("AUTH_COOKIE_NAME", "token"), path="/")
    return resp
