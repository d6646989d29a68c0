from functools import wraps
from flask import g, jsonify

from errors import AuthenticationError
from models import db
from models.user import User
from security.tokens import decode_token, token_from_request


def load_current_user():
    g.user = None
    g.auth_error = None

    token = token_from_request()
    if not token:
        return
    try:
        claims = decode_token(token)
        user_id = int(claims["sub"])
    except (AuthenticationError, ValueError) as exc:
        g.auth_error = str(exc) or "Invalid or expired token"
        return

    user = db.session.get(User, user_id)
    if user is None or not user.is_active:
        g.auth_error = "Invalid or expired token"
        return
    g.user = user


def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if getattr(g, "user", None) is None:
            message = getattr(g, "auth_error", None) or "Authentication required"
            return jsonify(error=message), 401
        return fn(*args, **kwargs)
    return wrapper
