import secrets
from datetime import timedelta

from flask import Blueprint, request, jsonify, current_app, g

from dao import user_dao
from errors import AccountLockedError, AuthenticationError, ValidationError
from security.password import hash_password, verify_password
from security.rate_limit import login_rate_limited
from security.tokens import issue_token, set_auth_cookie, clear_auth_cookie
from security.validators import (
    is_valid_email,
    normalize_email,
    parse_age,
    validate_password,
)
from services.login_guard import authenticate
from utils.audit import log_event
from utils.auth_context import login_required
from utils.clock import utcnow
from utils.emailer import send_password_reset_email


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")

RESET_REQUESTED = "If the email exists, we will send you a reset link"
DELETE_CONFIRMATION = "ELIMINAR"


def _profile_fields(data: dict):
    # the frontend sends both camelCase and lowercase names
    return (
        data.get("firstname") or data.get("firstName"),
        data.get("lastname") or data.get("lastName"),
        data.get("age"),
    )


def _clean_name(value):
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value or len(value) > 120:
        return None
    return value


@auth_bp.post("/signup")
def signup():
    data = request.get_json(silent=True) or {}
    email = normalize_email(data.get("email"))
    password = data.get("password") or ""
    firstname, lastname, age = _profile_fields(data)

    if not email or not password or not firstname or not lastname or age is None:
        return jsonify(error="Missing required fields"), 400
    if not is_valid_email(email):
        return jsonify(error="Invalid email format"), 400
    valid, errors = validate_password(password)
    if not valid:
        return jsonify(error="Password does not meet complexity requirements", details=errors), 400
    numeric_age = parse_age(age)
    if numeric_age is None:
        return jsonify(error="Age must be an integer and at least 13"), 400
    firstname, lastname = _clean_name(firstname), _clean_name(lastname)
    if not firstname or not lastname:
        return jsonify(error="Invalid first or last name"), 400

    if user_dao.find_by_email(email):
        log_event("SIGNUP_FAIL_EMAIL_EXISTS", metadata={"email": email})
        return jsonify(error="Email already exists"), 409

    user = user_dao.create(
        email=email,
        password_hash=hash_password(password),
        firstname=firstname,
        lastname=lastname,
        age=numeric_age,
    )
    log_event("SIGNUP_SUCCESS", user_id=user.id)

    return jsonify(user=user.summary()), 201


@auth_bp.post("/login")
@login_rate_limited
def login():
    data = request.get_json(silent=True) or {}
    email = normalize_email(data.get("email"))

    try:
        user = authenticate(email, data.get("password"))
    except ValidationError as e:
        return jsonify(error=e.message), 400
    except AccountLockedError as e:
        log_event("LOGIN_LOCKED", metadata={"email": email, **e.extra})
        return jsonify(e.to_dict()), 423
    except AuthenticationError as e:
        log_event("LOGIN_FAIL", metadata={"email": email})
        return jsonify(error=e.message), 401

    token = issue_token(user.id)
    resp = jsonify(token=token, user=user.summary())
    set_auth_cookie(resp, token)

    log_event("LOGIN_SUCCESS", user_id=user.id)
    return resp, 200


@auth_bp.post("/logout")
def logout():
    # tokens are stateless; logging out only drops the cookie
    resp = jsonify(message="Logged out")
    clear_auth_cookie(resp)
    if getattr(g, "user", None) is not None:
        log_event("LOGOUT", user_id=g.user.id)
    return resp, 200


@auth_bp.post("/password/forgot")
def forgot_password():
    data = request.get_json(silent=True) or {}
    email = normalize_email(data.get("email"))
    if not email:
        return jsonify(error="Email required"), 400

    # same answer whether or not the account exists
    if not is_valid_email(email):
        return jsonify(message=RESET_REQUESTED), 202
    user = user_dao.find_by_email(email)
    if not user:
        return jsonify(message=RESET_REQUESTED), 202

    token = secrets.token_hex(32)
    ttl = current_app.config.get("PASSWORD_RESET_TTL_MINUTES", 60)
    user_dao.update(
        user.id,
        reset_password_token=token,
        reset_password_expires=utcnow() + timedelta(minutes=ttl),
    )
    send_password_reset_email(email, token)
    log_event("PASSWORD_RESET_REQUESTED", user_id=user.id)

    return jsonify(message=RESET_REQUESTED), 202


@auth_bp.post("/password/reset")
def reset_password():
    data = request.get_json(silent=True) or {}
    token = data.get("token")
    new_password = data.get("newPassword") or data.get("new_password")

    if not token or not new_password:
        return jsonify(error="Token and newPassword are required"), 400
    valid, errors = validate_password(new_password)
    if not valid:
        return jsonify(error="Password does not meet complexity requirements", details=errors), 400

    user = user_dao.find_by_reset_token(token, utcnow())
    if not user:
        return jsonify(error="Invalid or expired token"), 400

    user_dao.update(
        user.id,
        password_hash=hash_password(new_password),
        reset_password_token=None,
        reset_password_expires=None,
    )
    log_event("PASSWORD_RESET", user_id=user.id)
    return jsonify(message="Password updated"), 200


@auth_bp.get("/password/verify")
def verify_reset_token():
    token = request.args.get("token")
    if not token:
        return jsonify(valid=False, error="Token required"), 400

    if not user_dao.find_by_reset_token(token, utcnow()):
        return jsonify(valid=False, error="Invalid or expired link"), 200
    return jsonify(valid=True), 200


@auth_bp.get("/users/me")
@login_required
def get_profile():
    return jsonify(g.user.summary()), 200


@auth_bp.put("/users/me")
@login_required
def update_profile():
    data = request.get_json(silent=True) or {}
    email = normalize_email(data.get("email"))
    firstname, lastname, age = _profile_fields(data)

    if not email or not firstname or not lastname or age is None:
        return jsonify(error="Missing required fields"), 400
    if not is_valid_email(email):
        return jsonify(error="Invalid email format"), 400
    numeric_age = parse_age(age)
    if numeric_age is None:
        return jsonify(error="Age must be an integer and at least 13"), 400
    firstname, lastname = _clean_name(firstname), _clean_name(lastname)
    if not firstname or not lastname:
        return jsonify(error="Invalid first or last name"), 400

    if user_dao.email_taken(email, exclude_id=g.user.id):
        return jsonify(error="Email already in use"), 409

    user = user_dao.update(g.user.id, email=email, firstname=firstname, lastname=lastname, age=numeric_age)
    log_event("PROFILE_UPDATE", user_id=user.id)

    summary = user.summary()
    summary["updatedAt"] = user.updated_at.isoformat()
    return jsonify(summary), 200


@auth_bp.delete("/users/me")
@login_required
def delete_account():
    data = request.get_json(silent=True) or {}
    password = data.get("password")
    confirmation = data.get("confirmation")

    if not password or not confirmation:
        return jsonify(error="Password and confirmation are required"), 400
    if confirmation != DELETE_CONFIRMATION:
        return jsonify(error="Invalid confirmation text"), 400
    if not verify_password(password, g.user.password_hash):
        return jsonify(error="Incorrect password"), 401

    user_id = g.user.id
    user_dao.delete(user_id)
    log_event("ACCOUNT_DELETED", user_id=user_id)

    resp = current_app.response_class(status=204)
    clear_auth_cookie(resp)
    return resp
