from datetime import datetime, timedelta

import pytest

from dao import user_dao
from errors import AccountLockedError, AuthenticationError, ValidationError
from models.audit_log import AuditLog
from services.login_guard import authenticate
from tests.conftest import DEFAULT_PASSWORD

NOW = datetime(2026, 1, 1, 12, 0, 0)


def _login(client, email="ana@example.com", password=DEFAULT_PASSWORD):
    return client.post("/api/auth/login", json={"email": email, "password": password})


# ---- authenticate() ----

def test_authenticate_success_resets_counter(make_user):
    user = make_user(failed_attempts=3)
    result = authenticate("ANA@example.com ", DEFAULT_PASSWORD, now=NOW)
    assert result.id == user.id
    assert user_dao.get(user.id).failed_attempts == 0


@pytest.mark.parametrize("email,password", [("", "x"), ("ana@example.com", ""), (None, None)])
def test_authenticate_missing_fields(app, email, password):
    with pytest.raises(ValidationError):
        authenticate(email, password, now=NOW)


def test_authenticate_bad_email_format(app):
    with pytest.raises(ValidationError) as exc:
        authenticate("not-an-email", "Whatever1!", now=NOW)
    assert exc.value.message == "Invalid email format"


def test_unknown_email_does_not_leak(app):
    with pytest.raises(AuthenticationError) as exc:
        authenticate("ghost@example.com", "Whatever1!", now=NOW)
    assert exc.value.message == "Invalid credentials"


def test_wrong_password_increments(make_user):
    user = make_user()
    with pytest.raises(AuthenticationError) as exc:
        authenticate(user.email, "Wrong1!pass", now=NOW)
    assert not isinstance(exc.value, AccountLockedError)
    assert user_dao.get(user.id).failed_attempts == 1


def test_fifth_failure_locks(make_user):
    user = make_user(failed_attempts=4)
    with pytest.raises(AccountLockedError) as exc:
        authenticate(user.email, "Wrong1!pass", now=NOW)
    assert exc.value.extra == {"failed_attempts": 5}

    stored = user_dao.get(user.id)
    assert stored.failed_attempts == 5
    assert stored.locked_until == NOW + timedelta(minutes=15)


def test_locked_account_rejects_correct_password(make_user):
    user = make_user(failed_attempts=5, locked_until=NOW + timedelta(minutes=10))
    with pytest.raises(AccountLockedError) as exc:
        authenticate(user.email, DEFAULT_PASSWORD, now=NOW)
    assert exc.value.extra["retry_after_seconds"] == 600
    # lock check happens before the password check: counter unchanged
    assert user_dao.get(user.id).failed_attempts == 5


def test_elapsed_lock_allows_login(make_user):
    user = make_user(failed_attempts=5, locked_until=NOW - timedelta(seconds=1))
    assert authenticate(user.email, DEFAULT_PASSWORD, now=NOW).id == user.id
    stored = user_dao.get(user.id)
    assert stored.failed_attempts == 0
    assert stored.locked_until is None


def test_elapsed_lock_restarts_count(make_user):
    user = make_user(failed_attempts=5, locked_until=NOW - timedelta(minutes=1))
    with pytest.raises(AuthenticationError) as exc:
        authenticate(user.email, "Wrong1!pass", now=NOW)
    assert not isinstance(exc.value, AccountLockedError)
    stored = user_dao.get(user.id)
    assert stored.failed_attempts == 1
    assert stored.locked_until is None


# ---- HTTP ----

def test_login_success_sets_cookie_and_returns_token(client, make_user):
    make_user()
    resp = _login(client)
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["token"]
    assert data["user"]["email"] == "ana@example.com"
    assert "password_hash" not in data["user"]
    assert "token=" in resp.headers["Set-Cookie"]
    assert "HttpOnly" in resp.headers["Set-Cookie"]


def test_five_failures_lock_then_423(client, make_user):
    make_user()
    for _ in range(4):
        assert _login(client, password="Wrong1!pass").status_code == 401

    resp = _login(client, password="Wrong1!pass")
    assert resp.status_code == 423
    assert resp.get_json()["error"] == "Account locked. Try later"

    resp = _login(client)
    assert resp.status_code == 423
    assert resp.get_json()["retry_after_seconds"] > 0


def test_login_missing_fields_is_400(client):
    resp = client.post("/api/auth/login", json={"email": "ana@example.com"})
    assert resp.status_code == 400


def test_login_failure_is_audited(client, make_user):
    make_user()
    _login(client, password="Wrong1!pass")
    actions = [row.action for row in AuditLog.query.all()]
    assert "LOGIN_FAIL" in actions


def test_token_authenticates_requests(client, auth_headers):
    headers = auth_headers()
    resp = client.get("/api/auth/users/me", headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()["email"] == "viewer@example.com"


def test_bad_token_is_401(client):
    resp = client.get("/api/auth/users/me", headers={"Authorization": "Bearer nope"})
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "Invalid or expired token"


def test_no_token_is_401(client):
    resp = client.get("/api/auth/users/me")
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "Authentication required"
