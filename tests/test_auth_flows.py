from datetime import timedelta

from dao import user_dao
from models import Comment, Favorite
from security.password import verify_password
from utils.clock import utcnow

SIGNUP = {
    "email": "New.User@Example.com",
    "password": "Str0ng!pass",
    "firstName": "New",
    "lastName": "User",
    "age": 30,
}


def test_signup_creates_user(client):
    resp = client.post("/api/auth/signup", json=SIGNUP)
    assert resp.status_code == 201
    user = resp.get_json()["user"]
    assert user["email"] == "new.user@example.com"
    assert user["firstName"] == "New"

    stored = user_dao.find_by_email("new.user@example.com")
    assert stored.password_hash != SIGNUP["password"]
    assert verify_password(SIGNUP["password"], stored.password_hash)


def test_signup_duplicate_email_is_409(client):
    client.post("/api/auth/signup", json=SIGNUP)
    resp = client.post("/api/auth/signup", json=SIGNUP)
    assert resp.status_code == 409


def test_signup_weak_password(client):
    resp = client.post("/api/auth/signup", json={**SIGNUP, "password": "weak"})
    assert resp.status_code == 400
    assert resp.get_json()["details"]


def test_signup_underage(client):
    resp = client.post("/api/auth/signup", json={**SIGNUP, "age": 12})
    assert resp.status_code == 400


def test_signup_missing_fields(client):
    resp = client.post("/api/auth/signup", json={"email": "a@b.co"})
    assert resp.status_code == 400


def test_logout_clears_cookie(client):
    resp = client.post("/api/auth/logout")
    assert resp.status_code == 200
    assert "token=;" in resp.headers["Set-Cookie"]


def test_forgot_password_same_answer_for_unknown(client, make_user):
    make_user()
    known = client.post("/api/auth/password/forgot", json={"email": "ana@example.com"})
    unknown = client.post("/api/auth/password/forgot", json={"email": "ghost@example.com"})
    assert known.status_code == unknown.status_code == 202
    assert known.get_json() == unknown.get_json()
    assert user_dao.find_by_email("ana@example.com").reset_password_token


def test_reset_password_flow(client, make_user):
    user = make_user()
    user_dao.update(user.id, reset_password_token="tok123", reset_password_expires=utcnow() + timedelta(hours=1))

    assert client.get("/api/auth/password/verify?token=tok123").get_json() == {"valid": True}

    resp = client.post("/api/auth/password/reset", json={"token": "tok123", "newPassword": "An0ther!pass"})
    assert resp.status_code == 200

    stored = user_dao.get(user.id)
    assert stored.reset_password_token is None
    assert verify_password("An0ther!pass", stored.password_hash)
    assert client.get("/api/auth/password/verify?token=tok123").get_json()["valid"] is False


def test_reset_password_expired_token(client, make_user):
    user = make_user()
    user_dao.update(user.id, reset_password_token="old", reset_password_expires=utcnow() - timedelta(minutes=1))
    resp = client.post("/api/auth/password/reset", json={"token": "old", "newPassword": "An0ther!pass"})
    assert resp.status_code == 400


def test_update_profile(client, auth_headers):
    headers = auth_headers()
    resp = client.put(
        "/api/auth/users/me",
        json={"email": "renamed@example.com", "firstName": "Re", "lastName": "Named", "age": 40},
        headers=headers,
    )
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["email"] == "renamed@example.com"
    assert data["age"] == 40
    assert "updatedAt" in data


def test_update_profile_email_taken(client, make_user, auth_headers):
    make_user(email="taken@example.com")
    resp = client.put(
        "/api/auth/users/me",
        json={"email": "taken@example.com", "firstName": "A", "lastName": "B", "age": 20},
        headers=auth_headers(),
    )
    assert resp.status_code == 409


def test_delete_account_requires_confirmation(client, auth_headers):
    headers = auth_headers()
    resp = client.delete("/api/auth/users/me", json={"password": "Sup3r$ecret", "confirmation": "DELETE"},
                         headers=headers)
    assert resp.status_code == 400


def test_delete_account_wrong_password(client, auth_headers):
    resp = client.delete("/api/auth/users/me", json={"password": "Wrong1!pass", "confirmation": "ELIMINAR"},
                         headers=auth_headers())
    assert resp.status_code == 401


def test_delete_account(client, auth_headers):
    headers = auth_headers()
    resp = client.delete("/api/auth/users/me", json={"password": "Sup3r$ecret", "confirmation": "ELIMINAR"},
                         headers=headers)
    assert resp.status_code == 204
    assert user_dao.find_by_email("viewer@example.com") is None
    assert client.get("/api/auth/users/me", headers=headers).status_code == 401


def test_delete_account_removes_user_data(client, auth_headers):
    headers = auth_headers()
    client.post("/api/movies/favorite", json={"movieId": "550"}, headers=headers)
    client.post("/api/comments", json={"movieId": "550", "content": "bye"}, headers=headers)

    resp = client.delete("/api/auth/users/me", json={"password": "Sup3r$ecret", "confirmation": "ELIMINAR"},
                         headers=headers)
    assert resp.status_code == 204
    assert Favorite.query.count() == 0
    assert Comment.query.count() == 0
