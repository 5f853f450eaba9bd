# tests/test_auth_api.py

from __future__ import annotations

from datetime import timedelta

from server.models import User


def test_register_returns_token_and_public_user(client) -> None:
    res = client.post("/auth/register", json={"name": "Ann", "email": "Ann@X.com", "password": "secret1"})

    assert res.status_code == 201
    body = res.json()
    assert body["token"]
    user = body["user"]
    assert user["name"] == "Ann"
    assert user["email"] == "ann@x.com"
    assert "password" not in user and "hashedPassword" not in user
    assert set(user) == {"id", "name", "email", "avatar", "createdAt", "updatedAt"}


def test_password_is_stored_hashed(client, db) -> None:
    client.post("/auth/register", json={"name": "Ann", "email": "ann@x.com", "password": "secret1"})

    stored = db.query(User).one()
    assert stored.hashed_password != "secret1"
    assert stored.hashed_password.startswith("$2")


def test_register_then_login(client, make_user) -> None:
    _, user, _ = make_user()

    res = client.post("/auth/login", json={"email": "ann@x.com", "password": "secret1"})

    assert res.status_code == 200
    assert res.json()["user"]["id"] == user["id"]
    assert "password" not in res.json()["user"]


def test_duplicate_email_is_rejected(client, make_user) -> None:
    make_user()

    res = client.post("/auth/register", json={"name": "Other", "email": "ANN@x.com", "password": "different"})

    assert res.status_code == 400
    assert res.json()["message"] == "Email is already registered"


def test_register_reports_each_bad_field(client) -> None:
    res = client.post("/auth/register", json={"name": "  ", "email": "nope", "password": "123"})

    assert res.status_code == 400
    errors = {e["field"]: e["message"] for e in res.json()["errors"]}
    assert errors == {
        "name": "Name is required",
        "email": "Please provide a valid email",
        "password": "Password must be at least 6 characters",
    }


def test_register_name_length_limit(client) -> None:
    res = client.post("/auth/register", json={"name": "x" * 51, "email": "ann@x.com", "password": "secret1"})

    assert res.status_code == 400
    assert res.json()["errors"] == [{"field": "name", "message": "Name cannot exceed 50 characters"}]


def test_login_failure_is_generic(client, make_user) -> None:
    make_user()

    wrong_password = client.post("/auth/login", json={"email": "ann@x.com", "password": "wrong-one"})
    unknown_email = client.post("/auth/login", json={"email": "bob@x.com", "password": "secret1"})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"message": "Invalid email or password"}


def test_me_returns_current_user(client, make_user) -> None:
    _, user, headers = make_user()

    res = client.get("/auth/me", headers=headers)

    assert res.status_code == 200
    assert res.json()["user"] == user


def test_protected_routes_require_token(client) -> None:
    for method, path in [
        ("GET", "/auth/me"),
        ("GET", "/profile"),
        ("PUT", "/profile"),
        ("GET", "/tasks"),
        ("POST", "/tasks"),
        ("GET", "/tasks/0123456789abcdef0123456789abcdef"),
        ("PUT", "/tasks/0123456789abcdef0123456789abcdef"),
        ("DELETE", "/tasks/0123456789abcdef0123456789abcdef"),
    ]:
        res = client.request(method, path, json={})
        assert res.status_code == 401, (method, path)
        assert "message" in res.json()


def test_expired_token_is_rejected(app, client, make_user, db) -> None:
    _, user, _ = make_user()
    expired = app.state.tokens.issue(user["id"], expires_in=timedelta(seconds=-5))

    res = client.post(
        "/tasks",
        json={"title": "Should not exist"},
        headers={"Authorization": f"Bearer {expired}"},
    )

    assert res.status_code == 401
    assert db.query(User).one().tasks == []


def test_malformed_bearer_header_is_rejected(client) -> None:
    res = client.get("/auth/me", headers={"Authorization": "Bearer garbage"})
    assert res.status_code == 401

    res = client.get("/auth/me", headers={"Authorization": "Basic abc"})
    assert res.status_code == 401


def test_token_for_deleted_user_is_rejected(client, make_user, db) -> None:
    _, _, headers = make_user()
    db.query(User).delete()
    db.commit()

    res = client.get("/auth/me", headers=headers)

    assert res.status_code == 401
