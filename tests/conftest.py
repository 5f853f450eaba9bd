# tests/conftest.py

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from server.config import Settings
from server.main import create_app


@pytest.fixture()
def settings() -> Settings:
    """
    In-memory database and the cheapest bcrypt cost so the suite stays fast.
    """
    return Settings(
        jwt_secret="test-secret",
        database_url="sqlite://",
        bcrypt_rounds=4,
        environment="test",
    )


@pytest.fixture()
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture()
def client(app) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture()
def db(app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_user(client: TestClient):
    """
    Registers an account through the API and returns (token, user, headers).
    """

    def _make(name: str = "Ann", email: str = "ann@x.com", password: str = "secret1"):
        res = client.post("/auth/register", json={"name": name, "email": email, "password": password})
        assert res.status_code == 201, res.text
        body = res.json()
        headers = {"Authorization": f"Bearer {body['token']}"}
        return body["token"], body["user"], headers

    return _make
