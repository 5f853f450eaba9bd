# tests/test_session.py

from __future__ import annotations

import json

import pytest

from app.services.api import ApiClient, ApiError, Unauthorized
from app.session import ClientSession, SessionState
from server.models import User


class CookieJar(dict):
    """dict with the save() hook the encrypted cookie manager exposes."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.saves = 0

    def save(self) -> None:
        self.saves += 1


@pytest.fixture()
def storage() -> CookieJar:
    return CookieJar()


@pytest.fixture()
def session(client, storage):
    s = ClientSession(ApiClient(base_url="", http=client), storage)
    yield s
    s.teardown()


def test_starts_anonymous_without_persisted_identity(session) -> None:
    assert session.init() is None
    assert session.state is SessionState.ANONYMOUS
    assert not session.is_authenticated


def test_register_authenticates_and_persists(session, storage) -> None:
    result = session.register("Ann", "ann@x.com", "secret1")

    assert result.success
    assert session.state is SessionState.AUTHENTICATED
    assert storage["token"] == session.token
    assert json.loads(storage["user"])["email"] == "ann@x.com"
    assert storage.saves >= 1


def test_failed_login_stays_anonymous(session, storage) -> None:
    session.register("Ann", "ann@x.com", "secret1")
    session.logout()

    result = session.login("ann@x.com", "wrong-password")

    assert not result.success
    assert result.message == "Invalid email or password"
    assert session.state is SessionState.ANONYMOUS
    assert "token" not in storage


def test_register_surfaces_field_errors(session) -> None:
    result = session.register("", "bad", "1")

    assert not result.success
    assert set(result.errors) == {"name", "email", "password"}


def test_requests_carry_the_token(session) -> None:
    session.register("Ann", "ann@x.com", "secret1")

    task = session.api.create_task({"title": "Write spec"})
    listing = session.api.list_tasks(sort_by="title", sort_order="asc")

    assert listing["count"] == 1
    assert listing["tasks"][0]["id"] == task["id"]
    assert session.api.get_profile()["name"] == "Ann"


def test_restore_then_background_verify(client, storage) -> None:
    first = ClientSession(ApiClient(base_url="", http=client), storage)
    first.register("Ann", "ann@x.com", "secret1")

    restored = ClientSession(ApiClient(base_url="", http=client), storage)
    future = restored.init()

    # optimistic: authenticated before verification completes
    assert restored.state is SessionState.AUTHENTICATED
    assert restored.user["name"] == "Ann"
    assert future.result(timeout=10)["email"] == "ann@x.com"
    assert restored.apply_verification(wait=True) is False
    assert restored.is_authenticated
    assert storage["token"] == restored.token
    restored.teardown()


def test_failed_verify_clears_identity(session, storage) -> None:
    storage["token"] = "expired.or.tampered"
    storage["user"] = json.dumps({"id": "x", "name": "Ann"})

    future = session.init()

    assert future.result(timeout=10) is None
    # the worker thread only reports; storage is untouched until applied
    assert session.is_authenticated
    assert storage["token"] == "expired.or.tampered"

    assert session.apply_verification() is True
    assert session.state is SessionState.ANONYMOUS
    assert session.user is None
    assert "token" not in storage and "user" not in storage


def test_unreadable_cached_user_is_discarded(session, storage) -> None:
    storage["token"] = "abc"
    storage["user"] = "{not json"

    assert session.init() is None
    assert session.state is SessionState.ANONYMOUS
    assert storage == {}


def test_any_401_signs_out(session, storage, db) -> None:
    session.register("Ann", "ann@x.com", "secret1")
    db.query(User).delete()
    db.commit()

    with pytest.raises(Unauthorized):
        session.api.list_tasks()

    assert session.state is SessionState.ANONYMOUS
    assert "token" not in storage


def test_update_user_refreshes_cache(session, storage) -> None:
    session.register("Ann", "ann@x.com", "secret1")

    updated = session.api.update_profile(name="Ann B")
    session.update_user(updated)

    assert session.user["name"] == "Ann B"
    assert json.loads(storage["user"])["name"] == "Ann B"


def test_not_found_is_an_api_error(session) -> None:
    session.register("Ann", "ann@x.com", "secret1")

    with pytest.raises(ApiError) as exc:
        session.api.get_task("0" * 32)

    assert exc.value.status_code == 404
    assert session.is_authenticated


def test_verification_error_is_collected_and_signs_out(session, storage, monkeypatch) -> None:
    storage["token"] = "tok"
    storage["user"] = json.dumps({"id": "x", "name": "Ann"})

    def broken_me(token=None):
        raise RuntimeError("decoder blew up")

    monkeypatch.setattr(session.api, "me", broken_me)

    session.init()

    assert session.apply_verification(wait=True) is True
    assert session.state is SessionState.ANONYMOUS
    assert storage == {}


def test_pending_verification_is_not_applied_early(session, storage, monkeypatch) -> None:
    import threading

    release = threading.Event()

    def slow_me(token=None):
        release.wait(timeout=10)
        return None

    monkeypatch.setattr(session.api, "me", slow_me)
    storage["token"] = "tok"
    storage["user"] = json.dumps({"id": "x", "name": "Ann"})

    session.init()

    assert session.apply_verification() is False
    assert session.is_authenticated
    release.set()


def test_stale_verification_does_not_undo_a_new_login(client, storage) -> None:
    first = ClientSession(ApiClient(base_url="", http=client), storage)
    first.register("Ann", "ann@x.com", "secret1")
    storage["token"] = "stale-token"

    session = ClientSession(ApiClient(base_url="", http=client), storage)
    future = session.init()
    future.result(timeout=10)
    assert session.login("ann@x.com", "secret1").success

    assert session.apply_verification() is False
    assert session.is_authenticated
    assert storage["token"] == session.token != "stale-token"
    session.teardown()
