# tests/test_forms.py

from __future__ import annotations

from datetime import date

from app.forms import build_task_payload, validate_login, validate_registration


def test_valid_registration_has_no_errors() -> None:
    assert validate_registration("Ann", "ann@x.com", "secret1", "secret1") == {}


def test_registration_errors() -> None:
    errors = validate_registration(" ", "ann@", "123", "456")

    assert errors == {
        "name": "Name is required",
        "email": "Email is invalid",
        "password": "Password must be at least 6 characters",
        "confirmPassword": "Passwords do not match",
    }


def test_registration_requires_confirmation() -> None:
    errors = validate_registration("Ann", "ann@x.com", "secret1", "")

    assert errors == {"confirmPassword": "Please confirm your password"}


def test_login_form() -> None:
    assert validate_login("", "") == {"email": "Email is required", "password": "Password is required"}
    assert validate_login("ann@x.com", "secret1") == {}


def test_task_payload() -> None:
    payload, errors = build_task_payload("  Title ", "", "todo", "high", date(2026, 12, 1))

    assert errors == {}
    assert payload == {
        "title": "Title",
        "description": None,
        "status": "todo",
        "priority": "high",
        "dueDate": "2026-12-01",
    }


def test_task_payload_errors() -> None:
    _, errors = build_task_payload("", "d" * 1001, "todo", "low", None)

    assert set(errors) == {"title", "description"}
