# app/forms.py

from datetime import date
from email_validator import EmailNotValidError, validate_email


def _email_error(email: str) -> str | None:
    if not email:
        return "Email is required"
    try:
        validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError:
        return "Email is invalid"
    return None


def validate_registration(name: str, email: str, password: str, confirm_password: str) -> dict:
    """
    Client-side checks before calling the API. Returns field -> message.
    """
    errors = {}

    if not name.strip():
        errors["name"] = "Name is required"
    elif len(name.strip()) > 50:
        errors["name"] = "Name cannot exceed 50 characters"

    email_error = _email_error(email)
    if email_error:
        errors["email"] = email_error

    if not password:
        errors["password"] = "Password is required"
    elif len(password) < 6:
        errors["password"] = "Password must be at least 6 characters"

    if not confirm_password:
        errors["confirmPassword"] = "Please confirm your password"
    elif password != confirm_password:
        errors["confirmPassword"] = "Passwords do not match"

    return errors


def validate_login(email: str, password: str) -> dict:
    errors = {}
    email_error = _email_error(email)
    if email_error:
        errors["email"] = email_error
    if not password:
        errors["password"] = "Password is required"
    return errors


def build_task_payload(title: str, description: str, status: str, priority: str, due_date: date | None) -> tuple[dict, dict]:
    """
    Returns (payload, errors) for the task form. An empty description
    is sent as null so editing can clear it.
    """
    errors = {}
    title = title.strip()
    if not title:
        errors["title"] = "Title is required"
    elif len(title) > 200:
        errors["title"] = "Title cannot exceed 200 characters"

    description = description.strip()
    if len(description) > 1000:
        errors["description"] = "Description cannot exceed 1000 characters"

    payload = {
        "title": title,
        "description": description or None,
        "status": status,
        "priority": priority,
        "dueDate": due_date.isoformat() if due_date else None,
    }
    return payload, errors
