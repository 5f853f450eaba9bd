# server/schemas.py

from datetime import datetime, timezone
from typing import Any, Optional
from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, ValidationError as PydanticValidationError, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from server.errors import FieldError, ValidationError
from server.models.task import PRIORITIES, STATUSES


SORT_FIELDS = ("createdAt", "dueDate", "priority", "title")
SORT_ORDERS = ("asc", "desc")


# -------------------------------
# Field checks
# -------------------------------

def _fail(message: str):
    raise PydanticCustomError("value_error", message)


def clean_text(value: Any, label: str, max_length: int, required: bool = False) -> Optional[str]:
    if value is None:
        if required:
            _fail(f"{label} is required")
        return None
    if not isinstance(value, str):
        _fail(f"{label} must be a string")
    value = value.strip()
    if required and not value:
        _fail(f"{label} is required")
    if len(value) > max_length:
        _fail(f"{label} cannot exceed {max_length} characters")
    return value


def clean_email(value: Any) -> str:
    if not value:
        _fail("Email is required")
    if not isinstance(value, str):
        _fail("Please provide a valid email")
    try:
        info = validate_email(value.strip(), check_deliverability=False)
    except EmailNotValidError:
        _fail("Please provide a valid email")
    return info.normalized.lower()


def parse_due_date(value: Any) -> Optional[datetime]:
    """
    Accepts ISO-8601 dates and datetimes ("2026-01-31", "2026-01-31T09:00:00Z").
    Aware values are stored as naive UTC.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            _fail("Invalid date format")
    else:
        _fail("Invalid date format")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def check_choice(value: Any, choices: tuple, message: str) -> str:
    if value not in choices:
        _fail(message)
    return value


def parse_model(model: type[BaseModel], data: Any) -> BaseModel:
    """
    Validates ``data`` against ``model`` and re-raises pydantic failures
    as a ValidationError carrying one {field, message} entry per problem.
    """
    if not isinstance(data, dict):
        raise ValidationError([FieldError(field="body", message="Request body must be a JSON object")])
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(field_errors(exc.errors())) from None


def field_errors(errors) -> list[FieldError]:
    result = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query")]
        name = ".".join(loc) or "body"
        message = err.get("msg", "Invalid value")
        if err.get("type") == "missing":
            message = f"{name} is required"
        result.append(FieldError(field=name, message=message))
    return result


class _Input(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -------------------------------
# Auth / Profile
# -------------------------------

class RegisterRequest(_Input):
    model_config = ConfigDict(validate_default=True)

    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v):
        return clean_text(v, "Name", 50, required=True)

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, v):
        return clean_email(v)

    @field_validator("password", mode="before")
    @classmethod
    def _password(cls, v):
        if not v:
            _fail("Password is required")
        if not isinstance(v, str):
            _fail("Password must be a string")
        if len(v) < 6:
            _fail("Password must be at least 6 characters")
        return v


class LoginRequest(_Input):
    model_config = ConfigDict(validate_default=True)

    email: Optional[str] = None
    password: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, v):
        return clean_email(v)

    @field_validator("password", mode="before")
    @classmethod
    def _password(cls, v):
        if not v or not isinstance(v, str):
            _fail("Password is required")
        return v


class ProfileUpdate(_Input):
    name: Optional[str] = None
    email: Optional[str] = None
    avatar: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v):
        if v is None:
            _fail("Name cannot be empty")
        value = clean_text(v, "Name", 50)
        if not value:
            _fail("Name cannot be empty")
        return value

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, v):
        return clean_email(v)

    @field_validator("avatar", mode="before")
    @classmethod
    def _avatar(cls, v):
        if v is not None and not isinstance(v, str):
            _fail("Avatar must be a string")
        return v or None


# -------------------------------
# Tasks
# -------------------------------

class TaskCreate(_Input):
    model_config = ConfigDict(validate_default=True)

    title: Optional[str] = None
    description: Optional[str] = None
    status: str = "todo"
    priority: str = "medium"
    due_date: Optional[datetime] = None

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, v):
        return clean_text(v, "Task title", 200, required=True)

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v):
        return clean_text(v, "Description", 1000)

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, v):
        return check_choice(v, STATUSES, "Invalid status")

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, v):
        return check_choice(v, PRIORITIES, "Invalid priority")

    @field_validator("due_date", mode="before")
    @classmethod
    def _due_date(cls, v):
        return parse_due_date(v)


class TaskUpdate(_Input):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    due_date: Optional[datetime] = None

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, v):
        value = clean_text(v, "Title", 200)
        if not value:
            _fail("Title cannot be empty")
        return value

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v):
        return clean_text(v, "Description", 1000)

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, v):
        return check_choice(v, STATUSES, "Invalid status")

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, v):
        return check_choice(v, PRIORITIES, "Invalid priority")

    @field_validator("due_date", mode="before")
    @classmethod
    def _due_date(cls, v):
        return parse_due_date(v)

    def changes(self) -> dict:
        """Only the fields the caller actually sent, keyed by column name."""
        return self.model_dump(include=self.model_fields_set)


class TaskListParams(_Input):
    status: Optional[str] = None
    priority: Optional[str] = None
    search: Optional[str] = None
    sort_by: str = "createdAt"
    sort_order: str = "desc"

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, v):
        if v in (None, ""):
            return None
        return check_choice(v, STATUSES, "Invalid status")

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, v):
        if v in (None, ""):
            return None
        return check_choice(v, PRIORITIES, "Invalid priority")

    @field_validator("search", mode="before")
    @classmethod
    def _search(cls, v):
        if v is None:
            return None
        if not isinstance(v, str):
            _fail("Search must be a string")
        return v.strip() or None

    @field_validator("sort_by", mode="before")
    @classmethod
    def _sort_by(cls, v):
        return check_choice(v, SORT_FIELDS, "Invalid sortBy value")

    @field_validator("sort_order", mode="before")
    @classmethod
    def _sort_order(cls, v):
        return check_choice(v, SORT_ORDERS, "Invalid sortOrder value")


# -------------------------------
# Responses
# -------------------------------

class _Output(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class UserOut(_Output):
    id: str
    name: str
    email: str
    avatar: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TaskOut(_Output):
    id: str
    title: str
    description: Optional[str] = None
    status: str
    priority: str
    due_date: Optional[datetime] = None
    user_id: str
    created_at: datetime
    updated_at: datetime
