# server/errors.py

from dataclasses import asdict, dataclass


@dataclass
class FieldError:
    field: str
    message: str


class AppError(Exception):
    """
    Base class for failures that map onto an HTTP response.
    """
    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"message": self.message}


class ValidationError(AppError):
    status_code = 400
    message = "Validation failed"

    def __init__(self, errors: list[FieldError], message: str | None = None):
        super().__init__(message)
        self.errors = errors

    def to_dict(self) -> dict:
        return {"message": self.message, "errors": [asdict(e) for e in self.errors]}


class Unauthenticated(AppError):
    status_code = 401
    message = "Not authorized to access this route. Please login."


class InvalidCredentials(AppError):
    status_code = 401
    message = "Invalid email or password"


class DuplicateEmail(AppError):
    status_code = 400
    message = "Email is already registered"


class NotFound(AppError):
    status_code = 404
    message = "Not found"


class InvalidId(AppError):
    status_code = 400
    message = "Invalid id"


class InvalidToken(Exception):
    """Raised by the token service; never surfaced to clients directly."""


class ConfigurationError(RuntimeError):
    """Fatal misconfiguration detected while building the application."""
