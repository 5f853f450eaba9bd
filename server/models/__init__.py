# server/models/__init__.py

import uuid
from datetime import datetime, timezone
from sqlalchemy.orm import declarative_base


Base = declarative_base()


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


from .user import User  # noqa: E402
from .task import Task  # noqa: E402

__all__ = ["Base", "User", "Task", "new_id", "utcnow"]
