# server/core/query.py

from dataclasses import dataclass
from typing import Optional
from sqlalchemy import Select, or_, select
from sqlalchemy.orm import Session
from server.models import Task
from server.schemas import TaskListParams


SORT_COLUMNS = {
    "createdAt": Task.created_at,
    "dueDate": Task.due_date,
    "priority": Task.priority,
    "title": Task.title,
}


@dataclass
class TaskQuery:
    user_id: str
    status: Optional[str] = None
    priority: Optional[str] = None
    search: Optional[str] = None
    sort_by: str = "createdAt"
    sort_order: str = "desc"

    @classmethod
    def from_params(cls, user_id: str, params: TaskListParams) -> "TaskQuery":
        return cls(
            user_id=user_id,
            status=params.status,
            priority=params.priority,
            search=params.search,
            sort_by=params.sort_by,
            sort_order=params.sort_order,
        )


def build_task_query(query: TaskQuery) -> Select:
    """
    Owner-scoped select for the task list.

    status/priority are exact matches, search is a case-insensitive literal
    substring of title or description. Priority sorts on the stored string
    (high < low < medium), not on severity.
    """
    stmt = select(Task).where(Task.user_id == query.user_id)

    if query.status:
        stmt = stmt.where(Task.status == query.status)
    if query.priority:
        stmt = stmt.where(Task.priority == query.priority)
    if query.search:
        stmt = stmt.where(or_(
            Task.title.icontains(query.search, autoescape=True),
            Task.description.icontains(query.search, autoescape=True),
        ))

    column = SORT_COLUMNS[query.sort_by]
    ordering = column.asc() if query.sort_order == "asc" else column.desc()
    return stmt.order_by(ordering, Task.id)


def run_task_query(db: Session, query: TaskQuery) -> list[Task]:
    return list(db.scalars(build_task_query(query)).all())
