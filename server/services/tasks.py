# server/services/tasks.py

import logging
import uuid
from sqlalchemy import select
from sqlalchemy.orm import Session

from server.core.query import TaskQuery, run_task_query
from server.errors import InvalidId, NotFound
from server.models import Task
from server.schemas import TaskCreate, TaskListParams, TaskOut, TaskUpdate, parse_model


logger = logging.getLogger(__name__)


def parse_task_id(task_id: str) -> str:
    try:
        return uuid.UUID(str(task_id)).hex
    except ValueError:
        raise InvalidId("Invalid task ID") from None


def _owned(db: Session, user_id: str, task_id: str) -> Task:
    # a task owned by someone else is reported exactly like a missing one
    task = db.scalars(
        select(Task).where(Task.id == parse_task_id(task_id), Task.user_id == user_id)
    ).first()
    if task is None:
        raise NotFound("Task not found")
    return task


def list_tasks(db: Session, user_id: str, params: dict) -> dict:
    req = parse_model(TaskListParams, params)
    tasks = run_task_query(db, TaskQuery.from_params(user_id, req))
    return {"count": len(tasks), "tasks": [TaskOut.model_validate(t).to_json() for t in tasks]}


def get_task(db: Session, user_id: str, task_id: str) -> dict:
    return TaskOut.model_validate(_owned(db, user_id, task_id)).to_json()


def create_task(db: Session, user_id: str, data: dict) -> dict:
    req = parse_model(TaskCreate, data)

    task = Task(
        title=req.title,
        description=req.description,
        status=req.status,
        priority=req.priority,
        due_date=req.due_date,
        user_id=user_id,
    )
    db.add(task)
    db.commit()
    db.refresh(task)

    logger.info("User %s created task %s", user_id, task.id)
    return TaskOut.model_validate(task).to_json()


def update_task(db: Session, user_id: str, task_id: str, data: dict) -> dict:
    task_id = parse_task_id(task_id)
    req = parse_model(TaskUpdate, data)
    task = _owned(db, user_id, task_id)

    for column, value in req.changes().items():
        setattr(task, column, value)
    db.commit()
    db.refresh(task)

    logger.info("User %s updated task %s", user_id, task.id)
    return TaskOut.model_validate(task).to_json()


def delete_task(db: Session, user_id: str, task_id: str) -> None:
    task = _owned(db, user_id, task_id)
    db.delete(task)
    db.commit()
    logger.info("User %s deleted task %s", user_id, task_id)
