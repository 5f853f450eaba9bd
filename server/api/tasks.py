# server/api/tasks.py

from fastapi import APIRouter, Body, Depends, Request, status
from sqlalchemy.orm import Session

from server.api.deps import get_current_user
from server.database import get_db
from server.models import User
from server.services import tasks as task_service


# -------------------------------
# Router
# -------------------------------

# Every task route is owner-scoped; the gate runs before any handler.
router = APIRouter(prefix="/tasks", tags=["tasks"], dependencies=[Depends(get_current_user)])

LIST_PARAMS = ("status", "priority", "search", "sortBy", "sortOrder")


@router.get("")
def list_tasks(request: Request, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Lists the caller's tasks. Query: status, priority, search, sortBy, sortOrder.
    """
    params = {k: v for k, v in request.query_params.items() if k in LIST_PARAMS}
    return task_service.list_tasks(db, current_user.id, params)


@router.get("/{task_id}")
def read_task(task_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"task": task_service.get_task(db, current_user.id, task_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_task(
    data: dict = Body(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    task = task_service.create_task(db, current_user.id, data)
    return {"message": "Task created successfully", "task": task}


@router.put("/{task_id}")
def update_task(
    task_id: str,
    data: dict = Body(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    task = task_service.update_task(db, current_user.id, task_id, data)
    return {"message": "Task updated successfully", "task": task}


@router.delete("/{task_id}")
def delete_task(task_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    task_service.delete_task(db, current_user.id, task_id)
    return {"message": "Task deleted successfully"}
