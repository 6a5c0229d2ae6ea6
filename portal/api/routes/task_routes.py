"""
Task Routes

GET /tasks - Caller's tasks
POST /tasks - Create a task
PUT /tasks/{task_id} - Update a task (any task id, not only the caller's)
"""

from fastapi import APIRouter, HTTPException, Depends
from typing import List

from portal.core.auth import get_current_user
from portal.models import utcnow
from portal.services.storage_service import get_storage
from portal.schemas.schemas import TaskCreate, TaskUpdate, TaskResponse

router = APIRouter(prefix="/tasks", tags=["Tasks"])


@router.get("", response_model=List[TaskResponse])
def list_tasks(user: dict = Depends(get_current_user)):
    return get_storage().get_user_tasks(user["user_id"])


@router.post("", response_model=TaskResponse, status_code=201)
def create_task(data: TaskCreate, user: dict = Depends(get_current_user)):
    storage = get_storage()
    if data.application_id is not None and not storage.get_application(data.application_id):
        raise HTTPException(status_code=404, detail="Application not found")
    return storage.create_task({**data.model_dump(), "user_id": user["user_id"]})


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(task_id: int, data: TaskUpdate, user: dict = Depends(get_current_user)):
    values = data.model_dump(exclude_unset=True)
    if values.get("is_completed") is not None:
        values["completed_at"] = utcnow() if values["is_completed"] else None

    task = get_storage().update_task(task_id, values)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task
