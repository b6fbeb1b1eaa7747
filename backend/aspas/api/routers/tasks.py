# aspas/api/routers/tasks.py
import uuid

from fastapi import APIRouter, Depends, status

from aspas.api.deps import get_current_user_id
from aspas.core.security import iso_utc
from aspas.core.validation import validate_params, validate_query
from aspas.models.task import Task
from aspas.schemas.common import IdParams
from aspas.schemas.task import ListTasksQuery, TaskCreateIn, TaskUpdateIn
from aspas.services.tasks import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])

service = TaskService()


def _task_to_dict(t: Task) -> dict:
    project = t.project
    return {
        "id": str(t.id),
        "title": t.title,
        "description": t.description,
        "completed": t.completed,
        "dueDate": iso_utc(t.due_date),
        "priority": t.priority.value,
        "projectId": str(t.project_id),
        "userId": str(t.user_id),
        "createdAt": iso_utc(t.created_at),
        "updatedAt": iso_utc(t.updated_at),
        "project": {"id": str(project.id), "name": project.name, "color": project.color},
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(body: TaskCreateIn, user_id: uuid.UUID = Depends(get_current_user_id)):
    """
    Create a task inside one of the caller's projects.

    Error codes:
        - VALIDATION_ERROR (400)
        - PROJECT_NOT_FOUND (404): projectId missing or owned by someone else
    """
    t = await service.create(user_id, body)
    return {"message": "Task created successfully", "task": _task_to_dict(t)}


@router.get("")
async def list_tasks(
    user_id: uuid.UUID = Depends(get_current_user_id),
    query: ListTasksQuery = Depends(validate_query(ListTasksQuery)),
):
    """
    Paginated list of the caller's tasks.

    Query:
        page, limit, search (title substring), completed, priority, projectId,
        sortBy (title | createdAt | updatedAt | dueDate | priority), sortOrder
    """
    rows, meta = await service.list_tasks(user_id, query)
    return {"tasks": [_task_to_dict(t) for t in rows], "pagination": meta}


@router.get("/{id}")
async def get_task(
    user_id: uuid.UUID = Depends(get_current_user_id),
    params: IdParams = Depends(validate_params(IdParams)),
):
    t = await service.get(user_id, params.id)
    return {"task": _task_to_dict(t)}


@router.put("/{id}")
async def update_task(
    body: TaskUpdateIn,
    user_id: uuid.UUID = Depends(get_current_user_id),
    params: IdParams = Depends(validate_params(IdParams)),
):
    """Partial update; moving the task to another project re-checks ownership."""
    t = await service.update(user_id, params.id, body)
    return {"message": "Task updated successfully", "task": _task_to_dict(t)}


@router.delete("/{id}")
async def delete_task(
    user_id: uuid.UUID = Depends(get_current_user_id),
    params: IdParams = Depends(validate_params(IdParams)),
):
    return await service.delete(user_id, params.id)
