# aspas/api/routers/projects.py
import uuid

from fastapi import APIRouter, Depends, status

from aspas.api.deps import get_current_user_id
from aspas.core.security import iso_utc
from aspas.core.validation import validate_params, validate_query
from aspas.models.project import Project
from aspas.schemas.common import IdParams
from aspas.schemas.project import ListProjectsQuery, ProjectCreateIn, ProjectUpdateIn
from aspas.services.projects import ProjectService

router = APIRouter(prefix="/projects", tags=["projects"])

service = ProjectService()


def _project_to_dict(p: Project) -> dict:
    return {
        "id": str(p.id),
        "name": p.name,
        "description": p.description,
        "color": p.color,
        "userId": str(p.user_id),
        "taskCount": getattr(p, "task_count", 0),
        "createdAt": iso_utc(p.created_at),
        "updatedAt": iso_utc(p.updated_at),
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(body: ProjectCreateIn, user_id: uuid.UUID = Depends(get_current_user_id)):
    """
    Create a project owned by the caller.

    Args:
        body: name (2-100 chars), optional description (max 500), optional color ("#RRGGBB")

    Returns:
        dict: {message, project}
    """
    p = await service.create(user_id, body)
    return {"message": "Project created successfully", "project": _project_to_dict(p)}


@router.get("")
async def list_projects(
    user_id: uuid.UUID = Depends(get_current_user_id),
    query: ListProjectsQuery = Depends(validate_query(ListProjectsQuery)),
):
    """
    Paginated list of the caller's projects.

    Query:
        page, limit, search (case-insensitive substring of name),
        sortBy (name | createdAt | updatedAt), sortOrder (asc | desc)

    Returns:
        dict: {projects, pagination}
    """
    rows, meta = await service.list_projects(user_id, query)
    return {"projects": [_project_to_dict(p) for p in rows], "pagination": meta}


@router.get("/{id}")
async def get_project(
    user_id: uuid.UUID = Depends(get_current_user_id),
    params: IdParams = Depends(validate_params(IdParams)),
):
    p = await service.get(user_id, params.id)
    return {"project": _project_to_dict(p)}


@router.put("/{id}")
async def update_project(
    body: ProjectUpdateIn,
    user_id: uuid.UUID = Depends(get_current_user_id),
    params: IdParams = Depends(validate_params(IdParams)),
):
    """Partial update: only the fields present in the body change."""
    p = await service.update(user_id, params.id, body)
    return {"message": "Project updated successfully", "project": _project_to_dict(p)}


@router.delete("/{id}")
async def delete_project(
    user_id: uuid.UUID = Depends(get_current_user_id),
    params: IdParams = Depends(validate_params(IdParams)),
):
    """Delete a project together with all of its tasks."""
    return await service.delete(user_id, params.id)
