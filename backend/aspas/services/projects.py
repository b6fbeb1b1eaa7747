# aspas/services/projects.py
"""
Project service. Every query is scoped by owner; another user's project is
reported as PROJECT_NOT_FOUND.
"""
from tortoise.functions import Count
from tortoise.transactions import in_transaction

from aspas.core.errors import AppError, ErrorKind
from aspas.core.pagination import paginate
from aspas.core.security import utc_now
from aspas.models.project import Project
from aspas.models.task import Task
from aspas.schemas.project import ListProjectsQuery, ProjectCreateIn, ProjectUpdateIn

SORT_FIELDS = {"name": "name", "createdAt": "created_at", "updatedAt": "updated_at"}

# Columns that cannot be cleared by sending null
_REQUIRED = {"name"}


def order_clause(sort_by: str, sort_order: str, fields: dict[str, str]) -> str:
    column = fields[sort_by]
    return f"-{column}" if sort_order == "desc" else column


class ProjectService:
    @staticmethod
    def _with_task_count(qs):
        return qs.annotate(task_count=Count("tasks"))

    async def ensure_owned(self, user_id, project_id) -> Project:
        """Plain ownership check (no aggregate), used by the task service."""
        project = await Project.get_or_none(id=project_id, user_id=user_id)
        if project is None:
            raise AppError(ErrorKind.PROJECT_NOT_FOUND)
        return project

    async def create(self, user_id, data: ProjectCreateIn) -> Project:
        project = await Project.create(user_id=user_id, **data.model_dump())
        return await self.get(user_id, project.id)

    async def list_projects(self, user_id, query: ListProjectsQuery) -> tuple[list[Project], dict]:
        qs = Project.filter(user_id=user_id)
        if query.search:
            qs = qs.filter(name__icontains=query.search)
        ordered = self._with_task_count(qs).order_by(order_clause(query.sortBy, query.sortOrder, SORT_FIELDS))
        return await paginate(ordered, query.page, query.limit, total_qs=qs)

    async def get(self, user_id, project_id) -> Project:
        project = await self._with_task_count(Project.filter(id=project_id, user_id=user_id)).first()
        if project is None:
            raise AppError(ErrorKind.PROJECT_NOT_FOUND)
        return project

    async def update(self, user_id, project_id, data: ProjectUpdateIn) -> Project:
        project = await self.ensure_owned(user_id, project_id)
        changes = {
            k: v for k, v in data.model_dump(exclude_unset=True).items()
            if not (k in _REQUIRED and v is None)
        }
        if changes:
            await Project.filter(id=project.id).update(**changes, updated_at=utc_now())
        return await self.get(user_id, project.id)

    async def delete(self, user_id, project_id) -> dict:
        project = await self.ensure_owned(user_id, project_id)
        # Delete tasks first, then the project (FK cascades too, explicit is clearer)
        async with in_transaction() as conn:
            await Task.filter(project_id=project.id).using_db(conn).delete()
            await Project.filter(id=project.id).using_db(conn).delete()
        return {"message": "Project deleted successfully"}
