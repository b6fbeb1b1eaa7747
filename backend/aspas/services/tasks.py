# aspas/services/tasks.py
"""
Task service. A task always points at a project owned by the same user; that
is checked on create, on re-pointing and when filtering by project.
"""
from tortoise.expressions import Case, When

from aspas.core.errors import AppError, ErrorKind
from aspas.core.pagination import paginate
from aspas.core.security import utc_now
from aspas.models.task import Priority, Task
from aspas.schemas.task import ListTasksQuery, TaskCreateIn, TaskUpdateIn
from aspas.services.projects import ProjectService, order_clause

SORT_FIELDS = {
    "title": "title",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "dueDate": "due_date",
    "priority": "priority_rank",
}

# API field -> model column
_COLUMNS = {
    "title": "title",
    "description": "description",
    "completed": "completed",
    "dueDate": "due_date",
    "priority": "priority",
    "projectId": "project_id",
}
_REQUIRED = {"title", "completed", "priority", "projectId"}

# Severity order; the column itself holds the enum names
PRIORITY_RANK = {Priority.LOW: 0, Priority.MEDIUM: 1, Priority.HIGH: 2}


def _with_priority_rank(qs):
    return qs.annotate(
        priority_rank=Case(
            *(When(priority=p, then=rank) for p, rank in PRIORITY_RANK.items()),
            default=0,
        )
    )


class TaskService:
    def __init__(self, projects: ProjectService | None = None):
        self.projects = projects or ProjectService()

    async def create(self, user_id, data: TaskCreateIn) -> Task:
        await self.projects.ensure_owned(user_id, data.projectId)
        task = await Task.create(
            title=data.title,
            description=data.description,
            completed=data.completed,
            due_date=data.dueDate,
            priority=data.priority,
            project_id=data.projectId,
            user_id=user_id,
        )
        return await self.get(user_id, task.id)

    async def list_tasks(self, user_id, query: ListTasksQuery) -> tuple[list[Task], dict]:
        qs = Task.filter(user_id=user_id)
        if query.search:
            qs = qs.filter(title__icontains=query.search)
        if query.completed is not None:
            qs = qs.filter(completed=query.completed)
        if query.priority:
            qs = qs.filter(priority=query.priority)
        if query.projectId:
            await self.projects.ensure_owned(user_id, query.projectId)
            qs = qs.filter(project_id=query.projectId)

        ordering = order_clause(query.sortBy, query.sortOrder, SORT_FIELDS)
        ordered = _with_priority_rank(qs).order_by(ordering).prefetch_related("project")
        return await paginate(ordered, query.page, query.limit, total_qs=qs)

    async def get(self, user_id, task_id) -> Task:
        task = await Task.filter(id=task_id, user_id=user_id).prefetch_related("project").first()
        if task is None:
            raise AppError(ErrorKind.TASK_NOT_FOUND)
        return task

    async def update(self, user_id, task_id, data: TaskUpdateIn) -> Task:
        task = await self.get(user_id, task_id)
        changes = {
            _COLUMNS[k]: v for k, v in data.model_dump(exclude_unset=True).items()
            if not (k in _REQUIRED and v is None)
        }
        new_project = changes.get("project_id")
        if new_project is not None and str(new_project) != str(task.project_id):
            await self.projects.ensure_owned(user_id, new_project)
        if changes:
            await Task.filter(id=task.id).update(**changes, updated_at=utc_now())
        return await self.get(user_id, task.id)

    async def delete(self, user_id, task_id) -> dict:
        task = await self.get(user_id, task_id)
        await Task.filter(id=task.id).delete()
        return {"message": "Task deleted successfully"}
