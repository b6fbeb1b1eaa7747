# aspas/schemas/task.py
"""
Pydantic schemas for task endpoints.
"""
import datetime as dt
import uuid
from typing import Literal, Optional

from pydantic import BaseModel, constr

from aspas.models.task import Priority
from aspas.schemas.common import PageQuery

__all__ = ["TaskCreateIn", "TaskUpdateIn", "ListTasksQuery"]


class TaskCreateIn(BaseModel):
    """
    Request model for creating a task.
    The referenced project must belong to the caller.
    """
    title: constr(strip_whitespace=True, min_length=2, max_length=200)
    description: Optional[constr(max_length=1000)] = None
    completed: bool = False
    dueDate: Optional[dt.datetime] = None  # ISO 8601
    priority: Priority = Priority.MEDIUM
    projectId: uuid.UUID


class TaskUpdateIn(BaseModel):
    """
    Request model for updating a task.
    All fields are optional; changing projectId re-checks project ownership.
    """
    title: Optional[constr(strip_whitespace=True, min_length=2, max_length=200)] = None
    description: Optional[constr(max_length=1000)] = None
    completed: Optional[bool] = None
    dueDate: Optional[dt.datetime] = None
    priority: Optional[Priority] = None
    projectId: Optional[uuid.UUID] = None


class ListTasksQuery(PageQuery):
    """Query string of GET /tasks. Filters apply only when given."""
    search: Optional[str] = None  # Case-insensitive substring of the title
    completed: Optional[bool] = None
    priority: Optional[Priority] = None
    projectId: Optional[uuid.UUID] = None
    sortBy: Literal["title", "createdAt", "updatedAt", "dueDate", "priority"] = "createdAt"
    sortOrder: Literal["asc", "desc"] = "desc"
