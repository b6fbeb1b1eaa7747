# aspas/schemas/project.py
"""
Pydantic schemas for project endpoints.
"""
from typing import Literal, Optional

from pydantic import BaseModel, constr

from aspas.schemas.common import PageQuery

__all__ = ["ProjectCreateIn", "ProjectUpdateIn", "ListProjectsQuery"]

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class ProjectCreateIn(BaseModel):
    """Request model for creating a project."""
    name: constr(strip_whitespace=True, min_length=2, max_length=100)
    description: Optional[constr(max_length=500)] = None
    color: Optional[constr(pattern=HEX_COLOR)] = None  # "#RRGGBB"


class ProjectUpdateIn(BaseModel):
    """
    Request model for updating a project.
    All fields are optional - only provided fields will be updated.
    """
    name: Optional[constr(strip_whitespace=True, min_length=2, max_length=100)] = None
    description: Optional[constr(max_length=500)] = None
    color: Optional[constr(pattern=HEX_COLOR)] = None


class ListProjectsQuery(PageQuery):
    """Query string of GET /projects."""
    search: Optional[str] = None  # Case-insensitive substring of the name
    sortBy: Literal["name", "createdAt", "updatedAt"] = "createdAt"
    sortOrder: Literal["asc", "desc"] = "desc"
