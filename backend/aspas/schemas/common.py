# aspas/schemas/common.py
"""
Pydantic schemas shared by several routers (path parameters, pagination query).
"""
import uuid

from pydantic import BaseModel, Field

from aspas.core.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

__all__ = ["IdParams", "UserIdParams", "PageQuery"]


class IdParams(BaseModel):
    """Path parameters of /{id} routes."""
    id: uuid.UUID


class UserIdParams(BaseModel):
    """Path parameters of /user/{userId} routes."""
    userId: uuid.UUID


class PageQuery(BaseModel):
    """
    1-based pagination. Query strings arrive as text and are coerced to int.
    """
    page: int = Field(default=1, gt=0)  # Page number, starting at 1
    limit: int = Field(default=DEFAULT_PAGE_SIZE, gt=0, le=MAX_PAGE_SIZE)  # Items per page (1-100)
