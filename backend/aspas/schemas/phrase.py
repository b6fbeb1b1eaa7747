# aspas/schemas/phrase.py
"""
Pydantic schemas for the (legacy) phrase endpoints.
"""
import uuid
from typing import List, Optional

from pydantic import BaseModel, Field, constr

from aspas.schemas.common import PageQuery

__all__ = ["PhraseCreateIn", "PhraseUpdateIn", "ListPhrasesQuery", "PhraseFiltersQuery"]

Tag = constr(strip_whitespace=True, min_length=1)


class PhraseCreateIn(BaseModel):
    """Request model for creating a phrase owned by the caller."""
    phrase: constr(strip_whitespace=True, min_length=5, max_length=1000)
    author: constr(strip_whitespace=True, min_length=2, max_length=100)
    tags: List[Tag] = Field(default_factory=list, max_length=10)  # At most 10 non-empty tags


class PhraseUpdateIn(BaseModel):
    """All fields optional - only provided fields will be updated."""
    phrase: Optional[constr(strip_whitespace=True, min_length=5, max_length=1000)] = None
    author: Optional[constr(strip_whitespace=True, min_length=2, max_length=100)] = None
    tags: Optional[List[Tag]] = Field(default=None, max_length=10)


class ListPhrasesQuery(PageQuery):
    """Query string of GET /phrases."""
    userId: Optional[uuid.UUID] = None
    tag: Optional[constr(strip_whitespace=True, min_length=1, max_length=50)] = None
    author: Optional[constr(strip_whitespace=True, min_length=1, max_length=100)] = None
    search: Optional[constr(strip_whitespace=True, min_length=1, max_length=200)] = None


class PhraseFiltersQuery(BaseModel):
    """Query string of the distinct authors / tags endpoints."""
    userId: Optional[uuid.UUID] = None
