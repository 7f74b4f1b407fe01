"""Soup schemas shared by the server and client codegen."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic import UUID4

from .common import Pagination
from .users import UserSummary


# ---------------------------------------------------------------------------
# Soup CRUD
# ---------------------------------------------------------------------------

class SoupCreate(BaseModel):
    content: str = Field(min_length=1, max_length=2000)


class SoupUpdate(BaseModel):
    content: Optional[str] = Field(default=None, min_length=1, max_length=2000)

    @field_validator("content")
    @classmethod
    def content_not_null(cls, value: Optional[str]) -> str:
        # Omitting the field leaves it unchanged; null is rejected.
        if value is None:
            raise ValueError("content may be omitted but not null")
        return value


class SoupRead(BaseModel):
    id: UUID4
    content: str
    user_id: UUID4
    user: Optional[UserSummary] = None
    created_at: datetime
    updated_at: datetime


class SoupPage(BaseModel):
    data: List[SoupRead]
    pagination: Pagination


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

class SoupFilter(BaseModel):
    """Optional list filters, combined with AND.

    ``created_at`` is an ``[operator, timestamp]`` pair, e.g. ``[">", "2024-01-01T00:00:00"]``.
    Anything other than exactly two elements leaves the filter off.
    """
    content: Optional[str] = None
    created_at: Optional[List[str]] = None
    username: Optional[str] = None
