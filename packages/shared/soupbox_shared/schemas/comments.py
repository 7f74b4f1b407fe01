"""Comment schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, UUID4

from .common import CommentType, Pagination
from .users import UserSummary


class CommentForm(BaseModel):
    """Request body for posting a comment on any commentable entity."""
    content: str = Field(min_length=1, max_length=1000)


class CommentRead(BaseModel):
    id: UUID4
    comment_type: CommentType
    comment_type_id: UUID4
    user_id: UUID4
    user: Optional[UserSummary] = None
    content: str
    created_at: datetime
    updated_at: datetime


class CommentPage(BaseModel):
    data: List[CommentRead]
    pagination: Pagination
