"""Soup model."""

from typing import ClassVar
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from soupbox_shared.schemas.common import CommentType

from .base import TimestampMixin, UUIDMixin


class Soup(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "soups"
    __table_args__ = (
        sa.Index("idx_soups_created_at", "created_at"),
    )

    # Tag under which comments on soups are stored
    comment_type: ClassVar[CommentType] = CommentType.SOUP

    content: str = Field(nullable=False)
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)
