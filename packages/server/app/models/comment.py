"""Generic comment model.

A comment belongs to whatever entity ``(comment_type, comment_type_id)`` names.
There is no database foreign key on ``comment_type_id``; services check that
the target exists before writing.
"""

import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import TimestampMixin, UUIDMixin


class Comment(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "comments"
    __table_args__ = (
        sa.Index("idx_comments_target", "comment_type", "comment_type_id"),
    )

    comment_type: str = Field(nullable=False)  # CommentType value, e.g. "soup"
    comment_type_id: uuid.UUID = Field(nullable=False)
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)
    content: str = Field(nullable=False)
