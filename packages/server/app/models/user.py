"""User model."""

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import defer
from sqlmodel import Field, SQLModel

from .base import UTCDateTime, UUIDMixin, utcnow


class User(UUIDMixin, SQLModel, table=True):
    __tablename__ = "users"

    email: str = Field(nullable=False, unique=True, index=True)
    name: Optional[str] = None
    password_hash: str = Field(nullable=False)  # bcrypt; only loaded for authentication
    created_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_column_kwargs={"server_default": sa.func.now()},
        sa_type=UTCDateTime(),
    )


def without_password():
    """Loader option for the default user projection: the hash stays unloaded and raises if touched."""
    return defer(User.password_hash, raiseload=True)
