"""User and authentication schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, UUID4


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class UserCreateRequest(BaseModel):
    """Sign up a new account."""
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)  # bcrypt truncates past 72 bytes
    name: str = Field(min_length=1, max_length=200)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class UserSummary(BaseModel):
    """Owner/author block embedded in soups and comments."""
    id: UUID4
    name: Optional[str] = None


class UserResponse(BaseModel):
    """Public profile. Never carries the password hash."""
    id: UUID4
    email: str
    name: Optional[str] = None
    created_at: datetime


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds
