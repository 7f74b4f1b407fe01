"""
User service: account creation, credential lookup and starred-item listings.
"""

from __future__ import annotations

import uuid
from typing import Optional

import structlog
from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import undefer
from sqlmodel import select

from app.core.auth import hash_password
from app.core.pagination import PaginationParams, paginate
from app.models.base import utcnow
from app.models.comment import Comment
from app.models.soup import Soup
from app.models.stars import UserCommentStar, UserSoupStar
from app.models.user import User, without_password
from app.services.comments import comments_with_author, to_comment_page
from app.services.soups import soups_with_owner, to_soup_read
from soupbox_shared.schemas.comments import CommentPage
from soupbox_shared.schemas.soups import SoupPage
from soupbox_shared.schemas.users import UserCreateRequest, UserResponse

log = structlog.get_logger()


def to_user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        created_at=user.created_at,
    )


async def find_one(session: AsyncSession, email: str) -> Optional[User]:
    """Look a user up by exact email, password hash included. For authentication only."""
    result = await session.execute(
        select(User)
        .where(User.email == email)
        .options(undefer(User.password_hash))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def create_user(session: AsyncSession, req: UserCreateRequest) -> User:
    """Create an account. The password is hashed before it is stored."""
    result = await session.execute(
        select(User.id).where(User.email == req.email)
    )
    if result.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="Email already registered")

    user = User(
        email=req.email,
        name=req.name,
        password_hash=hash_password(req.password),
        created_at=utcnow(),
    )
    session.add(user)
    await session.flush()

    log.info("user.created", user_id=str(user.id))
    return user


async def get_user(session: AsyncSession, user_id: uuid.UUID) -> User:
    """Public profile lookup. 404 if the user does not exist."""
    result = await session.execute(
        select(User).where(User.id == user_id).options(without_password())
    )
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


async def get_star_soups(
    session: AsyncSession, user_id: uuid.UUID, params: PaginationParams
) -> SoupPage:
    """Soups starred by `user_id`, each with its owner."""
    stmt = (
        soups_with_owner()
        .join(UserSoupStar, UserSoupStar.soup_id == Soup.id)
        .where(UserSoupStar.user_id == user_id)
        .order_by(Soup.created_at.desc())
    )
    rows, pagination = await paginate(session, stmt, params)
    return SoupPage(
        data=[to_soup_read(soup, owner) for soup, owner in rows],
        pagination=pagination,
    )


async def get_star_comments(
    session: AsyncSession, user_id: uuid.UUID, params: PaginationParams
) -> CommentPage:
    """Comments starred by `user_id`, each with its author."""
    stmt = (
        comments_with_author()
        .join(UserCommentStar, UserCommentStar.comment_id == Comment.id)
        .where(UserCommentStar.user_id == user_id)
    )
    rows, pagination = await paginate(session, stmt, params)
    return to_comment_page(rows, pagination)
