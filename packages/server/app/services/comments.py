"""
Comment service: generic comments on any commentable kind.

Comments are addressed by `(comment_type, comment_type_id)`. This module knows
nothing about soups; callers pass their own `CommentType` tag and id.
"""

from __future__ import annotations

import uuid
from typing import Any, Sequence

import structlog
from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.pagination import PaginationParams, paginate
from app.models.comment import Comment
from app.models.stars import UserCommentStar
from app.models.user import User, without_password
from app.services import stars
from soupbox_shared.schemas.comments import CommentForm, CommentPage, CommentRead
from soupbox_shared.schemas.common import CommentType
from soupbox_shared.schemas.users import UserSummary

log = structlog.get_logger()

STAR_TARGET = "comment_id"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def to_comment_read(comment: Comment, user: User | None) -> CommentRead:
    return CommentRead(
        id=comment.id,
        comment_type=comment.comment_type,
        comment_type_id=comment.comment_type_id,
        user_id=comment.user_id,
        user=UserSummary(id=user.id, name=user.name) if user else None,
        content=comment.content,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
    )


def comments_with_author():
    """Comments left-joined with their author, newest first."""
    return (
        select(Comment, User)
        .outerjoin(User, User.id == Comment.user_id)
        .options(without_password())
        .order_by(Comment.created_at.desc())
    )


def to_comment_page(rows: Sequence[Any], pagination) -> CommentPage:
    return CommentPage(
        data=[to_comment_read(comment, user) for comment, user in rows],
        pagination=pagination,
    )


async def get_comment_or_404(session: AsyncSession, comment_id: uuid.UUID) -> Comment:
    comment = await session.get(Comment, comment_id)
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found")
    return comment


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------


async def create(
    session: AsyncSession,
    *,
    comment_form: CommentForm,
    comment_type: CommentType,
    comment_type_id: uuid.UUID,
    user: User,
) -> CommentRead:
    """Persist a comment on the given target, authored by `user`."""
    comment = Comment(
        comment_type=comment_type.value,
        comment_type_id=comment_type_id,
        user_id=user.id,
        content=comment_form.content,
    )
    session.add(comment)
    await session.flush()

    log.info(
        "comment.created",
        comment_id=str(comment.id),
        comment_type=comment_type.value,
        comment_type_id=str(comment_type_id),
        user_id=str(user.id),
    )
    return to_comment_read(comment, user)


async def get_comments_by_type_and_type_id(
    session: AsyncSession,
    comment_type: CommentType,
    comment_type_id: uuid.UUID,
    params: PaginationParams,
) -> CommentPage:
    stmt = comments_with_author().where(
        Comment.comment_type == comment_type.value,
        Comment.comment_type_id == comment_type_id,
    )
    rows, pagination = await paginate(session, stmt, params)
    return to_comment_page(rows, pagination)


async def get_comments_count_by_type_and_type_id(
    session: AsyncSession, comment_type: CommentType, comment_type_id: uuid.UUID
) -> int:
    result = await session.execute(
        select(func.count())
        .select_from(Comment)
        .where(
            Comment.comment_type == comment_type.value,
            Comment.comment_type_id == comment_type_id,
        )
    )
    return result.scalar_one()


# ---------------------------------------------------------------------------
# Stars
# ---------------------------------------------------------------------------


async def star_count(session: AsyncSession, comment_id: uuid.UUID) -> int:
    return await stars.star_count(session, UserCommentStar, STAR_TARGET, comment_id)


async def is_star_by_user(
    session: AsyncSession, comment_id: uuid.UUID, user_id: uuid.UUID
) -> bool:
    return await stars.is_star_by_user(session, UserCommentStar, STAR_TARGET, comment_id, user_id)


async def star(session: AsyncSession, comment_id: uuid.UUID, user_id: uuid.UUID) -> int:
    await get_comment_or_404(session, comment_id)
    return await stars.star(session, UserCommentStar, STAR_TARGET, comment_id, user_id)


async def un_star(session: AsyncSession, comment_id: uuid.UUID, user_id: uuid.UUID) -> int:
    return await stars.un_star(session, UserCommentStar, STAR_TARGET, comment_id, user_id)


async def toggle_star(session: AsyncSession, comment_id: uuid.UUID, user_id: uuid.UUID) -> int:
    await get_comment_or_404(session, comment_id)
    return await stars.toggle_star(session, UserCommentStar, STAR_TARGET, comment_id, user_id)
