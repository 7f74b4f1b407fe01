"""
Soup service layer: CRUD, search, stars and comments for soups.

Handles:
- Soup CRUD with the owner joined into every read
- Filtered, paginated listing
- Star / un-star / toggle over `user_soup_star`
- Comment delegation to the generic comment service under `CommentType.SOUP`
"""

from __future__ import annotations

import operator
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Optional

import structlog
from fastapi import HTTPException
from pydantic import TypeAdapter, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.pagination import PaginationParams, paginate
from app.models.base import utcnow
from app.models.soup import Soup
from app.models.stars import UserSoupStar
from app.models.user import User, without_password
from app.services import comments as comment_service
from app.services import stars
from soupbox_shared.schemas.comments import CommentForm, CommentPage, CommentRead
from soupbox_shared.schemas.soups import SoupCreate, SoupFilter, SoupPage, SoupRead, SoupUpdate
from soupbox_shared.schemas.users import UserSummary

log = structlog.get_logger()

STAR_TARGET = "soup_id"

# ISO 8601 with or without offset ("Z" included); naive values are read as UTC
TIMESTAMP = TypeAdapter(datetime)

CREATED_AT_OPERATORS: dict[str, Callable[[Any, Any], Any]] = {
    "=": operator.eq,
    "!=": operator.ne,
    "<>": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def to_soup_read(soup: Soup, user: Optional[User]) -> SoupRead:
    return SoupRead(
        id=soup.id,
        content=soup.content,
        user_id=soup.user_id,
        user=UserSummary(id=user.id, name=user.name) if user else None,
        created_at=soup.created_at,
        updated_at=soup.updated_at,
    )


def soups_with_owner():
    return (
        select(Soup, User)
        .outerjoin(User, User.id == Soup.user_id)
        .options(without_password())
    )


async def get_soup_or_404(session: AsyncSession, soup_id: uuid.UUID) -> Soup:
    soup = await session.get(Soup, soup_id)
    if not soup:
        raise HTTPException(status_code=404, detail="Soup not found")
    return soup


def _created_at_clause(created_at: Optional[list[str]]):
    """Build the created_at comparison, or None when the filter is malformed."""
    if not created_at or len(created_at) != 2:
        return None
    op_symbol, raw_value = created_at
    compare = CREATED_AT_OPERATORS.get(op_symbol.strip())
    if compare is None:
        log.debug("soup.filter_ignored", filter="created_at", reason="operator", value=op_symbol)
        return None
    try:
        value = TIMESTAMP.validate_python(raw_value)
    except ValidationError:
        log.debug("soup.filter_ignored", filter="created_at", reason="timestamp", value=raw_value)
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return compare(Soup.created_at, value.astimezone(timezone.utc))


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------


async def get_one(session: AsyncSession, soup_id: uuid.UUID) -> SoupRead:
    """Fetch a soup with its owner. 404 if it does not exist."""
    result = await session.execute(soups_with_owner().where(Soup.id == soup_id))
    row = result.one_or_none()
    if not row:
        raise HTTPException(status_code=404, detail="Soup not found")
    soup, user = row
    return to_soup_read(soup, user)


async def create(session: AsyncSession, data: SoupCreate, user_id: uuid.UUID) -> SoupRead:
    """Insert a soup owned by `user_id`. Both timestamps are set server-side to the same instant."""
    now = utcnow()
    soup = Soup(
        **data.model_dump(),
        user_id=user_id,
        created_at=now,
        updated_at=now,
    )
    session.add(soup)
    await session.flush()

    log.info("soup.created", soup_id=str(soup.id), user_id=str(user_id))
    return await get_one(session, soup.id)


async def update(session: AsyncSession, soup_id: uuid.UUID, data: SoupUpdate) -> SoupRead:
    """Merge the fields present in `data` over the stored soup and bump updated_at."""
    soup = await get_soup_or_404(session, soup_id)

    changes = data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(soup, field, value)
    soup.updated_at = utcnow()

    session.add(soup)
    await session.flush()

    log.info("soup.updated", soup_id=str(soup_id), fields=sorted(changes))
    return await get_one(session, soup_id)


async def delete(session: AsyncSession, soup_id: uuid.UUID) -> None:
    """Hard delete. 404 if the soup does not exist."""
    soup = await get_soup_or_404(session, soup_id)
    await session.delete(soup)
    await session.flush()
    log.info("soup.deleted", soup_id=str(soup_id))


async def list_soups(
    session: AsyncSession, filters: SoupFilter, params: PaginationParams
) -> SoupPage:
    """Paginated soups with their owners, newest first, narrowed by the optional filters."""
    stmt = soups_with_owner()

    if filters.content:
        stmt = stmt.where(Soup.content.contains(filters.content, autoescape=True))

    created_at_clause = _created_at_clause(filters.created_at)
    if created_at_clause is not None:
        stmt = stmt.where(created_at_clause)

    if filters.username:
        stmt = stmt.where(User.name == filters.username)

    stmt = stmt.order_by(Soup.created_at.desc())
    rows, pagination = await paginate(session, stmt, params)
    return SoupPage(
        data=[to_soup_read(soup, user) for soup, user in rows],
        pagination=pagination,
    )


# ---------------------------------------------------------------------------
# Stars
# ---------------------------------------------------------------------------


async def star_count(session: AsyncSession, soup_id: uuid.UUID) -> int:
    return await stars.star_count(session, UserSoupStar, STAR_TARGET, soup_id)


async def is_star_by_user(
    session: AsyncSession, soup_id: uuid.UUID, user_id: uuid.UUID
) -> bool:
    return await stars.is_star_by_user(session, UserSoupStar, STAR_TARGET, soup_id, user_id)


async def star(session: AsyncSession, soup_id: uuid.UUID, user_id: uuid.UUID) -> int:
    await get_soup_or_404(session, soup_id)
    return await stars.star(session, UserSoupStar, STAR_TARGET, soup_id, user_id)


async def un_star(session: AsyncSession, soup_id: uuid.UUID, user_id: uuid.UUID) -> int:
    return await stars.un_star(session, UserSoupStar, STAR_TARGET, soup_id, user_id)


async def toggle_star(session: AsyncSession, soup_id: uuid.UUID, user_id: uuid.UUID) -> int:
    await get_soup_or_404(session, soup_id)
    return await stars.toggle_star(session, UserSoupStar, STAR_TARGET, soup_id, user_id)


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


async def create_comment(
    session: AsyncSession, soup_id: uuid.UUID, comment_form: CommentForm, user: User
) -> CommentRead:
    await get_soup_or_404(session, soup_id)
    return await comment_service.create(
        session,
        comment_form=comment_form,
        comment_type=Soup.comment_type,
        comment_type_id=soup_id,
        user=user,
    )


async def get_comments(
    session: AsyncSession, soup_id: uuid.UUID, params: PaginationParams
) -> CommentPage:
    return await comment_service.get_comments_by_type_and_type_id(
        session, Soup.comment_type, soup_id, params
    )


async def get_comments_count(session: AsyncSession, soup_id: uuid.UUID) -> int:
    return await comment_service.get_comments_count_by_type_and_type_id(
        session, Soup.comment_type, soup_id
    )
