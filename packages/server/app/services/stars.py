"""
Star bookkeeping shared by every starrable kind.

A star is one row in a join table (`user_soup_star`, `user_comment_star`).
Each helper takes the join model and the name of its target column so soups
and comments run the same queries.
"""

from __future__ import annotations

import uuid
from typing import Type

import structlog
from fastapi import HTTPException
from sqlalchemy import delete, func, insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

log = structlog.get_logger()

ALREADY_STARRED = "The resource is already starred by the current user"


def _target(model: Type[SQLModel], target_field: str):
    return getattr(model, target_field)


async def star_count(
    session: AsyncSession, model: Type[SQLModel], target_field: str, target_id: uuid.UUID
) -> int:
    result = await session.execute(
        select(func.count()).select_from(model).where(_target(model, target_field) == target_id)
    )
    return result.scalar_one()


async def is_star_by_user(
    session: AsyncSession,
    model: Type[SQLModel],
    target_field: str,
    target_id: uuid.UUID,
    user_id: uuid.UUID,
) -> bool:
    result = await session.execute(
        select(func.count())
        .select_from(model)
        .where(model.user_id == user_id, _target(model, target_field) == target_id)
    )
    return result.scalar_one() > 0


async def star(
    session: AsyncSession,
    model: Type[SQLModel],
    target_field: str,
    target_id: uuid.UUID,
    user_id: uuid.UUID,
) -> int:
    """Insert the star row. 403 if the user already starred the target. Returns the new count."""
    if await is_star_by_user(session, model, target_field, target_id, user_id):
        raise HTTPException(status_code=403, detail=ALREADY_STARRED)

    try:
        await session.execute(
            insert(model).values({"user_id": user_id, target_field: target_id})
        )
    except IntegrityError as exc:
        # A concurrent request inserted the same pair first.
        log.info("star.conflict", table=model.__tablename__, target_id=str(target_id), user_id=str(user_id))
        raise HTTPException(status_code=403, detail=ALREADY_STARRED) from exc

    log.info("star.added", table=model.__tablename__, target_id=str(target_id), user_id=str(user_id))
    return await star_count(session, model, target_field, target_id)


async def un_star(
    session: AsyncSession,
    model: Type[SQLModel],
    target_field: str,
    target_id: uuid.UUID,
    user_id: uuid.UUID,
) -> int:
    """Delete the star row if present. Never fails on a missing star. Returns the new count."""
    await session.execute(
        delete(model).where(model.user_id == user_id, _target(model, target_field) == target_id)
    )
    log.info("star.removed", table=model.__tablename__, target_id=str(target_id), user_id=str(user_id))
    return await star_count(session, model, target_field, target_id)


async def toggle_star(
    session: AsyncSession,
    model: Type[SQLModel],
    target_field: str,
    target_id: uuid.UUID,
    user_id: uuid.UUID,
) -> int:
    """Flip the user's star on the target. Returns the resulting count."""
    if await is_star_by_user(session, model, target_field, target_id, user_id):
        return await un_star(session, model, target_field, target_id, user_id)
    return await star(session, model, target_field, target_id, user_id)
