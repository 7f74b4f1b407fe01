"""
Comment star endpoints.

POST   /api/v1/comments/{commentId}/star         Star
DELETE /api/v1/comments/{commentId}/star         Remove star
POST   /api/v1/comments/{commentId}/toggle-star  Flip star
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_current_user
from app.core.database import get_session
from app.models.user import User
from app.services import comments as comment_service
from soupbox_shared.schemas.common import StarResponse

router = APIRouter()


@router.post("/{commentId}/star", response_model=StarResponse)
async def star_comment(
    commentId: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    count = await comment_service.star(session, commentId, current_user.id)
    return StarResponse(star_count=count, is_starred=True)


@router.delete("/{commentId}/star", response_model=StarResponse)
async def un_star_comment(
    commentId: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    count = await comment_service.un_star(session, commentId, current_user.id)
    return StarResponse(star_count=count, is_starred=False)


@router.post("/{commentId}/toggle-star", response_model=StarResponse)
async def toggle_star_comment(
    commentId: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    count = await comment_service.toggle_star(session, commentId, current_user.id)
    return StarResponse(
        star_count=count,
        is_starred=await comment_service.is_star_by_user(session, commentId, current_user.id),
    )
