"""
User API endpoints.

POST   /api/v1/users                         Sign up
GET    /api/v1/users/{userId}                Public profile
GET    /api/v1/users/{userId}/star-soups     Soups the user starred
GET    /api/v1/users/{userId}/star-comments  Comments the user starred
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.core.pagination import PaginationParams, pagination_params
from app.core.validation import ValidationPipe
from app.services import users as user_service
from soupbox_shared.schemas.comments import CommentPage
from soupbox_shared.schemas.soups import SoupPage
from soupbox_shared.schemas.users import UserCreateRequest, UserResponse

router = APIRouter()


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    body: UserCreateRequest = Depends(ValidationPipe(UserCreateRequest)),
    session: AsyncSession = Depends(get_session),
):
    """Create an account. The stored hash is never returned."""
    user = await user_service.create_user(session, body)
    return user_service.to_user_response(user)


@router.get("/{userId}", response_model=UserResponse)
async def get_user(
    userId: uuid.UUID,
    session: AsyncSession = Depends(get_session),
):
    user = await user_service.get_user(session, userId)
    return user_service.to_user_response(user)


@router.get("/{userId}/star-soups", response_model=SoupPage)
async def list_star_soups(
    userId: uuid.UUID,
    params: PaginationParams = Depends(pagination_params),
    session: AsyncSession = Depends(get_session),
):
    await user_service.get_user(session, userId)
    return await user_service.get_star_soups(session, userId, params)


@router.get("/{userId}/star-comments", response_model=CommentPage)
async def list_star_comments(
    userId: uuid.UUID,
    params: PaginationParams = Depends(pagination_params),
    session: AsyncSession = Depends(get_session),
):
    await user_service.get_user(session, userId)
    return await user_service.get_star_comments(session, userId, params)
