"""
Soup endpoints: CRUD, search, stars, comments.

- Listing and reads are public; writes need a bearer token.
- Only the owner may update or delete a soup.
- Star endpoints return the soup's star count after the change.
"""

from __future__ import annotations

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_current_user, get_optional_user
from app.core.database import get_session
from app.core.pagination import PaginationParams, pagination_params
from app.core.validation import ValidationPipe
from app.models.user import User
from app.services import soups as soup_service
from soupbox_shared.schemas.comments import CommentForm, CommentPage, CommentRead
from soupbox_shared.schemas.common import CountResponse, StarResponse
from soupbox_shared.schemas.soups import SoupCreate, SoupFilter, SoupPage, SoupRead, SoupUpdate

router = APIRouter()


def soup_filter(
    content: Optional[str] = None,
    created_at: Optional[List[str]] = Query(
        None, description="Two values: a comparison operator and an ISO timestamp"
    ),
    username: Optional[str] = None,
) -> SoupFilter:
    return SoupFilter(content=content, created_at=created_at, username=username)


async def _require_owner(session: AsyncSession, soup_id: uuid.UUID, user: User) -> None:
    soup = await soup_service.get_soup_or_404(session, soup_id)
    if soup.user_id != user.id:
        raise HTTPException(status_code=403, detail="Only the owner can modify this soup")


# ---------------------------------------------------------------------------
# Soup CRUD
# ---------------------------------------------------------------------------


@router.get("", response_model=SoupPage)
async def list_soups(
    filters: SoupFilter = Depends(soup_filter),
    params: PaginationParams = Depends(pagination_params),
    session: AsyncSession = Depends(get_session),
):
    """List soups, newest first. Filters: content substring, created_at comparison, owner name."""
    return await soup_service.list_soups(session, filters, params)


@router.post("", response_model=SoupRead, status_code=201)
async def create_soup(
    body: SoupCreate = Depends(ValidationPipe(SoupCreate)),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    return await soup_service.create(session, body, current_user.id)


@router.get("/{soup_id}", response_model=SoupRead)
async def get_soup(
    soup_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
):
    return await soup_service.get_one(session, soup_id)


@router.patch("/{soup_id}", response_model=SoupRead)
async def update_soup(
    soup_id: uuid.UUID,
    body: SoupUpdate = Depends(ValidationPipe(SoupUpdate)),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    """Partial update: only the fields sent are changed."""
    await _require_owner(session, soup_id, current_user)
    return await soup_service.update(session, soup_id, body)


@router.delete("/{soup_id}", status_code=204)
async def delete_soup(
    soup_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    await _require_owner(session, soup_id, current_user)
    await soup_service.delete(session, soup_id)


# ---------------------------------------------------------------------------
# Stars
# ---------------------------------------------------------------------------


@router.get("/{soup_id}/star", response_model=StarResponse)
async def get_star(
    soup_id: uuid.UUID,
    current_user: Optional[User] = Depends(get_optional_user),
    session: AsyncSession = Depends(get_session),
):
    """Star count, plus whether the caller starred it when a token is sent."""
    await soup_service.get_soup_or_404(session, soup_id)
    is_starred = None
    if current_user:
        is_starred = await soup_service.is_star_by_user(session, soup_id, current_user.id)
    return StarResponse(
        star_count=await soup_service.star_count(session, soup_id),
        is_starred=is_starred,
    )


@router.post("/{soup_id}/star", response_model=StarResponse)
async def star_soup(
    soup_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    count = await soup_service.star(session, soup_id, current_user.id)
    return StarResponse(star_count=count, is_starred=True)


@router.delete("/{soup_id}/star", response_model=StarResponse)
async def un_star_soup(
    soup_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    count = await soup_service.un_star(session, soup_id, current_user.id)
    return StarResponse(star_count=count, is_starred=False)


@router.post("/{soup_id}/toggle-star", response_model=StarResponse)
async def toggle_star_soup(
    soup_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    count = await soup_service.toggle_star(session, soup_id, current_user.id)
    return StarResponse(
        star_count=count,
        is_starred=await soup_service.is_star_by_user(session, soup_id, current_user.id),
    )


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


@router.post("/{soup_id}/comments", response_model=CommentRead, status_code=201)
async def create_comment(
    soup_id: uuid.UUID,
    body: CommentForm = Depends(ValidationPipe(CommentForm)),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    return await soup_service.create_comment(session, soup_id, body, current_user)


@router.get("/{soup_id}/comments", response_model=CommentPage)
async def list_comments(
    soup_id: uuid.UUID,
    params: PaginationParams = Depends(pagination_params),
    session: AsyncSession = Depends(get_session),
):
    return await soup_service.get_comments(session, soup_id, params)


@router.get("/{soup_id}/comments/count", response_model=CountResponse)
async def count_comments(
    soup_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
):
    return CountResponse(count=await soup_service.get_comments_count(session, soup_id))
