"""
Tests for the generic comment service and comment stars.
"""

from __future__ import annotations

import asyncio
import uuid

import pytest
from fastapi import HTTPException

from app.core.pagination import PaginationParams
from app.services import comments as comment_service
from soupbox_shared.schemas.comments import CommentForm
from soupbox_shared.schemas.common import CommentType

PAGE = PaginationParams(page=1, per_page=50)


async def _comment(session, user, target_id, content="hello"):
    return await comment_service.create(
        session,
        comment_form=CommentForm(content=content),
        comment_type=CommentType.SOUP,
        comment_type_id=target_id,
        user=user,
    )


class TestComments:
    async def test_create_carries_target_and_author(self, session, alice):
        target = uuid.uuid4()
        comment = await _comment(session, alice, target)
        assert comment.comment_type == CommentType.SOUP
        assert comment.comment_type_id == target
        assert comment.user_id == alice.id
        assert comment.user.name == "alice"

    async def test_list_is_scoped_and_newest_first(self, session, alice, bob):
        target, other = uuid.uuid4(), uuid.uuid4()
        await _comment(session, alice, target, "first")
        await asyncio.sleep(0.01)
        await _comment(session, bob, target, "second")
        await _comment(session, bob, other, "elsewhere")

        page = await comment_service.get_comments_by_type_and_type_id(
            session, CommentType.SOUP, target, PAGE
        )
        assert [c.content for c in page.data] == ["second", "first"]
        assert [c.user.name for c in page.data] == ["bob", "alice"]
        assert page.pagination.total == 2

    async def test_count(self, session, alice):
        target = uuid.uuid4()
        assert await comment_service.get_comments_count_by_type_and_type_id(
            session, CommentType.SOUP, target
        ) == 0
        await _comment(session, alice, target)
        await _comment(session, alice, target)
        assert await comment_service.get_comments_count_by_type_and_type_id(
            session, CommentType.SOUP, target
        ) == 2


class TestCommentStars:
    async def test_star_and_un_star(self, session, alice, bob):
        comment = await _comment(session, alice, uuid.uuid4())

        assert await comment_service.star(session, comment.id, bob.id) == 1
        with pytest.raises(HTTPException) as exc_info:
            await comment_service.star(session, comment.id, bob.id)
        assert exc_info.value.status_code == 403
        assert exc_info.value.detail == "The resource is already starred by the current user"

        assert await comment_service.un_star(session, comment.id, bob.id) == 0
        assert await comment_service.un_star(session, comment.id, bob.id) == 0

    async def test_toggle(self, session, alice, bob):
        comment = await _comment(session, alice, uuid.uuid4())
        assert await comment_service.toggle_star(session, comment.id, bob.id) == 1
        assert await comment_service.is_star_by_user(session, comment.id, bob.id)
        assert await comment_service.toggle_star(session, comment.id, bob.id) == 0
        assert not await comment_service.is_star_by_user(session, comment.id, bob.id)

    async def test_unknown_comment_is_404(self, session, bob):
        for operation in (comment_service.star, comment_service.toggle_star):
            with pytest.raises(HTTPException) as exc_info:
                await operation(session, uuid.uuid4(), bob.id)
            assert exc_info.value.status_code == 404
