"""
Tests for the local user bootstrap script.
"""

import pytest

from app.core.auth import verify_password
from app.core.database import get_session_context
from app.scripts.create_local_user import create_user
from app.services import users as user_service


@pytest.mark.asyncio
async def test_create_local_user(db, capsys):
    assert await create_user("dev@example.com", "dev-password", "dev") is True
    assert "Created user: dev@example.com" in capsys.readouterr().out

    async with get_session_context() as session:
        user = await user_service.find_one(session, "dev@example.com")
    assert user is not None
    assert user.name == "dev"
    assert verify_password("dev-password", user.password_hash)


@pytest.mark.asyncio
async def test_existing_user_is_skipped(db, capsys):
    await create_user("dev@example.com", "dev-password", "dev")
    assert await create_user("dev@example.com", "other-password", "dev") is False
    assert "already exists" in capsys.readouterr().out
