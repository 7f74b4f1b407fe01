"""
Shared fixtures for server tests.

Tests run against an in-memory SQLite database (aiosqlite). The settings
are pointed at it before the app is imported, so the application's own
engine and session factory are the ones under test.
"""

import os

os.environ.setdefault("SOUPBOX_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SOUPBOX_LOG_LEVEL", "warning")
os.environ.setdefault("SOUPBOX_SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")

from unittest.mock import patch

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.database import async_session_factory, create_tables, engine
from app.models.user import User
from app.services import users as user_service
from soupbox_shared.schemas.users import UserCreateRequest


class FakeRedis:
    """Just enough of redis.asyncio.Redis for the revocation list and readiness probe."""

    def __init__(self):
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def setex(self, key: str, ttl: int, value: str) -> None:
        self.store[key] = value
        self.ttls[key] = ttl

    async def exists(self, key: str) -> int:
        return int(key in self.store)

    async def ping(self) -> bool:
        return True


@pytest.fixture
async def db():
    """Fresh schema per test. Disposing the engine drops the in-memory database."""
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session(db):
    async with async_session_factory() as s:
        yield s
        await s.rollback()


@pytest.fixture
def fake_redis():
    redis = FakeRedis()
    with patch("app.core.auth.get_redis", return_value=redis), patch(
        "app.core.redis.get_redis", return_value=redis
    ):
        yield redis


@pytest.fixture
async def client(db, fake_redis):
    from app.main import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def user_factory(session):
    async def _make(email: str, name: str, password: str = "secret-pw") -> User:
        return await user_service.create_user(
            session, UserCreateRequest(email=email, password=password, name=name)
        )

    return _make


@pytest.fixture
async def alice(user_factory) -> User:
    return await user_factory("alice@example.com", "alice")


@pytest.fixture
async def bob(user_factory) -> User:
    return await user_factory("bob@example.com", "bob")
