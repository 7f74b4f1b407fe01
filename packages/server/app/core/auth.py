"""
Credentials and bearer sessions.

A session is a signed JWT carrying the user id (`sub`) and a random `jti`.
Logging out stores the jti in Redis until the token would have expired anyway;
every authenticated request checks that list.
"""

from __future__ import annotations

import time
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
import structlog
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_session
from app.core.redis import get_redis
from app.models.user import User, without_password

log = structlog.get_logger()
settings = get_settings()

bearer_scheme = HTTPBearer(auto_error=False)

# bcrypt refuses cost factors under 4
BCRYPT_MIN_ROUNDS = 4

REVOKED_KEY = "soupbox:session:revoked:{jti}"


# ---------------------------------------------------------------------------
# Passwords
# ---------------------------------------------------------------------------

def hash_password(password: str, rounds: Optional[int] = None) -> str:
    cost = settings.password_hash_rounds if rounds is None else rounds
    salt = bcrypt.gensalt(rounds=max(cost, BCRYPT_MIN_ROUNDS))
    return bcrypt.hashpw(password.encode(), salt).decode()


def verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode(), password_hash.encode())


# ---------------------------------------------------------------------------
# Session tokens
# ---------------------------------------------------------------------------

def create_jwt(
    user_id: uuid.UUID,
    *,
    expires_delta: timedelta | None = None,
) -> tuple[str, str]:
    """Sign a session token for `user_id`. Returns (token, jti)."""
    issued = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.jwt_expire_minutes)
    jti = uuid.uuid4().hex
    token = jwt.encode(
        {"sub": str(user_id), "jti": jti, "iat": issued, "exp": issued + lifetime},
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return token, jti


def decode_jwt(token: str) -> dict:
    """Verify signature and expiry. Raises jwt.PyJWTError."""
    return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])


async def revoke_session(claims: dict) -> None:
    """Block the token's jti for whatever lifetime it has left."""
    jti = claims.get("jti")
    if not jti:
        return
    remaining = int(claims.get("exp", 0) - time.time())
    client = await get_redis()
    await client.setex(REVOKED_KEY.format(jti=jti), max(remaining, 1), "1")
    log.info("session.revoked", user_id=claims.get("sub"), ttl=max(remaining, 1))


async def is_session_revoked(jti: str) -> bool:
    client = await get_redis()
    return bool(await client.exists(REVOKED_KEY.format(jti=jti)))


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

async def get_token_payload(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> dict:
    """Claims of a valid, unrevoked bearer token. 401 otherwise."""
    if credentials is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    try:
        claims = decode_jwt(credentials.credentials)
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired session")

    if claims.get("jti") and await is_session_revoked(claims["jti"]):
        raise HTTPException(status_code=401, detail="Session has been revoked")
    return claims


async def get_current_user(
    claims: dict = Depends(get_token_payload),
    session: AsyncSession = Depends(get_session),
) -> User:
    try:
        user = await session.get(User, uuid.UUID(claims["sub"]), options=[without_password()])
    except (KeyError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid or expired session")
    if user is None:
        raise HTTPException(status_code=401, detail="User not found")
    structlog.contextvars.bind_contextvars(user_id=str(user.id))
    return user


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_session),
) -> Optional[User]:
    """Anonymous callers resolve to None; a bad token still gets a 401."""
    if credentials is None:
        return None
    return await get_current_user(await get_token_payload(credentials), session)
