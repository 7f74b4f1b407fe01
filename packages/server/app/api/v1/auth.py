"""
Session endpoints: login, logout, current user.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import (
    create_jwt,
    get_current_user,
    get_token_payload,
    revoke_session,
    verify_password,
)
from app.core.config import get_settings
from app.core.database import get_session
from app.core.validation import ValidationPipe
from app.models.user import User
from app.services import users as user_service
from soupbox_shared.schemas.users import LoginRequest, TokenResponse, UserResponse

log = structlog.get_logger()
settings = get_settings()
router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest = Depends(ValidationPipe(LoginRequest)),
    session: AsyncSession = Depends(get_session),
):
    """Trade email and password for a bearer token."""
    user = await user_service.find_one(session, body.email)
    if user is None or not verify_password(body.password, user.password_hash):
        log.info("auth.login_failed")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token, jti = create_jwt(user.id)
    log.info("auth.login", user_id=str(user.id), jti=jti)
    return TokenResponse(access_token=token, expires_in=settings.jwt_expire_minutes * 60)


@router.post("/logout")
async def logout(claims: dict = Depends(get_token_payload)):
    await revoke_session(claims)
    return {"message": "Logged out"}


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    return user_service.to_user_response(current_user)
