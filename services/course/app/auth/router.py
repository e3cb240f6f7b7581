"""Auth router — login, logout and the current-user probe."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import controller
from app.auth.provider import IdentityProvider
from app.auth.schemas import LoginRequest, SessionResponse, UserResponse
from app.config import Settings
from app.database import get_db
from app.dependencies import get_current_user, get_identity_provider, get_settings
from app.rate_limit import LOGIN_RATE_LIMIT, limiter
from shared.auth.config import AuthSettings
from shared.auth.dependencies import get_auth_settings
from shared.models.user import CurrentUser

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/login",
    response_model=SessionResponse,
    summary="Login with email + password",
    description="Verifies credentials with the configured identity provider and "
    "sets the httpOnly session cookie.",
)
@limiter.limit(LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
    provider: IdentityProvider = Depends(get_identity_provider),
    settings: Settings = Depends(get_settings),
    auth_settings: AuthSettings = Depends(get_auth_settings),
) -> SessionResponse:
    return await controller.login(db, body, provider, response, settings, auth_settings)


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Clear the session cookie",
)
async def logout(
    response: Response,
    auth_settings: AuthSettings = Depends(get_auth_settings),
) -> None:
    controller.logout(response, auth_settings)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Current user",
)
async def me(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> UserResponse:
    return await controller.me(db, current_user)
