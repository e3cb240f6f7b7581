"""Auth controller — issues and clears the session cookie, maps auth errors to HTTP."""

from __future__ import annotations

import logging

from fastapi import HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.provider import Credentials, IdentityProvider
from app.auth.schemas import LoginRequest, SessionResponse, UserResponse
from app.auth.service import get_user_by_id
from app.config import Settings
from app.exceptions import IdentityProviderError, InvalidCredentialsError
from shared.auth.config import AuthSettings
from shared.models.user import CurrentUser

logger = logging.getLogger(__name__)


def _handle_domain_error(exc: Exception) -> HTTPException:
    if isinstance(exc, InvalidCredentialsError):
        return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=exc.reason)
    if isinstance(exc, IdentityProviderError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Identity provider unavailable.")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error.")


async def login(
    db: AsyncSession,
    body: LoginRequest,
    provider: IdentityProvider,
    response: Response,
    settings: Settings,
    auth_settings: AuthSettings,
) -> SessionResponse:
    try:
        user = await provider.authenticate(
            db, Credentials(email=body.email, password=body.password),
        )
    except (InvalidCredentialsError, IdentityProviderError) as exc:
        logger.info("Login rejected for %s via %s: %s", body.email, provider.name, exc)
        raise _handle_domain_error(exc) from exc

    token = provider.issue_session_token(user)
    response.set_cookie(
        key=auth_settings.cookie_name,
        value=token,
        max_age=auth_settings.expire_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
        path="/",
    )
    logger.info("Login succeeded: user=%s provider=%s", user.id, provider.name)
    return SessionResponse(
        access_token=token,
        expires_in=auth_settings.expire_seconds,
        user=UserResponse.model_validate(user),
    )


def logout(response: Response, auth_settings: AuthSettings) -> None:
    response.delete_cookie(key=auth_settings.cookie_name, path="/")


async def me(db: AsyncSession, current_user: CurrentUser) -> UserResponse:
    user = await get_user_by_id(db, current_user.id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return UserResponse.model_validate(user)
