"""
Course service — request-scoped FastAPI dependencies.

The session token is read by the shared auth layer (Bearer header first,
then the ``_session`` cookie); the identity provider resolves it against the
users table so deleted or demoted accounts take effect immediately.
"""
from __future__ import annotations

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.provider import IdentityProvider, build_identity_provider
from app.config import Settings
from app.database import get_db
from shared.auth.config import AuthSettings
from shared.auth.dependencies import get_auth_settings, get_session_token
from shared.models.user import CurrentUser


def get_settings() -> Settings:
    return Settings()


def get_identity_provider(
    settings: Settings = Depends(get_settings),
    auth_settings: AuthSettings = Depends(get_auth_settings),
) -> IdentityProvider:
    return build_identity_provider(settings, auth_settings)


async def get_optional_user(
    token: str | None = Depends(get_session_token),
    db: AsyncSession = Depends(get_db),
    provider: IdentityProvider = Depends(get_identity_provider),
) -> CurrentUser | None:
    """Returns the user for a valid session, None for anonymous requests."""
    user = await provider.current_user(db, token)
    if user is None:
        return None
    return CurrentUser.model_validate(user)


async def get_current_user(
    user: CurrentUser | None = Depends(get_optional_user),
) -> CurrentUser:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user


# ── Role guards ───────────────────────────────────────────────────────────────

def require_admin(
    current_user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """Raise 403 unless the authenticated user holds the ADMIN role."""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator access required.",
        )
    return current_user
