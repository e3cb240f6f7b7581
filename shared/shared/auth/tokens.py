"""Session token encoding.

Session tokens are short JWTs signed with the shared secret. They only carry
identity claims; the owning service re-loads the user on every request so a
deleted account stops resolving immediately.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import UUID

from jose import JWTError, jwt

from shared.auth.config import AuthSettings


def create_session_token(
    user_id: UUID,
    email: str | None,
    role: str,
    settings: AuthSettings,
) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email or "",
        "role": role,
        "iat": now,
        "exp": now + timedelta(seconds=settings.expire_seconds),
        "iss": settings.issuer,
        "aud": settings.audience,
    }
    return jwt.encode(payload, settings.secret, algorithm=settings.algorithm)


def decode_session_token(token: str, settings: AuthSettings) -> UUID | None:
    """Return the user id carried by ``token``, or None if it is not valid."""
    try:
        payload = jwt.decode(
            token,
            settings.secret,
            algorithms=[settings.algorithm],
            issuer=settings.issuer,
            audience=settings.audience,
        )
        return UUID(payload["sub"])
    except (JWTError, KeyError, ValueError):
        return None
