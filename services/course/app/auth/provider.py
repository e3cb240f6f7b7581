"""
Identity providers.

The rest of the service only sees ``IdentityProvider``:

  - ``authenticate(db, credentials)``   → User, or raises InvalidCredentialsError
  - ``current_user(db, session_token)`` → User, or None

Credential verification is delegated to the provider (local password hash or
Supabase Auth). Session tokens are always ours: a signed JWT naming the local
user row, re-loaded on every request.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.service import (
    get_user_by_email,
    get_user_by_id,
    sync_external_user,
    verify_password,
)
from app.config import Settings
from app.exceptions import IdentityProviderError, InvalidCredentialsError
from app.models.user import User
from shared.auth.config import AuthSettings
from shared.auth.tokens import create_session_token, decode_session_token
from shared.constants import Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Credentials:
    email: str
    password: str


class IdentityProvider(ABC):
    name: str = "abstract"

    def __init__(self, auth_settings: AuthSettings) -> None:
        self.auth_settings = auth_settings

    @abstractmethod
    async def authenticate(self, db: AsyncSession, credentials: Credentials) -> User:
        """Verify ``credentials`` and return the matching local user."""

    async def current_user(self, db: AsyncSession, session_token: str | None) -> User | None:
        if not session_token:
            return None
        user_id = decode_session_token(session_token, self.auth_settings)
        if user_id is None:
            return None
        return await get_user_by_id(db, user_id)

    def issue_session_token(self, user: User) -> str:
        return create_session_token(user.id, user.email, user.role.value, self.auth_settings)


# ── Local (password hash in users table) ─────────────────────────────────────

class LocalIdentityProvider(IdentityProvider):
    name = "local"

    async def authenticate(self, db: AsyncSession, credentials: Credentials) -> User:
        user = await get_user_by_email(db, credentials.email)
        if user is None or not user.password_hash:
            raise InvalidCredentialsError()
        if not verify_password(credentials.password, user.password_hash):
            raise InvalidCredentialsError()
        return user


# ── Supabase Auth (GoTrue password grant) ─────────────────────────────────────

def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _parse_role(value: object) -> Role | None:
    if isinstance(value, str):
        try:
            return Role(value.lower())
        except ValueError:
            return None
    return None


class SupabaseIdentityProvider(IdentityProvider):
    name = "supabase"

    def __init__(
        self,
        auth_settings: AuthSettings,
        *,
        url: str,
        anon_key: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(auth_settings)
        if not url or not anon_key:
            raise IdentityProviderError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")
        self.url = url.rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout
        self._transport = transport

    async def authenticate(self, db: AsyncSession, credentials: Credentials) -> User:
        async with httpx.AsyncClient(
            base_url=self.url, timeout=self.timeout, transport=self._transport,
        ) as client:
            try:
                resp = await client.post(
                    "/auth/v1/token",
                    params={"grant_type": "password"},
                    json={"email": credentials.email, "password": credentials.password},
                    headers={"apikey": self.anon_key},
                )
            except httpx.HTTPError as exc:
                logger.warning("Supabase auth request failed: %s", exc)
                raise IdentityProviderError("Identity provider unavailable") from exc

        if resp.status_code in (400, 401, 403, 422):
            body = _json_body(resp) if resp.content else {}
            reason = body.get("error_description") or body.get("msg") or "Invalid credentials"
            raise InvalidCredentialsError(reason)
        if resp.status_code != 200:
            logger.warning("Supabase auth returned HTTP %s", resp.status_code)
            raise IdentityProviderError(f"Identity provider returned {resp.status_code}")

        data = _json_body(resp)
        external = data.get("user") or {}
        external_id = external.get("id")
        if not external_id:
            raise InvalidCredentialsError()

        metadata = external.get("user_metadata") or {}
        return await sync_external_user(
            db,
            user_id=_to_uuid(external_id),
            email=external.get("email"),
            name=metadata.get("name"),
            image=metadata.get("avatar_url"),
            email_verified_at=_parse_timestamp(external.get("email_confirmed_at")),
            role=_parse_role(metadata.get("role")),
        )


def _json_body(resp: httpx.Response) -> dict:
    """Decode a GoTrue JSON object; anything else (e.g. a proxy's HTML page) is a provider fault."""
    try:
        body = resp.json()
    except ValueError as exc:
        logger.warning("Supabase auth returned a non-JSON body (HTTP %s)", resp.status_code)
        raise IdentityProviderError("Malformed response from identity provider") from exc
    if not isinstance(body, dict):
        raise IdentityProviderError("Malformed response from identity provider")
    return body


def _to_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise IdentityProviderError(f"Unexpected user id from provider: {value}") from exc


# ── Factory ───────────────────────────────────────────────────────────────────

def build_identity_provider(settings: Settings, auth_settings: AuthSettings) -> IdentityProvider:
    if settings.identity_provider == "supabase":
        return SupabaseIdentityProvider(
            auth_settings,
            url=settings.supabase_url,
            anon_key=settings.supabase_anon_key,
            timeout=settings.supabase_timeout_secs,
        )
    return LocalIdentityProvider(auth_settings)
