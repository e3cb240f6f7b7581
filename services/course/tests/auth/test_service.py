import uuid
from datetime import datetime, timezone

import httpx
import pytest

from app.auth.provider import (
    Credentials,
    LocalIdentityProvider,
    SupabaseIdentityProvider,
)
from app.auth.service import create_user, sync_external_user
from app.exceptions import IdentityProviderError, InvalidCredentialsError
from app.models import User
from shared.auth.config import AuthSettings
from shared.constants import Role


@pytest.mark.asyncio
async def test_create_user_hashes_password(db_session) -> None:
    user = await create_user(db_session, email="Hash@Example.com", password="s3cret-pass")
    assert user.email == "hash@example.com"
    assert user.role == Role.USER
    assert user.password_hash and user.password_hash != "s3cret-pass"


@pytest.mark.asyncio
async def test_local_provider_authenticates(db_session) -> None:
    await create_user(db_session, email="local@example.com", password="s3cret-pass")
    provider = LocalIdentityProvider(AuthSettings())

    user = await provider.authenticate(db_session, Credentials("LOCAL@example.com", "s3cret-pass"))
    assert user.email == "local@example.com"

    token = provider.issue_session_token(user)
    assert (await provider.current_user(db_session, token)).id == user.id


@pytest.mark.asyncio
async def test_local_provider_rejects_wrong_password(db_session) -> None:
    await create_user(db_session, email="wrong@example.com", password="right-pass")
    provider = LocalIdentityProvider(AuthSettings())
    with pytest.raises(InvalidCredentialsError):
        await provider.authenticate(db_session, Credentials("wrong@example.com", "wrong-pass"))


@pytest.mark.asyncio
async def test_local_provider_rejects_unknown_email(db_session) -> None:
    provider = LocalIdentityProvider(AuthSettings())
    with pytest.raises(InvalidCredentialsError):
        await provider.authenticate(db_session, Credentials("nobody@example.com", "whatever"))


@pytest.mark.asyncio
async def test_current_user_rejects_garbage_token(db_session) -> None:
    provider = LocalIdentityProvider(AuthSettings())
    assert await provider.current_user(db_session, "not-a-jwt") is None
    assert await provider.current_user(db_session, None) is None


@pytest.mark.asyncio
async def test_current_user_for_deleted_account(db_session) -> None:
    user = await create_user(db_session, email="deleted@example.com", password="pw-12345")
    provider = LocalIdentityProvider(AuthSettings())
    token = provider.issue_session_token(user)
    await db_session.delete(user)
    await db_session.flush()
    assert await provider.current_user(db_session, token) is None


@pytest.mark.asyncio
async def test_sync_external_user_keeps_role(db_session) -> None:
    user_id = uuid.uuid4()
    created = await sync_external_user(
        db_session, user_id=user_id, email="ext@example.com", name="Ext",
        image=None, email_verified_at=None, role=Role.ADMIN,
    )
    assert created.role == Role.ADMIN

    verified = datetime(2024, 1, 2, tzinfo=timezone.utc)
    updated = await sync_external_user(
        db_session, user_id=user_id, email="ext@example.com", name="Renamed",
        image="https://cdn.example.com/a.png", email_verified_at=verified, role=None,
    )
    assert updated.name == "Renamed"
    assert updated.image == "https://cdn.example.com/a.png"
    assert updated.role == Role.ADMIN


# ── Supabase ──────────────────────────────────────────────────────────────────


def _supabase(handler) -> SupabaseIdentityProvider:
    return SupabaseIdentityProvider(
        AuthSettings(),
        url="https://project.supabase.co",
        anon_key="anon-key",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_supabase_creates_local_user(db_session) -> None:
    external_id = uuid.uuid4()
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "access_token": "provider-token",
                "user": {
                    "id": str(external_id),
                    "email": "Supa@Example.com",
                    "email_confirmed_at": "2024-05-01T10:00:00+00:00",
                    "user_metadata": {"name": "Supa Base", "avatar_url": "https://img/x.png"},
                },
            },
        )

    user = await _supabase(handler).authenticate(db_session, Credentials("supa@example.com", "pw"))

    assert seen[0].url.path == "/auth/v1/token"
    assert seen[0].url.params["grant_type"] == "password"
    assert seen[0].headers["apikey"] == "anon-key"
    assert user.id == external_id
    assert user.email == "supa@example.com"
    assert user.name == "Supa Base"
    assert user.role == Role.USER
    assert user.email_verified_at is not None
    assert await db_session.get(User, external_id) is user


@pytest.mark.asyncio
async def test_supabase_rejected_credentials(db_session) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400, json={"error": "invalid_grant", "error_description": "Invalid login credentials"},
        )

    with pytest.raises(InvalidCredentialsError) as exc_info:
        await _supabase(handler).authenticate(db_session, Credentials("a@example.com", "bad"))
    assert exc_info.value.reason == "Invalid login credentials"


@pytest.mark.asyncio
async def test_supabase_unreachable(db_session) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(IdentityProviderError):
        await _supabase(handler).authenticate(db_session, Credentials("a@example.com", "pw"))


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [401, 200])
async def test_supabase_html_body(db_session, status: int) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, text="<html><body>502 Bad Gateway</body></html>")

    with pytest.raises(IdentityProviderError):
        await _supabase(handler).authenticate(db_session, Credentials("a@example.com", "pw"))


@pytest.mark.asyncio
async def test_supabase_rejection_without_body(db_session) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401)

    with pytest.raises(InvalidCredentialsError) as exc_info:
        await _supabase(handler).authenticate(db_session, Credentials("a@example.com", "bad"))
    assert exc_info.value.reason == "Invalid credentials"


def test_supabase_requires_configuration() -> None:
    with pytest.raises(IdentityProviderError):
        SupabaseIdentityProvider(AuthSettings(), url="", anon_key="")
