import uuid

import httpx
import pytest
from httpx import AsyncClient

from app.auth.provider import SupabaseIdentityProvider
from app.dependencies import get_identity_provider
from app.main import app
from shared.auth.config import AuthSettings
from shared.constants import Role
from tests.conftest import TEST_PASSWORD, auth_headers


@pytest.mark.asyncio
async def test_login_sets_session_cookie(async_client: AsyncClient, make_user) -> None:
    await make_user("cookie@example.com")

    response = await async_client.post(
        "/api/v1/auth/login",
        json={"email": "cookie@example.com", "password": TEST_PASSWORD},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == "cookie@example.com"
    assert "password_hash" not in data["user"]
    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith("_session=")
    assert "HttpOnly" in set_cookie
    assert "samesite=lax" in set_cookie.lower()


@pytest.mark.asyncio
async def test_cookie_authenticates_me(async_client: AsyncClient, make_user) -> None:
    await make_user("me@example.com")
    login = await async_client.post(
        "/api/v1/auth/login",
        json={"email": "me@example.com", "password": TEST_PASSWORD},
    )
    token = login.json()["access_token"]

    async_client.cookies.clear()
    async_client.cookies.set("_session", token)
    response = await async_client.get("/api/v1/auth/me")
    assert response.status_code == 200
    assert response.json()["email"] == "me@example.com"


@pytest.mark.asyncio
async def test_login_rejects_bad_password(async_client: AsyncClient, make_user) -> None:
    await make_user("bad@example.com")
    response = await async_client.post(
        "/api/v1/auth/login",
        json={"email": "bad@example.com", "password": "nope"},
    )
    assert response.status_code == 401
    assert "set-cookie" not in response.headers


@pytest.mark.asyncio
async def test_me_requires_session(async_client: AsyncClient) -> None:
    response = await async_client.get("/api/v1/auth/me")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_with_bearer(async_client: AsyncClient, make_user) -> None:
    user = await make_user("bearer@example.com", role=Role.ADMIN)
    response = await async_client.get("/api/v1/auth/me", headers=auth_headers(user))
    assert response.status_code == 200
    assert response.json()["role"] == "admin"


@pytest.mark.asyncio
async def test_logout_clears_cookie(async_client: AsyncClient) -> None:
    response = await async_client.post("/api/v1/auth/logout")
    assert response.status_code == 204
    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith('_session=""') or set_cookie.startswith("_session=;")
    assert "Max-Age=0" in set_cookie


@pytest.mark.asyncio
async def test_login_through_supabase(async_client: AsyncClient) -> None:
    external_id = uuid.uuid4()

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "user": {
                    "id": str(external_id),
                    "email": "remote@example.com",
                    "user_metadata": {"name": "Remote", "role": "admin"},
                },
            },
        )

    app.dependency_overrides[get_identity_provider] = lambda: SupabaseIdentityProvider(
        AuthSettings(),
        url="https://project.supabase.co",
        anon_key="anon-key",
        transport=httpx.MockTransport(handler),
    )

    response = await async_client.post(
        "/api/v1/auth/login",
        json={"email": "remote@example.com", "password": "whatever"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["user"]["id"] == str(external_id)
    assert body["user"]["role"] == "admin"

    me = await async_client.get(
        "/api/v1/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"},
    )
    assert me.status_code == 200
    assert me.json()["name"] == "Remote"
