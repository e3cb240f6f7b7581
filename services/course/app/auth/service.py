"""
Auth service — user queries and password hashing.

Rules:
  - Zero FastAPI imports.
  - Only SQLAlchemy async session I/O.
"""
from __future__ import annotations

import uuid
from datetime import datetime

from passlib.context import CryptContext
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from shared.constants import Role

_pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    return _pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return _pwd_context.verify(plain, hashed)


# ── User queries ──────────────────────────────────────────────────────────────

async def get_user_by_id(session: AsyncSession, user_id: uuid.UUID) -> User | None:
    return await session.get(User, user_id)


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(
        select(User).where(func.lower(User.email) == email.lower())
    )
    return result.scalar_one_or_none()


async def create_user(
    session: AsyncSession,
    *,
    email: str,
    password: str | None = None,
    name: str | None = None,
    role: Role = Role.USER,
    user_id: uuid.UUID | None = None,
    image: str | None = None,
    email_verified_at: datetime | None = None,
) -> User:
    user = User(
        email=email.lower(),
        name=name,
        role=role,
        image=image,
        email_verified_at=email_verified_at,
        password_hash=hash_password(password) if password else None,
    )
    if user_id is not None:
        user.id = user_id
    session.add(user)
    await session.flush()
    await session.refresh(user)
    return user


async def sync_external_user(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
    email: str | None,
    name: str | None,
    image: str | None,
    email_verified_at: datetime | None,
    role: Role | None,
) -> User:
    """Mirror an externally authenticated account into ``users``.

    First login creates the row (role defaults to ``user``). Later logins
    refresh the profile fields; the stored role is kept unless the provider
    supplies one.
    """
    user = await session.get(User, user_id)
    if user is None:
        user = User(
            id=user_id,
            email=email.lower() if email else None,
            name=name,
            image=image,
            email_verified_at=email_verified_at,
            role=role or Role.USER,
        )
        session.add(user)
    else:
        user.name = name
        user.image = image
        user.email_verified_at = email_verified_at
        if role is not None:
            user.role = role
    await session.flush()
    await session.refresh(user)
    return user
