#!/usr/bin/env python3
"""
Create (or promote) an admin account for course administration.

Reads credentials from .env:
    ADMIN_EMAIL      — admin account email (required)
    ADMIN_PASSWORD   — admin account password (required for new accounts)
    ADMIN_NAME       — display name (optional, defaults to "Admin")

An existing account with that email (including one mirrored from Supabase)
is promoted to the admin role; its password is left untouched.

Usage:
    cd learnpath-backend
    python -m scripts.create_admin
"""
from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

# Add backend root to path so imports resolve
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "services" / "course"))
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "shared"))

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from app.auth.service import create_user, get_user_by_email
from app.config import Settings
from shared.constants import Role
from shared.database.postgres import get_async_session_factory


async def main() -> None:
    email = os.getenv("ADMIN_EMAIL")
    password = os.getenv("ADMIN_PASSWORD")
    if not email:
        print("Error: ADMIN_EMAIL must be set in .env")
        sys.exit(1)
    name = os.getenv("ADMIN_NAME", "Admin")

    session_factory = get_async_session_factory(Settings().course_database_url)

    async with session_factory() as session:
        existing = await get_user_by_email(session, email)

        if existing is not None:
            print(f"User {email} already exists (id={existing.id}).")
            if existing.role != Role.ADMIN:
                existing.role = Role.ADMIN
                await session.commit()
                print("  -> Promoted to admin.")
            else:
                print("  -> Already an admin. Nothing to do.")
        elif not password:
            print("Error: ADMIN_PASSWORD must be set to create a new account")
            sys.exit(1)
        else:
            user = await create_user(session, email=email, password=password, name=name, role=Role.ADMIN)
            await session.commit()
            print(f"Admin created: {email} (id={user.id})")

    await session_factory.kw["bind"].dispose()


if __name__ == "__main__":
    asyncio.run(main())
