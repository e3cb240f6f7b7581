#!/usr/bin/env python3
"""
Seed a dev database with a demo learner and one course.
Run from repo root: python scripts/seed-data.py
Uses COURSE_DATABASE_URL from env or .env. Safe to re-run: the learner is
reused and the demo course is only created when no course has its title.
"""
import asyncio
import sys
from pathlib import Path

# Repo root on path for shared and service imports
repo_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(repo_root))
sys.path.insert(0, str(repo_root / "services" / "course"))
sys.path.insert(0, str(repo_root / "shared"))

from dotenv import load_dotenv

load_dotenv(repo_root / ".env")

from sqlalchemy import select

from app.auth.service import create_user, get_user_by_email
from app.config import Settings
from app.lms import service as lms
from app.models import Course
from shared.database.postgres import get_async_session_factory

DEMO_EMAIL = "learner@learnpath.dev"
DEMO_PASSWORD = "learnpath-demo"
DEMO_COURSE = "Python Fundamentals"

# (chapter title, [(video title, url), ...])
DEMO_CHAPTERS = [
    (
        "Getting started",
        [
            ("Installing Python", "https://www.youtube.com/watch?v=YYXdXT2l-Gg"),
            ("Your first script", "https://youtu.be/kqtD5dpn9C8"),
        ],
    ),
    (
        "Core types",
        [
            ("Strings and numbers", "https://vimeo.com/76979871"),
            ("Lists and dicts", "https://www.youtube.com/embed/W8KRzm-HUcc"),
        ],
    ),
]


async def seed() -> None:
    session_factory = get_async_session_factory(Settings().course_database_url)

    async with session_factory() as session:
        learner = await get_user_by_email(session, DEMO_EMAIL)
        if learner is None:
            learner = await create_user(session, email=DEMO_EMAIL, password=DEMO_PASSWORD, name="Demo Learner")
            print(f"Users: seeded {DEMO_EMAIL}")

        existing = await session.execute(select(Course).where(Course.title == DEMO_COURSE))
        course = existing.scalars().first()
        if course is None:
            course = await lms.create_course(
                session,
                title=DEMO_COURSE,
                description="A short tour of the language, one video at a time.",
            )
            for chapter_title, videos in DEMO_CHAPTERS:
                chapter = await lms.create_chapter(session, course.course_id, title=chapter_title)
                for position, (title, url) in enumerate(videos):
                    await lms.create_video(
                        session, chapter.chapter_id, title=title, video_url=url, sort_order=position,
                    )
            print(f"Courses: seeded {DEMO_COURSE!r}")

        if await lms.get_enrollment(session, learner.id, course.course_id) is None:
            await lms.enroll(session, course.course_id, learner.id)
        await session.commit()

    await session_factory.kw["bind"].dispose()


def main() -> None:
    asyncio.run(seed())
    print("Seed done.")


if __name__ == "__main__":
    main()
