from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app.auth.service import create_user
from app.database import close_db, init_db
from app.main import app
from app.models import Chapter, Course, User, Video
from app.rate_limit import limiter
from shared.auth.config import AuthSettings
from shared.auth.tokens import create_session_token
from shared.constants import Role
from shared.database.postgres import Base, get_async_engine

TEST_PASSWORD = "correct-horse-battery"


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    # File-backed so the app's own engine and the test session share one database
    return f"sqlite+aiosqlite:///{tmp_path / 'course.db'}"


@pytest_asyncio.fixture
async def engine(database_url: str) -> AsyncGenerator[AsyncEngine, None]:
    engine = get_async_engine(database_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def async_client(engine: AsyncEngine, database_url: str) -> AsyncGenerator[AsyncClient, None]:
    limiter.enabled = False
    init_db(database_url)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
    await close_db()
    limiter.enabled = True


# ── Factories ─────────────────────────────────────────────────────────────────


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[User]]:
    async def _make(email: str, role: Role = Role.USER, password: str = TEST_PASSWORD) -> User:
        user = await create_user(db_session, email=email, password=password, name=email.split("@")[0], role=role)
        await db_session.commit()
        return user

    return _make


@pytest.fixture
def make_course(db_session: AsyncSession) -> Callable[..., Awaitable[Course]]:
    """Build a course from a list of per-chapter video URL lists."""

    async def _make(title: str, chapters: list[list[str]]) -> Course:
        course = Course(title=title)
        db_session.add(course)
        await db_session.flush()
        for position, urls in enumerate(chapters):
            chapter = Chapter(course_id=course.course_id, title=f"{title} ch{position}", sort_order=position)
            db_session.add(chapter)
            await db_session.flush()
            for order, url in enumerate(urls):
                db_session.add(
                    Video(chapter_id=chapter.chapter_id, title=f"v{order}", video_url=url, sort_order=order)
                )
        await db_session.commit()
        return course

    return _make


def auth_headers(user: User) -> dict[str, str]:
    token = create_session_token(user.id, user.email, user.role.value, AuthSettings())
    return {"Authorization": f"Bearer {token}"}
