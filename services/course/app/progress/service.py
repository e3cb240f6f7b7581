"""Progress service — pure business logic, no FastAPI imports.

Owns the per-(user, video) completion flag and assembles the inputs the
aggregator needs. Every read goes to the database; nothing is cached.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.exceptions import UserNotFoundError, VideoNotFoundError
from app.models.chapter import Chapter
from app.models.course import Course
from app.models.enrollment import Enrollment
from app.models.user import User
from app.models.video import Video
from app.models.video_progress import VideoProgress
from app.progress.aggregator import ProgressSummary, compute_progress

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Progress store
# ---------------------------------------------------------------------------


async def get_progress(
    db: AsyncSession, user_id: UUID, video_id: UUID,
) -> VideoProgress | None:
    stmt = select(VideoProgress).where(
        VideoProgress.user_id == user_id,
        VideoProgress.video_id == video_id,
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def set_completion(
    db: AsyncSession,
    user_id: UUID,
    video_id: UUID,
    completed: bool,
) -> VideoProgress:
    """Upsert the completion flag for (user, video).

    Idempotent: repeated calls leave exactly one row holding the last value.
    Missing users/videos surface through the foreign keys on insert and are
    reported as ``UserNotFoundError`` / ``VideoNotFoundError``.
    """
    now = datetime.now(timezone.utc)
    progress = await get_progress(db, user_id, video_id)

    if progress is None:
        # Flush the caller's pending work outside the savepoint below
        await db.flush()
        progress = VideoProgress(
            user_id=user_id,
            video_id=video_id,
            completed=completed,
            updated_at=now,
        )
        try:
            async with db.begin_nested():
                db.add(progress)
                await db.flush()
        except IntegrityError as exc:
            # Either a concurrent writer inserted the same pair first, or a
            # foreign key rejected the row. Only the savepoint is rolled back.
            progress = await get_progress(db, user_id, video_id)
            if progress is None:
                await _raise_missing_reference(db, user_id, video_id, exc)
            progress.completed = completed
            progress.updated_at = now
            await db.flush()
    else:
        progress.completed = completed
        progress.updated_at = now
        await db.flush()

    await db.refresh(progress)
    logger.info(
        "Progress set: user=%s video=%s completed=%s", user_id, video_id, completed,
    )
    return progress


async def _raise_missing_reference(
    db: AsyncSession, user_id: UUID, video_id: UUID, exc: IntegrityError,
) -> None:
    if await db.get(Video, video_id) is None:
        raise VideoNotFoundError(str(video_id)) from exc
    if await db.get(User, user_id) is None:
        raise UserNotFoundError(str(user_id)) from exc
    raise exc


async def list_progress_records(
    db: AsyncSession,
    user_id: UUID,
    video_ids: Iterable[UUID] | None = None,
) -> list[VideoProgress]:
    stmt = select(VideoProgress).where(VideoProgress.user_id == user_id)
    if video_ids is not None:
        stmt = stmt.where(VideoProgress.video_id.in_(list(video_ids)))
    result = await db.execute(stmt)
    return list(result.scalars().all())


# ---------------------------------------------------------------------------
# Aggregation inputs
# ---------------------------------------------------------------------------


async def list_enrolled_courses(db: AsyncSession, user_id: UUID) -> list[Course]:
    """Courses the user is enrolled in, chapters and videos eagerly loaded."""
    stmt = (
        select(Course)
        .join(Enrollment, Enrollment.course_id == Course.course_id)
        .where(Enrollment.user_id == user_id)
        .options(selectinload(Course.chapters).selectinload(Chapter.videos))
        .order_by(Enrollment.created_at)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return list(result.scalars().unique().all())


async def get_dashboard(
    db: AsyncSession, user_id: UUID,
) -> tuple[User, list[Course], ProgressSummary]:
    user = await db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(str(user_id))

    courses = await list_enrolled_courses(db, user_id)
    records = await list_progress_records(db, user_id)
    return user, courses, compute_progress(courses, records)
