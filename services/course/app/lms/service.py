"""LMS service — pure business logic, no FastAPI imports.

Catalog reads, course/chapter/video administration and enrollment.
Deletes rely on the ON DELETE CASCADE foreign keys, so removing a course
takes its chapters, videos, enrollments and progress records with it.
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.exceptions import (
    AlreadyEnrolledError,
    ChapterNotFoundError,
    CourseNotFoundError,
    UserNotFoundError,
    VideoNotFoundError,
)
from app.models.chapter import Chapter
from app.models.course import Course
from app.models.enrollment import Enrollment
from app.models.user import User
from app.models.video import Video
from app.progress.aggregator import completed_video_ids
from app.progress.service import list_progress_records

logger = logging.getLogger(__name__)


def _apply_updates(entity: object, fields: dict[str, object]) -> None:
    for key, value in fields.items():
        if value is not None:
            setattr(entity, key, value)


def ordered_chapters(course: Course) -> list[Chapter]:
    return sorted(course.chapters, key=lambda c: (c.sort_order, c.created_at))


def ordered_videos(chapter: Chapter) -> list[Video]:
    return sorted(chapter.videos, key=lambda v: (v.sort_order, v.created_at))


# ---------------------------------------------------------------------------
# Course
# ---------------------------------------------------------------------------


async def list_courses(
    db: AsyncSession, *, limit: int = 20, offset: int = 0,
) -> tuple[list[Course], int]:
    total = (await db.execute(select(func.count()).select_from(Course))).scalar_one()
    stmt = (
        select(Course)
        .order_by(Course.created_at.desc())
        .offset(offset)
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all()), total


async def get_course_by_id(db: AsyncSession, course_id: UUID) -> Course:
    course = await db.get(Course, course_id)
    if course is None:
        raise CourseNotFoundError(str(course_id))
    return course


async def get_course_with_content(db: AsyncSession, course_id: UUID) -> Course:
    """Course with chapters and their videos loaded."""
    stmt = (
        select(Course)
        .where(Course.course_id == course_id)
        .options(selectinload(Course.chapters).selectinload(Chapter.videos))
        .execution_options(populate_existing=True)
    )
    course = (await db.execute(stmt)).scalar_one_or_none()
    if course is None:
        raise CourseNotFoundError(str(course_id))
    return course


async def get_course_detail(
    db: AsyncSession, course_id: UUID, user_id: UUID,
) -> tuple[Course, set[UUID], bool]:
    """Course content plus the caller's completed video ids and enrollment state."""
    course = await get_course_with_content(db, course_id)
    video_ids = [v.video_id for ch in course.chapters for v in ch.videos]
    records = await list_progress_records(db, user_id, video_ids) if video_ids else []
    enrolled = await get_enrollment(db, user_id, course_id) is not None
    return course, completed_video_ids(records), enrolled


async def create_course(
    db: AsyncSession,
    *,
    title: str,
    description: str | None = None,
    image_url: str | None = None,
) -> Course:
    course = Course(title=title, description=description, image_url=image_url)
    db.add(course)
    await db.flush()
    await db.refresh(course)
    logger.info("Course created: %s (%s)", course.course_id, title)
    return course


async def update_course(db: AsyncSession, course_id: UUID, **fields: object) -> Course:
    course = await get_course_by_id(db, course_id)
    _apply_updates(course, fields)
    await db.flush()
    await db.refresh(course)
    logger.info("Course updated: %s fields=%s", course_id, sorted(fields))
    return course


async def delete_course(db: AsyncSession, course_id: UUID) -> None:
    course = await get_course_by_id(db, course_id)
    await db.delete(course)
    await db.flush()
    logger.info("Course deleted: %s", course_id)


# ---------------------------------------------------------------------------
# Chapter
# ---------------------------------------------------------------------------


async def get_chapter_by_id(db: AsyncSession, chapter_id: UUID) -> Chapter:
    chapter = await db.get(Chapter, chapter_id)
    if chapter is None:
        raise ChapterNotFoundError(str(chapter_id))
    return chapter


async def create_chapter(
    db: AsyncSession,
    course_id: UUID,
    *,
    title: str,
    description: str | None = None,
) -> Chapter:
    await get_course_by_id(db, course_id)
    # Append after the current last chapter; deletes leave gaps a count would refill
    next_order = (
        await db.execute(
            select(func.coalesce(func.max(Chapter.sort_order), -1) + 1)
            .where(Chapter.course_id == course_id)
        )
    ).scalar_one()
    chapter = Chapter(
        course_id=course_id,
        title=title,
        description=description,
        sort_order=next_order,
    )
    db.add(chapter)
    await db.flush()
    await db.refresh(chapter)
    logger.info("Chapter created: %s in course %s", chapter.chapter_id, course_id)
    return chapter


async def update_chapter(db: AsyncSession, chapter_id: UUID, **fields: object) -> Chapter:
    chapter = await get_chapter_by_id(db, chapter_id)
    _apply_updates(chapter, fields)
    await db.flush()
    await db.refresh(chapter)
    logger.info("Chapter updated: %s fields=%s", chapter_id, sorted(fields))
    return chapter


async def delete_chapter(db: AsyncSession, chapter_id: UUID) -> None:
    chapter = await get_chapter_by_id(db, chapter_id)
    await db.delete(chapter)
    await db.flush()
    logger.info("Chapter deleted: %s", chapter_id)


# ---------------------------------------------------------------------------
# Video
# ---------------------------------------------------------------------------


async def get_video_by_id(db: AsyncSession, video_id: UUID) -> Video:
    video = await db.get(Video, video_id)
    if video is None:
        raise VideoNotFoundError(str(video_id))
    return video


async def create_video(
    db: AsyncSession,
    chapter_id: UUID,
    *,
    title: str,
    video_url: str,
    sort_order: int = 0,
) -> Video:
    await get_chapter_by_id(db, chapter_id)
    video = Video(
        chapter_id=chapter_id,
        title=title,
        video_url=video_url,
        sort_order=sort_order,
    )
    db.add(video)
    await db.flush()
    await db.refresh(video)
    logger.info("Video created: %s in chapter %s", video.video_id, chapter_id)
    return video


async def update_video(db: AsyncSession, video_id: UUID, **fields: object) -> Video:
    video = await get_video_by_id(db, video_id)
    _apply_updates(video, fields)
    await db.flush()
    await db.refresh(video)
    logger.info("Video updated: %s fields=%s", video_id, sorted(fields))
    return video


async def delete_video(db: AsyncSession, video_id: UUID) -> None:
    video = await get_video_by_id(db, video_id)
    await db.delete(video)
    await db.flush()
    logger.info("Video deleted: %s", video_id)


# ---------------------------------------------------------------------------
# Enrollment
# ---------------------------------------------------------------------------


async def get_enrollment(
    db: AsyncSession, user_id: UUID, course_id: UUID,
) -> Enrollment | None:
    stmt = select(Enrollment).where(
        Enrollment.user_id == user_id,
        Enrollment.course_id == course_id,
    )
    return (await db.execute(stmt)).scalar_one_or_none()


async def enroll(db: AsyncSession, course_id: UUID, user_id: UUID) -> Enrollment:
    course = await get_course_by_id(db, course_id)
    if await db.get(User, user_id) is None:
        raise UserNotFoundError(str(user_id))
    if await get_enrollment(db, user_id, course_id) is not None:
        raise AlreadyEnrolledError()

    await db.flush()
    enrollment = Enrollment(user_id=user_id, course_id=course_id)
    try:
        # A duplicate pair rolls back this savepoint only
        async with db.begin_nested():
            db.add(enrollment)
            await db.flush()
    except IntegrityError as exc:
        raise AlreadyEnrolledError() from exc
    await db.refresh(enrollment)
    enrollment.course = course
    logger.info("Enrolled: user=%s course=%s", user_id, course_id)
    return enrollment


async def list_enrollments(db: AsyncSession, user_id: UUID) -> list[Enrollment]:
    stmt = (
        select(Enrollment)
        .where(Enrollment.user_id == user_id)
        .options(selectinload(Enrollment.course))
        .order_by(Enrollment.created_at)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())
