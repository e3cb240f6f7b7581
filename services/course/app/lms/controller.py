"""LMS controller — maps service results to HTTP responses, catches domain exceptions."""

from __future__ import annotations

from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import AlreadyEnrolledError, NotFoundError
from app.lms import service
from app.lms.schemas import (
    ChapterResponse,
    ChapterWithVideosResponse,
    CourseDetailResponse,
    CourseListResponse,
    CourseResponse,
    CreateChapterRequest,
    CreateCourseRequest,
    CreateVideoRequest,
    EnrollmentResponse,
    UpdateChapterRequest,
    UpdateCourseRequest,
    UpdateVideoRequest,
    VideoResponse,
    VideoWithProgressResponse,
)
from app.pagination import OffsetParams


def _handle_domain_error(exc: Exception) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, AlreadyEnrolledError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Already enrolled in this course.")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error.")


_DOMAIN_ERRORS = (NotFoundError, AlreadyEnrolledError)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


async def list_courses(db: AsyncSession, params: OffsetParams) -> CourseListResponse:
    courses, total = await service.list_courses(db, limit=params.limit, offset=params.offset)
    return CourseListResponse(
        items=[CourseResponse.model_validate(c) for c in courses],
        total=total,
        limit=params.limit,
        offset=params.offset,
    )


async def get_course_detail(
    db: AsyncSession, course_id: UUID, user_id: UUID,
) -> CourseDetailResponse:
    try:
        course, completed, enrolled = await service.get_course_detail(db, course_id, user_id)
    except _DOMAIN_ERRORS as exc:
        raise _handle_domain_error(exc) from exc

    chapters = [
        ChapterWithVideosResponse(
            **ChapterResponse.model_validate(chapter).model_dump(),
            videos=[
                VideoWithProgressResponse(
                    **VideoResponse.model_validate(video).model_dump(),
                    completed=video.video_id in completed,
                )
                for video in service.ordered_videos(chapter)
            ],
        )
        for chapter in service.ordered_chapters(course)
    ]
    return CourseDetailResponse(
        **CourseResponse.model_validate(course).model_dump(),
        is_enrolled=enrolled,
        chapters=chapters,
    )


# ---------------------------------------------------------------------------
# Course administration
# ---------------------------------------------------------------------------


async def create_course(db: AsyncSession, body: CreateCourseRequest) -> CourseResponse:
    course = await service.create_course(db, **body.model_dump())
    return CourseResponse.model_validate(course)


async def update_course(
    db: AsyncSession, course_id: UUID, body: UpdateCourseRequest,
) -> CourseResponse:
    try:
        course = await service.update_course(db, course_id, **body.model_dump(exclude_unset=True))
        return CourseResponse.model_validate(course)
    except _DOMAIN_ERRORS as exc:
        raise _handle_domain_error(exc) from exc


async def delete_course(db: AsyncSession, course_id: UUID) -> None:
    try:
        await service.delete_course(db, course_id)
    except _DOMAIN_ERRORS as exc:
        raise _handle_domain_error(exc) from exc


# ---------------------------------------------------------------------------
# Chapter administration
# ---------------------------------------------------------------------------


async def create_chapter(
    db: AsyncSession, course_id: UUID, body: CreateChapterRequest,
) -> ChapterResponse:
    try:
        chapter = await service.create_chapter(db, course_id, **body.model_dump())
        return ChapterResponse.model_validate(chapter)
    except _DOMAIN_ERRORS as exc:
        raise _handle_domain_error(exc) from exc


async def update_chapter(
    db: AsyncSession, chapter_id: UUID, body: UpdateChapterRequest,
) -> ChapterResponse:
    try:
        chapter = await service.update_chapter(db, chapter_id, **body.model_dump(exclude_unset=True))
        return ChapterResponse.model_validate(chapter)
    except _DOMAIN_ERRORS as exc:
        raise _handle_domain_error(exc) from exc


async def delete_chapter(db: AsyncSession, chapter_id: UUID) -> None:
    try:
        await service.delete_chapter(db, chapter_id)
    except _DOMAIN_ERRORS as exc:
        raise _handle_domain_error(exc) from exc


# ---------------------------------------------------------------------------
# Video administration
# ---------------------------------------------------------------------------


async def create_video(
    db: AsyncSession, chapter_id: UUID, body: CreateVideoRequest,
) -> VideoResponse:
    try:
        video = await service.create_video(db, chapter_id, **body.model_dump())
        return VideoResponse.model_validate(video)
    except _DOMAIN_ERRORS as exc:
        raise _handle_domain_error(exc) from exc


async def update_video(
    db: AsyncSession, video_id: UUID, body: UpdateVideoRequest,
) -> VideoResponse:
    try:
        video = await service.update_video(db, video_id, **body.model_dump(exclude_unset=True))
        return VideoResponse.model_validate(video)
    except _DOMAIN_ERRORS as exc:
        raise _handle_domain_error(exc) from exc


async def delete_video(db: AsyncSession, video_id: UUID) -> None:
    try:
        await service.delete_video(db, video_id)
    except _DOMAIN_ERRORS as exc:
        raise _handle_domain_error(exc) from exc


# ---------------------------------------------------------------------------
# Enrollment
# ---------------------------------------------------------------------------


async def enroll(db: AsyncSession, course_id: UUID, user_id: UUID) -> EnrollmentResponse:
    try:
        enrollment = await service.enroll(db, course_id, user_id)
        return EnrollmentResponse.model_validate(enrollment)
    except _DOMAIN_ERRORS as exc:
        raise _handle_domain_error(exc) from exc


async def list_enrollments(db: AsyncSession, user_id: UUID) -> list[EnrollmentResponse]:
    enrollments = await service.list_enrollments(db, user_id)
    return [EnrollmentResponse.model_validate(e) for e in enrollments]
