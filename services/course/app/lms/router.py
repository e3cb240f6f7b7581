"""LMS router — HTTP layer only.

Catalog, course pages and enrollment for any signed-in user; course, chapter
and video administration for admins. Delegates to the controller.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_current_user, require_admin
from app.lms import controller
from app.lms.schemas import (
    ChapterResponse,
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
)
from app.pagination import OffsetParams
from shared.models.user import CurrentUser

router = APIRouter(prefix="/lms", tags=["LMS"])


# ======================================================================
# Catalog + enrollment
# ======================================================================


@router.get(
    "/courses",
    response_model=CourseListResponse,
    summary="List courses (catalog)",
)
async def list_courses(
    params: OffsetParams = Depends(),
    db: AsyncSession = Depends(get_db),
    _: CurrentUser = Depends(get_current_user),
) -> CourseListResponse:
    return await controller.list_courses(db, params)


@router.get(
    "/courses/{course_id}",
    response_model=CourseDetailResponse,
    summary="Course page with chapters, videos and completion flags",
)
async def get_course(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> CourseDetailResponse:
    return await controller.get_course_detail(db, course_id, current_user.id)


@router.post(
    "/courses/{course_id}/enroll",
    response_model=EnrollmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Enroll in a course",
)
async def enroll(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> EnrollmentResponse:
    return await controller.enroll(db, course_id, current_user.id)


@router.get(
    "/enrollments",
    response_model=list[EnrollmentResponse],
    summary="My enrollments",
)
async def list_enrollments(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> list[EnrollmentResponse]:
    return await controller.list_enrollments(db, current_user.id)


# ======================================================================
# Course administration
# ======================================================================


@router.post(
    "/courses",
    response_model=CourseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a course (admin)",
)
async def create_course(
    body: CreateCourseRequest,
    db: AsyncSession = Depends(get_db),
    _: CurrentUser = Depends(require_admin),
) -> CourseResponse:
    return await controller.create_course(db, body)


@router.patch(
    "/courses/{course_id}",
    response_model=CourseResponse,
    summary="Update a course (admin)",
)
async def update_course(
    course_id: UUID,
    body: UpdateCourseRequest,
    db: AsyncSession = Depends(get_db),
    _: CurrentUser = Depends(require_admin),
) -> CourseResponse:
    return await controller.update_course(db, course_id, body)


@router.delete(
    "/courses/{course_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a course and everything under it (admin)",
)
async def delete_course(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
    _: CurrentUser = Depends(require_admin),
) -> None:
    await controller.delete_course(db, course_id)


# ======================================================================
# Chapter administration
# ======================================================================


@router.post(
    "/courses/{course_id}/chapters",
    response_model=ChapterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Append a chapter to a course (admin)",
)
async def create_chapter(
    course_id: UUID,
    body: CreateChapterRequest,
    db: AsyncSession = Depends(get_db),
    _: CurrentUser = Depends(require_admin),
) -> ChapterResponse:
    return await controller.create_chapter(db, course_id, body)


@router.patch(
    "/chapters/{chapter_id}",
    response_model=ChapterResponse,
    summary="Update a chapter (admin)",
)
async def update_chapter(
    chapter_id: UUID,
    body: UpdateChapterRequest,
    db: AsyncSession = Depends(get_db),
    _: CurrentUser = Depends(require_admin),
) -> ChapterResponse:
    return await controller.update_chapter(db, chapter_id, body)


@router.delete(
    "/chapters/{chapter_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a chapter and its videos (admin)",
)
async def delete_chapter(
    chapter_id: UUID,
    db: AsyncSession = Depends(get_db),
    _: CurrentUser = Depends(require_admin),
) -> None:
    await controller.delete_chapter(db, chapter_id)


# ======================================================================
# Video administration
# ======================================================================


@router.post(
    "/chapters/{chapter_id}/videos",
    response_model=VideoResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a video to a chapter (admin)",
)
async def create_video(
    chapter_id: UUID,
    body: CreateVideoRequest,
    db: AsyncSession = Depends(get_db),
    _: CurrentUser = Depends(require_admin),
) -> VideoResponse:
    return await controller.create_video(db, chapter_id, body)


@router.patch(
    "/videos/{video_id}",
    response_model=VideoResponse,
    summary="Update a video (admin)",
)
async def update_video(
    video_id: UUID,
    body: UpdateVideoRequest,
    db: AsyncSession = Depends(get_db),
    _: CurrentUser = Depends(require_admin),
) -> VideoResponse:
    return await controller.update_video(db, video_id, body)


@router.delete(
    "/videos/{video_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a video and its progress records (admin)",
)
async def delete_video(
    video_id: UUID,
    db: AsyncSession = Depends(get_db),
    _: CurrentUser = Depends(require_admin),
) -> None:
    await controller.delete_video(db, video_id)
