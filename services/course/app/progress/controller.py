"""Progress controller — maps service results to HTTP responses, catches domain exceptions."""

from __future__ import annotations

from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.schemas import UserResponse
from app.exceptions import NotFoundError
from app.lms.schemas import CourseResponse
from app.progress import service
from app.progress.schemas import (
    CourseProgressResponse,
    DashboardResponse,
    SetCompletionRequest,
    VideoProgressResponse,
)


def _handle_domain_error(exc: Exception) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error.")


async def set_completion(
    db: AsyncSession, user_id: UUID, video_id: UUID, body: SetCompletionRequest,
) -> VideoProgressResponse:
    try:
        progress = await service.set_completion(db, user_id, video_id, body.completed)
        return VideoProgressResponse.model_validate(progress)
    except NotFoundError as exc:
        raise _handle_domain_error(exc) from exc


async def get_dashboard(db: AsyncSession, user_id: UUID) -> DashboardResponse:
    try:
        user, courses, summary = await service.get_dashboard(db, user_id)
    except NotFoundError as exc:
        raise _handle_domain_error(exc) from exc

    by_course = {c.course_id: c for c in summary.courses}
    return DashboardResponse(
        user=UserResponse.model_validate(user),
        overall_progress=summary.overall,
        completed_videos=summary.completed,
        total_videos=summary.total,
        courses=[
            CourseProgressResponse(
                **CourseResponse.model_validate(course).model_dump(),
                progress=by_course[course.course_id].percentage,
                completed_videos=by_course[course.course_id].completed,
                total_videos=by_course[course.course_id].total,
            )
            for course in courses
        ],
    )
