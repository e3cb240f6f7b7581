"""Player controller — maps service results to HTTP responses, catches domain exceptions."""

from __future__ import annotations

from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import NotFoundError, VideoNotInCourseError
from app.lms.schemas import (
    ChapterResponse,
    ChapterWithVideosResponse,
    CourseResponse,
    VideoResponse,
    VideoWithProgressResponse,
)
from app.player import service
from app.player.schemas import EmbedResponse, VideoPageResponse


def _handle_domain_error(exc: Exception) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, VideoNotInCourseError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error.")


async def get_video_page(
    db: AsyncSession, course_id: UUID, video_id: UUID, user_id: UUID,
) -> VideoPageResponse:
    try:
        page = await service.get_video_page(db, course_id, video_id, user_id)
    except (NotFoundError, VideoNotInCourseError) as exc:
        raise _handle_domain_error(exc) from exc

    embed = page["embed"]
    return VideoPageResponse(
        video=VideoResponse.model_validate(page["video"]),
        course=CourseResponse.model_validate(page["course"]),
        chapter_id=page["chapter_id"],
        embed=(
            EmbedResponse(provider=embed.provider, video_id=embed.video_id, embed_url=embed.embed_url)
            if embed is not None
            else None
        ),
        supported=page["supported"],
        is_completed=page["is_completed"],
        course_progress=page["course_progress"],
        previous_video_id=page["previous_video_id"],
        next_video_id=page["next_video_id"],
        chapters=[
            ChapterWithVideosResponse(
                **ChapterResponse.model_validate(entry["chapter"]).model_dump(),
                videos=[
                    VideoWithProgressResponse(
                        **VideoResponse.model_validate(video).model_dump(),
                        completed=done,
                    )
                    for video, done in entry["videos"]
                ],
            )
            for entry in page["chapters"]
        ],
    )
