"""Player domain Pydantic V2 schemas."""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field

from app.lms.schemas import (
    ChapterWithVideosResponse,
    CourseResponse,
    VideoResponse,
)
from app.player.resolver import VideoProvider


class EmbedResponse(BaseModel):
    provider: VideoProvider
    video_id: str = Field(description="The provider's own video id.")
    embed_url: str


class VideoPageResponse(BaseModel):
    """Everything the watch page needs in one round trip."""

    video: VideoResponse
    course: CourseResponse
    chapter_id: UUID
    embed: EmbedResponse | None = Field(
        default=None, description="Null when the URL is not a YouTube or Vimeo link.",
    )
    supported: bool
    is_completed: bool
    course_progress: float = Field(ge=0, le=100)
    previous_video_id: UUID | None = None
    next_video_id: UUID | None = None
    chapters: list[ChapterWithVideosResponse]
