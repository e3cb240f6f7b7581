"""LMS domain Pydantic V2 schemas.

Covers Course, Chapter, Video and Enrollment.
Follows RORO: separate request models from response models.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.pagination import OffsetPage


# ---------------------------------------------------------------------------
# Course request schemas
# ---------------------------------------------------------------------------


class CreateCourseRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=300, description="Course title.")
    description: str | None = Field(default=None, description="Course description.")
    image_url: str | None = Field(default=None, max_length=500, description="Cover image URL.")


class UpdateCourseRequest(BaseModel):
    """Partial update. Omitted or null fields are left unchanged."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(default=None, min_length=1, max_length=300)
    description: str | None = None
    image_url: str | None = Field(default=None, max_length=500)


# ---------------------------------------------------------------------------
# Chapter / video request schemas
# ---------------------------------------------------------------------------


class CreateChapterRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=300)
    description: str | None = None


class UpdateChapterRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(default=None, min_length=1, max_length=300)
    description: str | None = None


class CreateVideoRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=300)
    video_url: str = Field(
        min_length=1,
        max_length=500,
        description="YouTube or Vimeo URL. Other URLs are stored but cannot be embedded.",
    )
    sort_order: int = Field(default=0, ge=0, description="Display order within the chapter.")


class UpdateVideoRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(default=None, min_length=1, max_length=300)
    video_url: str | None = Field(default=None, min_length=1, max_length=500)
    sort_order: int | None = Field(default=None, ge=0)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class CourseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    course_id: UUID
    title: str
    description: str | None
    image_url: str | None
    created_at: datetime


class ChapterResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    chapter_id: UUID
    course_id: UUID
    title: str
    description: str | None
    sort_order: int
    created_at: datetime


class VideoResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    video_id: UUID
    chapter_id: UUID
    title: str
    video_url: str
    sort_order: int
    created_at: datetime


class VideoWithProgressResponse(VideoResponse):
    completed: bool = False


class ChapterWithVideosResponse(ChapterResponse):
    videos: list[VideoWithProgressResponse] = Field(default_factory=list)


class CourseDetailResponse(CourseResponse):
    """Course page: chapters in insertion order, videos by sort order."""

    is_enrolled: bool = False
    chapters: list[ChapterWithVideosResponse] = Field(default_factory=list)


class EnrollmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    enrollment_id: UUID
    user_id: UUID
    course_id: UUID
    created_at: datetime
    course: CourseResponse


CourseListResponse = OffsetPage[CourseResponse]
