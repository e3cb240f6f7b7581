"""Progress domain Pydantic V2 schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.auth.schemas import UserResponse
from app.lms.schemas import CourseResponse


class SetCompletionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    completed: bool


class VideoProgressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    video_id: UUID
    user_id: UUID
    completed: bool
    updated_at: datetime


class CourseProgressResponse(CourseResponse):
    progress: float = Field(ge=0, le=100, description="Completed videos / total videos, in percent.")
    completed_videos: int
    total_videos: int


class DashboardResponse(BaseModel):
    user: UserResponse
    overall_progress: float = Field(
        ge=0, le=100,
        description="Completed videos / total videos pooled across every enrolled course.",
    )
    completed_videos: int
    total_videos: int
    courses: list[CourseProgressResponse]
