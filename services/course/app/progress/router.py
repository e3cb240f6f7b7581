"""Progress router — mark videos complete and read the dashboard."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_current_user
from app.progress import controller
from app.progress.schemas import DashboardResponse, SetCompletionRequest, VideoProgressResponse
from shared.models.user import CurrentUser

router = APIRouter(prefix="/progress", tags=["Progress"])


@router.put(
    "/videos/{video_id}",
    response_model=VideoProgressResponse,
    summary="Mark a video complete or incomplete",
    description="Idempotent: repeating the same request leaves a single record "
    "with the same state.",
)
async def set_completion(
    video_id: UUID,
    body: SetCompletionRequest,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> VideoProgressResponse:
    return await controller.set_completion(db, current_user.id, video_id, body)


@router.get(
    "/dashboard",
    response_model=DashboardResponse,
    summary="Overall and per-course completion for the current user",
)
async def get_dashboard(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> DashboardResponse:
    return await controller.get_dashboard(db, current_user.id)
