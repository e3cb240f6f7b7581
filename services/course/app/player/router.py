"""Player router — the watch page for a single video."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_current_user
from app.player import controller
from app.player.schemas import VideoPageResponse
from shared.models.user import CurrentUser

router = APIRouter(prefix="/player", tags=["Player"])


@router.get(
    "/courses/{course_id}/videos/{video_id}",
    response_model=VideoPageResponse,
    summary="Video page: embed reference, completion state and chapter sidebar",
    description="404 when the video or course does not exist, 400 when the video "
    "belongs to a different course. Unsupported video URLs return "
    "`embed: null` and `supported: false`.",
)
async def get_video_page(
    course_id: UUID,
    video_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> VideoPageResponse:
    return await controller.get_video_page(db, course_id, video_id, current_user.id)
