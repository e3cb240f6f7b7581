"""Player service — assembles the video page.

Pure business logic, no FastAPI imports. The embed reference is derived from
the stored URL on every request; an unsupported URL is a normal result and
the page still renders without a player.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import VideoNotFoundError, VideoNotInCourseError
from app.lms.service import get_course_with_content, ordered_chapters, ordered_videos
from app.models.chapter import Chapter
from app.models.video import Video
from app.player.resolver import resolve
from app.progress.aggregator import completed_video_ids, percentage
from app.progress.service import list_progress_records


async def get_video_page(
    db: AsyncSession,
    course_id: UUID,
    video_id: UUID,
    user_id: UUID,
) -> dict:
    """Load a video in the context of its course, with the caller's progress."""
    video = await db.get(Video, video_id)
    if video is None:
        raise VideoNotFoundError(str(video_id))

    chapter = await db.get(Chapter, video.chapter_id)
    if chapter is None or chapter.course_id != course_id:
        raise VideoNotInCourseError(str(video_id), str(course_id))

    course = await get_course_with_content(db, course_id)
    chapters = ordered_chapters(course)
    playlist = [v for ch in chapters for v in ordered_videos(ch)]

    records = await list_progress_records(db, user_id, [v.video_id for v in playlist])
    completed = completed_video_ids(records)

    position = next(i for i, v in enumerate(playlist) if v.video_id == video_id)
    embed = resolve(video.video_url)

    return {
        "video": playlist[position],
        "course": course,
        "chapter_id": chapter.chapter_id,
        "embed": embed,
        "supported": embed is not None,
        "is_completed": video_id in completed,
        "course_progress": percentage(
            sum(1 for v in playlist if v.video_id in completed), len(playlist),
        ),
        "previous_video_id": playlist[position - 1].video_id if position > 0 else None,
        "next_video_id": playlist[position + 1].video_id if position + 1 < len(playlist) else None,
        "chapters": [
            {
                "chapter": ch,
                "videos": [(v, v.video_id in completed) for v in ordered_videos(ch)],
            }
            for ch in chapters
        ],
    }
