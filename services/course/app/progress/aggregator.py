"""Completion percentages derived from progress records.

Pure functions: callers load the enrolled courses (with chapters and videos)
and the user's progress records, this module only counts. No I/O, no
mutation, no clock.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID


@dataclass(frozen=True, slots=True)
class CourseProgress:
    course_id: UUID
    completed: int
    total: int
    percentage: float


@dataclass(frozen=True, slots=True)
class ProgressSummary:
    overall: float
    completed: int
    total: int
    courses: list[CourseProgress] = field(default_factory=list)

    @property
    def per_course(self) -> dict[UUID, float]:
        return {c.course_id: c.percentage for c in self.courses}


def percentage(completed: int, total: int) -> float:
    """``completed / total * 100``; a course with no videos counts as 0%."""
    if total <= 0:
        return 0.0
    return completed * 100 / total


def completed_video_ids(progress_records: Iterable[Any]) -> set[UUID]:
    return {record.video_id for record in progress_records if record.completed}


def compute_progress(
    enrolled_courses: Iterable[Any],
    progress_records: Iterable[Any],
) -> ProgressSummary:
    """Per-course and overall completion for one user.

    ``enrolled_courses`` items expose ``course_id`` and ``chapters``, each chapter
    exposing ``videos`` with a ``video_id``. ``progress_records`` items expose
    ``video_id`` and ``completed``.

    The overall figure pools video counts across all courses; it is *not* the
    mean of the per-course percentages.
    """
    done = completed_video_ids(progress_records)

    courses: list[CourseProgress] = []
    total_videos = 0
    total_completed = 0
    for course in enrolled_courses:
        video_ids = [video.video_id for chapter in course.chapters for video in chapter.videos]
        completed = sum(1 for video_id in video_ids if video_id in done)
        courses.append(
            CourseProgress(
                course_id=course.course_id,
                completed=completed,
                total=len(video_ids),
                percentage=percentage(completed, len(video_ids)),
            )
        )
        total_videos += len(video_ids)
        total_completed += completed

    return ProgressSummary(
        overall=percentage(total_completed, total_videos),
        completed=total_completed,
        total=total_videos,
        courses=courses,
    )
