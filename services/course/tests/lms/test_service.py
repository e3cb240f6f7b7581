import uuid

import pytest
from sqlalchemy import func, select

from app.exceptions import AlreadyEnrolledError, ChapterNotFoundError, CourseNotFoundError
from app.lms import service
from app.models import Chapter, Course, Enrollment, Video, VideoProgress
from app.progress.service import set_completion


@pytest.mark.asyncio
async def test_chapters_get_insertion_order(db_session) -> None:
    course = await service.create_course(db_session, title="Algorithms")
    titles = ["Intro", "Sorting", "Graphs"]
    for title in titles:
        await service.create_chapter(db_session, course.course_id, title=title)
    await db_session.commit()

    loaded = await service.get_course_with_content(db_session, course.course_id)
    chapters = service.ordered_chapters(loaded)
    assert [c.title for c in chapters] == titles
    assert [c.sort_order for c in chapters] == [0, 1, 2]


@pytest.mark.asyncio
async def test_new_chapter_goes_last_after_deletes(db_session) -> None:
    course = await service.create_course(db_session, title="Compilers")
    created = [
        await service.create_chapter(db_session, course.course_id, title=f"c{i}") for i in range(4)
    ]
    await service.delete_chapter(db_session, created[0].chapter_id)
    await service.delete_chapter(db_session, created[1].chapter_id)
    await service.create_chapter(db_session, course.course_id, title="newest")
    await db_session.commit()

    loaded = await service.get_course_with_content(db_session, course.course_id)
    chapters = service.ordered_chapters(loaded)
    assert [c.title for c in chapters] == ["c2", "c3", "newest"]
    assert [c.sort_order for c in chapters] == [2, 3, 4]


@pytest.mark.asyncio
async def test_videos_follow_sort_order(db_session) -> None:
    course = await service.create_course(db_session, title="Networks")
    chapter = await service.create_chapter(db_session, course.course_id, title="Basics")
    await service.create_video(db_session, chapter.chapter_id, title="second", video_url="https://vimeo.com/2", sort_order=2)
    await service.create_video(db_session, chapter.chapter_id, title="first", video_url="https://vimeo.com/1", sort_order=1)
    await db_session.commit()

    loaded = await service.get_course_with_content(db_session, course.course_id)
    (chapter,) = service.ordered_chapters(loaded)
    assert [v.title for v in service.ordered_videos(chapter)] == ["first", "second"]


@pytest.mark.asyncio
async def test_create_chapter_for_missing_course(db_session) -> None:
    with pytest.raises(CourseNotFoundError):
        await service.create_chapter(db_session, uuid.uuid4(), title="Orphan")


@pytest.mark.asyncio
async def test_create_video_for_missing_chapter(db_session) -> None:
    with pytest.raises(ChapterNotFoundError):
        await service.create_video(db_session, uuid.uuid4(), title="x", video_url="https://vimeo.com/1")


@pytest.mark.asyncio
async def test_update_course_ignores_null_fields(db_session) -> None:
    course = await service.create_course(db_session, title="Old", description="Keep me")
    updated = await service.update_course(db_session, course.course_id, title="New", description=None)
    assert updated.title == "New"
    assert updated.description == "Keep me"


@pytest.mark.asyncio
async def test_enroll_twice_conflicts(db_session, make_user, make_course) -> None:
    user = await make_user("twice@example.com")
    user_id = user.id
    course = await make_course("Once", [])
    await service.enroll(db_session, course.course_id, user_id)
    await db_session.commit()

    with pytest.raises(AlreadyEnrolledError):
        await service.enroll(db_session, course.course_id, user_id)


@pytest.mark.asyncio
async def test_enroll_missing_course(db_session, make_user) -> None:
    user = await make_user("lost@example.com")
    with pytest.raises(CourseNotFoundError):
        await service.enroll(db_session, uuid.uuid4(), user.id)


@pytest.mark.asyncio
async def test_delete_course_cascades(db_session, make_user, make_course) -> None:
    user = await make_user("cascade@example.com")
    user_id = user.id
    course = await make_course("Doomed", [["https://youtu.be/eeeeeeeeeee", "https://vimeo.com/3"]])
    course_id = course.course_id
    await service.enroll(db_session, course_id, user_id)
    video_ids = (await db_session.execute(select(Video.video_id))).scalars().all()
    for video_id in video_ids:
        await set_completion(db_session, user_id, video_id, True)
    await db_session.commit()

    await service.delete_course(db_session, course_id)
    await db_session.commit()

    for model in (Chapter, Video, Enrollment, VideoProgress):
        count = (await db_session.execute(select(func.count()).select_from(model))).scalar_one()
        assert count == 0, model.__tablename__


@pytest.mark.asyncio
async def test_enroll_conflict_keeps_pending_work(db_session, make_user, make_course, monkeypatch) -> None:
    user = await make_user("racer@example.com")
    user_id = user.id
    course = await make_course("Contested", [])
    course_id = course.course_id
    await service.enroll(db_session, course_id, user_id)
    await db_session.commit()

    pending = await service.create_course(db_session, title="Pending")
    pending_id = pending.course_id

    async def _not_enrolled_yet(db, user_id, course_id):
        return None

    # The pre-check misses, so the unique constraint is what rejects the insert
    monkeypatch.setattr(service, "get_enrollment", _not_enrolled_yet)
    with pytest.raises(AlreadyEnrolledError):
        await service.enroll(db_session, course_id, user_id)
    await db_session.commit()

    titles = (await db_session.execute(select(Course.title).where(Course.course_id == pending_id))).scalars().all()
    assert titles == ["Pending"]
    enrolled = (await db_session.execute(select(func.count()).select_from(Enrollment))).scalar_one()
    assert enrolled == 1
