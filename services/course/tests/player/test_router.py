import uuid

import pytest
from httpx import AsyncClient

from tests.conftest import auth_headers


async def _page(client: AsyncClient, headers: dict, course_id, video_id):
    return await client.get(f"/api/v1/player/courses/{course_id}/videos/{video_id}", headers=headers)


async def _video_ids(client: AsyncClient, headers: dict, course_id) -> list[str]:
    page = (await client.get(f"/api/v1/lms/courses/{course_id}", headers=headers)).json()
    return [v["video_id"] for ch in page["chapters"] for v in ch["videos"]]


@pytest.mark.asyncio
async def test_video_page(async_client: AsyncClient, make_user, make_course) -> None:
    headers = auth_headers(await make_user("watch@example.com"))
    course = await make_course(
        "Player",
        [["https://www.youtube.com/watch?v=dQw4w9WgXcQ", "https://vimeo.com/76979871"], ["https://example.com/clip.mp4"]],
    )
    first, second, third = await _video_ids(async_client, headers, course.course_id)

    await async_client.put(f"/api/v1/progress/videos/{second}", json={"completed": True}, headers=headers)

    response = await _page(async_client, headers, course.course_id, first)
    assert response.status_code == 200
    data = response.json()
    assert data["supported"] is True
    assert data["embed"] == {
        "provider": "youtube",
        "video_id": "dQw4w9WgXcQ",
        "embed_url": "https://www.youtube.com/embed/dQw4w9WgXcQ",
    }
    assert data["is_completed"] is False
    assert data["previous_video_id"] is None
    assert data["next_video_id"] == second
    assert data["course"]["title"] == "Player"
    assert data["course_progress"] == pytest.approx(100 / 3)
    sidebar = [[v["completed"] for v in ch["videos"]] for ch in data["chapters"]]
    assert sidebar == [[False, True], [False]]

    vimeo = (await _page(async_client, headers, course.course_id, second)).json()
    assert vimeo["embed"]["provider"] == "vimeo"
    assert vimeo["is_completed"] is True


@pytest.mark.asyncio
async def test_unsupported_url_still_renders(async_client: AsyncClient, make_user, make_course) -> None:
    headers = auth_headers(await make_user("mp4@example.com"))
    course = await make_course("Raw", [["https://example.com/clip.mp4"]])
    (video_id,) = await _video_ids(async_client, headers, course.course_id)

    response = await _page(async_client, headers, course.course_id, video_id)
    assert response.status_code == 200
    assert response.json()["embed"] is None
    assert response.json()["supported"] is False


@pytest.mark.asyncio
async def test_video_from_other_course(async_client: AsyncClient, make_user, make_course) -> None:
    headers = auth_headers(await make_user("mixed@example.com"))
    one = await make_course("One", [["https://youtu.be/aaaaaaaaaaa"]])
    two = await make_course("Two", [["https://youtu.be/bbbbbbbbbbb"]])
    (video_in_two,) = await _video_ids(async_client, headers, two.course_id)

    response = await _page(async_client, headers, one.course_id, video_in_two)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_missing_video(async_client: AsyncClient, make_user, make_course) -> None:
    headers = auth_headers(await make_user("missing@example.com"))
    course = await make_course("Empty", [])
    response = await _page(async_client, headers, course.course_id, uuid.uuid4())
    assert response.status_code == 404
