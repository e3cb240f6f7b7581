import uuid

import pytest
from httpx import AsyncClient

from tests.conftest import auth_headers


@pytest.mark.asyncio
async def test_mark_unknown_video(async_client: AsyncClient, make_user) -> None:
    headers = auth_headers(await make_user("ghost@example.com"))
    response = await async_client.put(
        f"/api/v1/progress/videos/{uuid.uuid4()}", json={"completed": True}, headers=headers,
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_mark_requires_login(async_client: AsyncClient) -> None:
    response = await async_client.put(
        f"/api/v1/progress/videos/{uuid.uuid4()}", json={"completed": True},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_dashboard(async_client: AsyncClient, make_user, make_course) -> None:
    user = await make_user("board@example.com")
    headers = auth_headers(user)
    a = await make_course("A", [["https://youtu.be/aaaaaaaaaa1", "https://youtu.be/aaaaaaaaaa2"], ["https://youtu.be/aaaaaaaaaa3", "https://youtu.be/aaaaaaaaaa4"]])
    b = await make_course("B", [["https://vimeo.com/7"]])
    for course in (a, b):
        enrolled = await async_client.post(f"/api/v1/lms/courses/{course.course_id}/enroll", headers=headers)
        assert enrolled.status_code == 201

    page_a = (await async_client.get(f"/api/v1/lms/courses/{a.course_id}", headers=headers)).json()
    page_b = (await async_client.get(f"/api/v1/lms/courses/{b.course_id}", headers=headers)).json()
    to_complete = [v["video_id"] for v in page_a["chapters"][0]["videos"]]
    to_complete += [page_b["chapters"][0]["videos"][0]["video_id"]]
    for video_id in to_complete:
        for _ in range(2):
            response = await async_client.put(
                f"/api/v1/progress/videos/{video_id}", json={"completed": True}, headers=headers,
            )
            assert response.status_code == 200

    dashboard = await async_client.get("/api/v1/progress/dashboard", headers=headers)
    assert dashboard.status_code == 200
    data = dashboard.json()
    assert data["user"]["email"] == "board@example.com"
    assert data["overall_progress"] == pytest.approx(60.0)
    assert (data["completed_videos"], data["total_videos"]) == (3, 5)
    progress = {c["title"]: c["progress"] for c in data["courses"]}
    assert progress == {"A": 50.0, "B": 100.0}
