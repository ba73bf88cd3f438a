"""HTTP + DB integration tests for enrollment capacity and lifecycle rules."""

from __future__ import annotations

import asyncio
import os
from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import httpx
import pytest
import pytest_asyncio

API_BASE_URL = os.getenv("INTEGRATION_BASE_URL", "http://localhost:8000/api").rstrip("/")
HEALTHCHECK_URL = os.getenv("INTEGRATION_HEALTH_URL", "http://localhost:8000/health")
REQUEST_TIMEOUT_SECONDS = float(os.getenv("INTEGRATION_TIMEOUT_SECONDS", "15"))


def _assert_status(response: httpx.Response, expected_status: int) -> None:
    assert response.status_code == expected_status, (
        f"{response.request.method} {response.request.url} -> "
        f"{response.status_code}, body={response.text}"
    )


async def _create_course(client: httpx.AsyncClient, capacity: int) -> dict:
    response = await client.post(
        "/courses",
        json={
            "title": f"Integration {uuid4().hex[:8]}",
            "level": "Beginner",
            "capacity": capacity,
        },
    )
    _assert_status(response, 201)
    return response.json()


async def _create_schedule(client: httpx.AsyncClient, course_id: int, capacity: int | None) -> dict:
    start_time = datetime.now(UTC) + timedelta(days=7)
    response = await client.post(
        f"/courses/{course_id}/schedules",
        json={
            "startTime": start_time.isoformat(),
            "endTime": (start_time + timedelta(hours=2)).isoformat(),
            "capacity": capacity,
        },
    )
    _assert_status(response, 201)
    return response.json()


async def _enroll(client: httpx.AsyncClient, course_id: int, schedule_id: int) -> httpx.Response:
    return await client.post(
        "/enrollments",
        json={
            "userEmail": f"student-{uuid4().hex}@langschool.dev",
            "courseId": course_id,
            "scheduleId": schedule_id,
        },
    )


@pytest_asyncio.fixture()
async def api_client() -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT_SECONDS) as health_client:
        try:
            health_response = await health_client.get(HEALTHCHECK_URL)
        except httpx.HTTPError as exc:
            pytest.skip(f"Integration stack unavailable at {HEALTHCHECK_URL}: {exc}")
            return
        if health_response.status_code != 200:
            pytest.skip(
                f"Integration stack returned {health_response.status_code} "
                f"for {HEALTHCHECK_URL}",
            )
            return

    async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=REQUEST_TIMEOUT_SECONDS) as client:
        yield client


@pytest.mark.asyncio
async def test_concurrent_enrollments_never_exceed_schedule_capacity(
    api_client: httpx.AsyncClient,
) -> None:
    course = await _create_course(api_client, capacity=20)
    schedule = await _create_schedule(api_client, course["id"], capacity=2)

    responses = await asyncio.gather(
        *(_enroll(api_client, course["id"], schedule["id"]) for _ in range(3)),
    )

    statuses = sorted(response.status_code for response in responses)
    assert statuses == [201, 201, 409]
    rejected = next(response for response in responses if response.status_code == 409)
    assert rejected.json()["error"]["code"] == "capacity_exceeded"

    schedule_response = await api_client.get(f"/schedules/{schedule['id']}")
    _assert_status(schedule_response, 200)
    assert schedule_response.json()["enrolled_count"] == 2


@pytest.mark.asyncio
async def test_cancelled_enrollment_frees_seat_and_approve_is_single_shot(
    api_client: httpx.AsyncClient,
) -> None:
    course = await _create_course(api_client, capacity=1)
    schedule = await _create_schedule(api_client, course["id"], capacity=None)

    first = await _enroll(api_client, course["id"], schedule["id"])
    _assert_status(first, 201)
    enrollment_id = first.json()["id"]

    approve_response = await api_client.post(f"/enrollments/{enrollment_id}/approve")
    _assert_status(approve_response, 200)
    assert approve_response.json()["status"] == "approved"
    assert approve_response.json()["approved_at"] is not None

    second_approve = await api_client.post(f"/enrollments/{enrollment_id}/approve")
    _assert_status(second_approve, 409)

    full = await _enroll(api_client, course["id"], schedule["id"])
    _assert_status(full, 409)

    cancel_response = await api_client.put(
        f"/enrollments/{enrollment_id}",
        json={"status": "cancelled"},
    )
    _assert_status(cancel_response, 200)
    assert cancel_response.json()["cancelled_at"] is not None

    freed = await _enroll(api_client, course["id"], schedule["id"])
    _assert_status(freed, 201)
