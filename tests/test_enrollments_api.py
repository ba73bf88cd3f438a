"""HTTP-level checks of the enrollments router over an in-process ASGI transport."""

from __future__ import annotations

from collections.abc import AsyncIterator
from types import SimpleNamespace

import httpx
import pytest
import pytest_asyncio

from langschool.core.enums import EnrollmentSourceEnum, EnrollmentStatusEnum, PaymentStatusEnum
from langschool.core.rate_limit import InMemorySlidingWindowRateLimiter
from langschool.main import app
from langschool.modules.enrollments import rate_limit as intake_rate_limit
from langschool.modules.enrollments.schemas import EnrollmentCreate, EnrollmentUpdate
from langschool.modules.enrollments.service import get_enrollment_service
from langschool.shared.exceptions import CapacityExceededException, InvalidStateException
from langschool.shared.utils import utc_now

FULL_SCHEDULE_ID = 99


def _enrollment(payload: EnrollmentCreate, enrollment_id: int) -> SimpleNamespace:
    now = utc_now()
    return SimpleNamespace(
        id=enrollment_id,
        user_id=1,
        course_id=payload.course_id,
        schedule_id=payload.schedule_id,
        status=EnrollmentStatusEnum.PENDING,
        payment_status=PaymentStatusEnum.UNPAID,
        source=payload.source,
        notes=payload.notes,
        enrolled_at=now,
        approved_at=None,
        cancelled_at=None,
        created_at=now,
        updated_at=now,
    )


class FakeEnrollmentService:
    def __init__(self) -> None:
        self.received: list[EnrollmentCreate | EnrollmentUpdate] = []

    async def create_enrollment(self, payload: EnrollmentCreate) -> SimpleNamespace:
        self.received.append(payload)
        if payload.schedule_id == FULL_SCHEDULE_ID:
            raise CapacityExceededException(f"Schedule {FULL_SCHEDULE_ID} is full (2/2 seats taken)")
        return _enrollment(payload, len(self.received))

    async def create_intake_enrollment(self, payload: EnrollmentCreate) -> SimpleNamespace:
        return await self.create_enrollment(payload)

    async def approve_enrollment(self, enrollment_id: int) -> SimpleNamespace:
        raise InvalidStateException("Only pending enrollments can be approved (current status: approved)")

    async def update_enrollment(self, enrollment_id: int, payload: EnrollmentUpdate) -> SimpleNamespace:
        self.received.append(payload)
        enrollment = _enrollment(EnrollmentCreate(userEmail="x@langschool.dev", courseId=1), enrollment_id)
        enrollment.status = EnrollmentStatusEnum.APPROVED
        enrollment.payment_status = payload.payment_status or enrollment.payment_status
        return enrollment


@pytest.fixture()
def fake_service() -> FakeEnrollmentService:
    return FakeEnrollmentService()


@pytest_asyncio.fixture()
async def client(fake_service: FakeEnrollmentService) -> AsyncIterator[httpx.AsyncClient]:
    app.dependency_overrides[get_enrollment_service] = lambda: fake_service
    transport = httpx.ASGITransport(app=app)
    try:
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as api_client:
            yield api_client
    finally:
        app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_create_enrollment_accepts_camel_case_body(
    client: httpx.AsyncClient,
    fake_service: FakeEnrollmentService,
) -> None:
    response = await client.post(
        "/api/enrollments",
        json={"userEmail": "new@langschool.dev", "courseId": 3, "scheduleId": 7, "notes": "evening"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert body["payment_status"] == "unpaid"
    assert body["schedule_id"] == 7
    assert fake_service.received[0].user_email == "new@langschool.dev"


@pytest.mark.asyncio
async def test_full_schedule_is_reported_as_capacity_conflict(client: httpx.AsyncClient) -> None:
    response = await client.post(
        "/api/enrollments",
        json={"userEmail": "late@langschool.dev", "courseId": 3, "scheduleId": FULL_SCHEDULE_ID},
    )

    assert response.status_code == 409
    assert response.json() == {
        "error": {
            "code": "capacity_exceeded",
            "message": f"Schedule {FULL_SCHEDULE_ID} is full (2/2 seats taken)",
        },
    }


@pytest.mark.asyncio
async def test_schema_errors_are_reported_as_400(client: httpx.AsyncClient) -> None:
    response = await client.post("/api/enrollments", json={"userEmail": "a@langschool.dev"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "validation_error"
    assert "courseId" in response.json()["error"]["message"]


@pytest.mark.asyncio
async def test_second_approve_is_reported_as_invalid_state(client: httpx.AsyncClient) -> None:
    response = await client.post("/api/enrollments/5/approve")

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "invalid_state"


@pytest.mark.asyncio
async def test_update_accepts_payment_status_alias(
    client: httpx.AsyncClient,
    fake_service: FakeEnrollmentService,
) -> None:
    response = await client.put("/api/enrollments/5", json={"paymentStatus": "paid"})

    assert response.status_code == 200
    assert response.json()["status"] == "approved"
    assert response.json()["payment_status"] == "paid"
    assert fake_service.received[-1].payment_status == PaymentStatusEnum.PAID


def _limit_intake(monkeypatch: pytest.MonkeyPatch, limit: int) -> None:
    limiter = InMemorySlidingWindowRateLimiter(clock=lambda: 500.0)
    monkeypatch.setattr(intake_rate_limit, "get_rate_limiter", lambda: limiter)
    monkeypatch.setattr(
        intake_rate_limit,
        "get_settings",
        lambda: SimpleNamespace(
            intake_rate_limit_window_seconds=60,
            intake_rate_limit_requests=limit,
            intake_rate_limit_trusted_proxy_ips=(),
        ),
    )


@pytest.mark.asyncio
async def test_intake_rejects_admin_source(
    client: httpx.AsyncClient,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _limit_intake(monkeypatch, limit=10)

    response = await client.post(
        "/api/enrollments/intake",
        json={"userEmail": "web@langschool.dev", "courseId": 1, "source": "admin"},
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "validation_error"


@pytest.mark.asyncio
async def test_intake_applies_rate_limit(
    client: httpx.AsyncClient,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _limit_intake(monkeypatch, limit=1)

    accepted = await client.post(
        "/api/enrollments/intake",
        json={"userEmail": "web@langschool.dev", "courseId": 1, "source": "form"},
    )
    assert accepted.status_code == 201
    assert accepted.json()["source"] == EnrollmentSourceEnum.FORM
    assert accepted.headers["x-ratelimit-limit"] == "1"
    assert accepted.headers["x-ratelimit-remaining"] == "0"

    limited = await client.post(
        "/api/enrollments/intake",
        json={"userEmail": "web@langschool.dev", "courseId": 1},
    )
    assert limited.status_code == 429
    assert limited.json()["error"]["code"] == "rate_limited"
    assert limited.headers["retry-after"] == "60"
