from __future__ import annotations

from datetime import UTC, datetime

import pytest

from langschool.core.enums import (
    EnrollmentStatusEnum,
    PaymentStatusEnum,
    RoleEnum,
    ScheduleStatusEnum,
)
from langschool.modules.reports.repository import ReportsRepository
from langschool.modules.reports.service import ReportsService


@pytest.mark.asyncio
async def test_overview_fills_missing_buckets_with_zero(monkeypatch: pytest.MonkeyPatch) -> None:
    repository = ReportsRepository(session=None)  # type: ignore[arg-type]

    async def _users_by_role() -> dict[RoleEnum, int]:
        return {RoleEnum.STUDENT: 7, RoleEnum.TEACHER: 2}

    async def _courses() -> tuple[int, int]:
        return 4, 3

    async def _schedules_by_status() -> dict[ScheduleStatusEnum, int]:
        return {ScheduleStatusEnum.SCHEDULED: 5}

    async def _enrollments_by_status() -> dict[EnrollmentStatusEnum, int]:
        return {EnrollmentStatusEnum.PENDING: 3, EnrollmentStatusEnum.APPROVED: 2}

    async def _enrollments_by_payment() -> dict[PaymentStatusEnum, int]:
        return {PaymentStatusEnum.UNPAID: 4, PaymentStatusEnum.PAID: 1}

    monkeypatch.setattr(repository, "_count_users_by_role", _users_by_role)
    monkeypatch.setattr(repository, "_count_courses", _courses)
    monkeypatch.setattr(repository, "_count_schedules_by_status", _schedules_by_status)
    monkeypatch.setattr(repository, "_count_enrollments_by_status", _enrollments_by_status)
    monkeypatch.setattr(repository, "_count_enrollments_by_payment_status", _enrollments_by_payment)

    overview = await ReportsService(repository).get_overview()

    assert overview.users_total == 9
    assert overview.users_by_role["student"] == 7
    assert overview.users_by_role["admin"] == 0
    assert overview.courses_total == 4
    assert overview.courses_active == 3
    assert overview.schedules_by_status == {"scheduled": 5, "cancelled": 0, "completed": 0}
    assert overview.enrollments_total == 5
    assert overview.enrollments_by_status == {
        "pending": 3,
        "approved": 2,
        "active": 0,
        "completed": 0,
        "cancelled": 0,
    }
    assert overview.enrollments_by_payment_status == {"unpaid": 4, "paid": 1, "refunded": 0}
    assert overview.generated_at <= datetime.now(UTC)
