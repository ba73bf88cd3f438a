"""Reports schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class OverviewRead(BaseModel):
    """Dashboard snapshot of users, courses, schedules and enrollments."""

    generated_at: datetime
    users_total: int
    users_by_role: dict[str, int]
    courses_total: int
    courses_active: int
    schedules_by_status: dict[str, int]
    enrollments_total: int
    enrollments_by_status: dict[str, int]
    enrollments_by_payment_status: dict[str, int]
