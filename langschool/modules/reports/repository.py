"""Reports repository layer."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from langschool.core.enums import (
    EnrollmentStatusEnum,
    PaymentStatusEnum,
    RoleEnum,
    ScheduleStatusEnum,
)
from langschool.modules.courses.models import Course
from langschool.modules.enrollments.models import Enrollment
from langschool.modules.scheduling.models import Schedule
from langschool.modules.users.models import User
from langschool.shared.utils import utc_now


class ReportsRepository:
    """Aggregate queries over school data."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_overview(self) -> dict[str, datetime | int | dict[str, int]]:
        users_by_role = await self._count_users_by_role()
        schedules_by_status = await self._count_schedules_by_status()
        enrollments_by_status = await self._count_enrollments_by_status()
        enrollments_by_payment = await self._count_enrollments_by_payment_status()
        courses_total, courses_active = await self._count_courses()

        return {
            "generated_at": utc_now(),
            "users_total": sum(users_by_role.values()),
            "users_by_role": {str(role): users_by_role.get(role, 0) for role in RoleEnum},
            "courses_total": courses_total,
            "courses_active": courses_active,
            "schedules_by_status": {
                str(status): schedules_by_status.get(status, 0) for status in ScheduleStatusEnum
            },
            "enrollments_total": sum(enrollments_by_status.values()),
            "enrollments_by_status": {
                str(status): enrollments_by_status.get(status, 0) for status in EnrollmentStatusEnum
            },
            "enrollments_by_payment_status": {
                str(status): enrollments_by_payment.get(status, 0) for status in PaymentStatusEnum
            },
        }

    async def _count_users_by_role(self) -> dict[RoleEnum, int]:
        stmt = select(User.role, func.count(User.id)).group_by(User.role)
        rows = (await self.session.execute(stmt)).all()
        return {role: int(count) for role, count in rows}

    async def _count_courses(self) -> tuple[int, int]:
        stmt = select(
            func.count(Course.id),
            func.count(Course.id).filter(Course.is_active.is_(True)),
        )
        total, active = (await self.session.execute(stmt)).one()
        return int(total or 0), int(active or 0)

    async def _count_schedules_by_status(self) -> dict[ScheduleStatusEnum, int]:
        stmt = select(Schedule.status, func.count(Schedule.id)).group_by(Schedule.status)
        rows = (await self.session.execute(stmt)).all()
        return {status: int(count) for status, count in rows}

    async def _count_enrollments_by_status(self) -> dict[EnrollmentStatusEnum, int]:
        stmt = select(Enrollment.status, func.count(Enrollment.id)).group_by(Enrollment.status)
        rows = (await self.session.execute(stmt)).all()
        return {status: int(count) for status, count in rows}

    async def _count_enrollments_by_payment_status(self) -> dict[PaymentStatusEnum, int]:
        stmt = select(Enrollment.payment_status, func.count(Enrollment.id)).group_by(
            Enrollment.payment_status,
        )
        rows = (await self.session.execute(stmt)).all()
        return {status: int(count) for status, count in rows}
