"""Enrollment repository layer."""

from __future__ import annotations

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from langschool.core.enums import EnrollmentSourceEnum, EnrollmentStatusEnum, PaymentStatusEnum
from langschool.modules.enrollments.models import Enrollment


class EnrollmentRepository:
    """DB operations for enrollments."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_enrollment(
        self,
        user_id: int,
        course_id: int,
        schedule_id: int | None,
        source: EnrollmentSourceEnum,
        notes: str | None,
    ) -> Enrollment:
        enrollment = Enrollment(
            user_id=user_id,
            course_id=course_id,
            schedule_id=schedule_id,
            source=source,
            notes=notes,
            status=EnrollmentStatusEnum.PENDING,
            payment_status=PaymentStatusEnum.UNPAID,
        )
        self.session.add(enrollment)
        await self.session.flush()
        return enrollment

    async def get_enrollment_by_id(self, enrollment_id: int) -> Enrollment | None:
        stmt = select(Enrollment).where(Enrollment.id == enrollment_id)
        return await self.session.scalar(stmt)

    async def lock_enrollment(self, enrollment_id: int) -> Enrollment | None:
        stmt = select(Enrollment).where(Enrollment.id == enrollment_id).with_for_update()
        return await self.session.scalar(stmt)

    async def count_seats_taken(self, schedule_id: int) -> int:
        """Count non-cancelled enrollments holding a seat on the schedule."""
        stmt = select(func.count(Enrollment.id)).where(
            Enrollment.schedule_id == schedule_id,
            Enrollment.status != EnrollmentStatusEnum.CANCELLED,
        )
        return int((await self.session.scalar(stmt)) or 0)

    async def list_enrollments(
        self,
        status: EnrollmentStatusEnum | None,
        payment_status: PaymentStatusEnum | None,
        schedule_id: int | None,
        course_id: int | None,
        user_id: int | None,
        limit: int,
        offset: int,
    ) -> tuple[list[Enrollment], int]:
        base_stmt: Select[tuple[Enrollment]] = select(Enrollment)
        if status is not None:
            base_stmt = base_stmt.where(Enrollment.status == status)
        if payment_status is not None:
            base_stmt = base_stmt.where(Enrollment.payment_status == payment_status)
        if schedule_id is not None:
            base_stmt = base_stmt.where(Enrollment.schedule_id == schedule_id)
        if course_id is not None:
            base_stmt = base_stmt.where(Enrollment.course_id == course_id)
        if user_id is not None:
            base_stmt = base_stmt.where(Enrollment.user_id == user_id)

        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = int((await self.session.scalar(count_stmt)) or 0)

        # id breaks enrolled_at ties so pages never overlap
        stmt = (
            base_stmt.order_by(Enrollment.enrolled_at.desc(), Enrollment.id.desc())
            .limit(limit)
            .offset(offset)
        )
        items = (await self.session.scalars(stmt)).all()
        return items, total

    async def save(self, enrollment: Enrollment) -> Enrollment:
        await self.session.flush()
        return enrollment
