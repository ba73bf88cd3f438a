"""Scheduling repository layer."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from langschool.core.enums import EnrollmentStatusEnum, ScheduleStatusEnum
from langschool.modules.enrollments.models import Enrollment
from langschool.modules.scheduling.models import Schedule


class SchedulingRepository:
    """DB access for schedules."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_schedule(
        self,
        course_id: int,
        teacher_id: int | None,
        start_time: datetime,
        end_time: datetime,
        timezone: str,
        location: str | None,
        capacity: int | None,
        status: ScheduleStatusEnum,
    ) -> Schedule:
        schedule = Schedule(
            course_id=course_id,
            teacher_id=teacher_id,
            start_time=start_time,
            end_time=end_time,
            timezone=timezone,
            location=location,
            capacity=capacity,
            status=status,
        )
        self.session.add(schedule)
        await self.session.flush()
        return schedule

    async def get_schedule_by_id(self, schedule_id: int) -> Schedule | None:
        stmt = select(Schedule).where(Schedule.id == schedule_id)
        return await self.session.scalar(stmt)

    async def lock_schedule(self, schedule_id: int) -> Schedule | None:
        """Load schedule with a row lock held until the transaction ends."""
        stmt = (
            select(Schedule)
            .where(Schedule.id == schedule_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return await self.session.scalar(stmt)

    async def list_course_schedules(self, course_id: int) -> list[Schedule]:
        stmt = (
            select(Schedule)
            .where(Schedule.course_id == course_id)
            .order_by(Schedule.start_time.asc(), Schedule.id.asc())
        )
        return (await self.session.scalars(stmt)).all()

    async def count_occupied_seats(self, schedule_ids: list[int]) -> dict[int, int]:
        """Count non-cancelled enrollments per schedule."""
        if not schedule_ids:
            return {}
        stmt = (
            select(Enrollment.schedule_id, func.count(Enrollment.id))
            .where(
                Enrollment.schedule_id.in_(schedule_ids),
                Enrollment.status != EnrollmentStatusEnum.CANCELLED,
            )
            .group_by(Enrollment.schedule_id)
        )
        rows = (await self.session.execute(stmt)).all()
        return {schedule_id: int(count) for schedule_id, count in rows}

    async def update_schedule(self, schedule: Schedule, **changes) -> Schedule:
        for key, value in changes.items():
            setattr(schedule, key, value)
        await self.session.flush()
        return schedule
