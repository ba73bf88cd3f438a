"""Timetable repository layer."""

from __future__ import annotations

from datetime import time

from sqlalchemy import Select, case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from langschool.core.enums import CourseLevelEnum, DayOfWeekEnum, TimetableStatusEnum
from langschool.modules.timetable.models import TimetableEntry

# Stored as names; the week is ordered Monday first.
_WEEKDAY_ORDER = case(
    {day: position for position, day in enumerate(DayOfWeekEnum)},
    value=TimetableEntry.day_of_week,
)


class TimetableRepository:
    """DB operations for weekly timetable entries."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_entry(
        self,
        course_name: str,
        level: CourseLevelEnum,
        day_of_week: DayOfWeekEnum,
        start_time: time,
        end_time: time,
        teacher_name: str,
        status: TimetableStatusEnum,
    ) -> TimetableEntry:
        entry = TimetableEntry(
            course_name=course_name,
            level=level,
            day_of_week=day_of_week,
            start_time=start_time,
            end_time=end_time,
            teacher_name=teacher_name,
            status=status,
        )
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def get_entry_by_id(self, entry_id: int) -> TimetableEntry | None:
        stmt = select(TimetableEntry).where(TimetableEntry.id == entry_id)
        return await self.session.scalar(stmt)

    async def list_entries(
        self,
        status: TimetableStatusEnum | None,
        day_of_week: DayOfWeekEnum | None,
        limit: int,
        offset: int,
    ) -> tuple[list[TimetableEntry], int]:
        base_stmt: Select[tuple[TimetableEntry]] = select(TimetableEntry)
        if status is not None:
            base_stmt = base_stmt.where(TimetableEntry.status == status)
        if day_of_week is not None:
            base_stmt = base_stmt.where(TimetableEntry.day_of_week == day_of_week)

        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = int((await self.session.scalar(count_stmt)) or 0)

        stmt = (
            base_stmt.order_by(_WEEKDAY_ORDER, TimetableEntry.start_time.asc(), TimetableEntry.id.asc())
            .limit(limit)
            .offset(offset)
        )
        items = (await self.session.scalars(stmt)).all()
        return items, total

    async def update_entry(self, entry: TimetableEntry, **changes) -> TimetableEntry:
        for key, value in changes.items():
            setattr(entry, key, value)
        await self.session.flush()
        return entry

    async def delete_entry(self, entry: TimetableEntry) -> None:
        await self.session.delete(entry)
        await self.session.flush()
