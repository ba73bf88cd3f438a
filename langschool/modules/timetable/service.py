"""Timetable business logic layer."""

from __future__ import annotations

import logging
from datetime import time

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from langschool.core.database import get_db_session
from langschool.core.enums import DayOfWeekEnum, TimetableStatusEnum
from langschool.modules.audit.repository import AuditRepository
from langschool.modules.timetable.models import TimetableEntry
from langschool.modules.timetable.repository import TimetableRepository
from langschool.modules.timetable.schemas import TimetableEntryCreate, TimetableEntryUpdate
from langschool.shared.exceptions import NotFoundException, ValidationException

logger = logging.getLogger(__name__)


def _validate_time_window(start_time: time, end_time: time) -> None:
    if end_time <= start_time:
        raise ValidationException("Timetable end_time must be after start_time")


def _clean_name(value: str, field: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise ValidationException(f"Timetable {field} must not be blank")
    return cleaned


class TimetableService:
    """Weekly timetable published to students."""

    def __init__(self, repository: TimetableRepository, audit_repository: AuditRepository) -> None:
        self.repository = repository
        self.audit_repository = audit_repository

    async def create_entry(self, payload: TimetableEntryCreate) -> TimetableEntry:
        _validate_time_window(payload.start_time, payload.end_time)
        entry = await self.repository.create_entry(
            course_name=_clean_name(payload.course_name, "course_name"),
            level=payload.level,
            day_of_week=payload.day_of_week,
            start_time=payload.start_time,
            end_time=payload.end_time,
            teacher_name=_clean_name(payload.teacher_name, "teacher_name"),
            status=payload.status,
        )
        await self.audit_repository.create_audit_log(
            action="timetable.created",
            entity_type="timetable_entry",
            entity_id=str(entry.id),
            payload={
                "course_name": entry.course_name,
                "day_of_week": str(entry.day_of_week),
                "start_time": entry.start_time.isoformat(),
            },
        )
        logger.info("Timetable entry %s created for %s", entry.id, entry.day_of_week)
        return entry

    async def get_entry(self, entry_id: int) -> TimetableEntry:
        entry = await self.repository.get_entry_by_id(entry_id)
        if entry is None:
            raise NotFoundException("Timetable entry not found")
        return entry

    async def update_entry(self, entry_id: int, payload: TimetableEntryUpdate) -> TimetableEntry:
        """Apply given fields; the time window is checked against the merged values."""
        entry = await self.get_entry(entry_id)
        changes = payload.model_dump(exclude_none=True)
        if not changes:
            return entry

        for field in ("course_name", "teacher_name"):
            if field in changes:
                changes[field] = _clean_name(changes[field], field)
        _validate_time_window(
            changes.get("start_time", entry.start_time),
            changes.get("end_time", entry.end_time),
        )

        entry = await self.repository.update_entry(entry, **changes)
        await self.audit_repository.create_audit_log(
            action="timetable.updated",
            entity_type="timetable_entry",
            entity_id=str(entry.id),
            payload={key: str(value) for key, value in changes.items()},
        )
        return entry

    async def delete_entry(self, entry_id: int) -> None:
        entry = await self.get_entry(entry_id)
        await self.repository.delete_entry(entry)
        await self.audit_repository.create_audit_log(
            action="timetable.deleted",
            entity_type="timetable_entry",
            entity_id=str(entry_id),
            payload={"course_name": entry.course_name},
        )
        logger.info("Timetable entry %s deleted", entry_id)

    async def list_entries(
        self,
        status: TimetableStatusEnum | None,
        day_of_week: DayOfWeekEnum | None,
        limit: int,
        offset: int,
    ) -> tuple[list[TimetableEntry], int]:
        return await self.repository.list_entries(
            status=status,
            day_of_week=day_of_week,
            limit=limit,
            offset=offset,
        )


async def get_timetable_service(session: AsyncSession = Depends(get_db_session)) -> TimetableService:
    """Dependency provider for timetable service."""
    return TimetableService(TimetableRepository(session), AuditRepository(session))
