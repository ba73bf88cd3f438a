"""Scheduling business logic layer."""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from langschool.core.config import get_settings
from langschool.core.database import get_db_session
from langschool.core.enums import RoleEnum
from langschool.modules.audit.repository import AuditRepository
from langschool.modules.courses.models import Course
from langschool.modules.courses.repository import CoursesRepository
from langschool.modules.scheduling.models import Schedule
from langschool.modules.scheduling.repository import SchedulingRepository
from langschool.modules.scheduling.schemas import ScheduleCreate, ScheduleRead, ScheduleUpdate
from langschool.modules.users.repository import UsersRepository
from langschool.shared.exceptions import (
    CapacityExceededException,
    NotFoundException,
    ValidationException,
)
from langschool.shared.utils import ensure_utc

settings = get_settings()


def effective_capacity(schedule_capacity: int | None, course_capacity: int) -> int:
    """Seats available on a schedule: its own capacity, else the course's."""
    if schedule_capacity is not None:
        return schedule_capacity
    return course_capacity


def _validate_timezone(name: str) -> str:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValidationException(f"Unknown timezone: {name}") from exc
    return name


def _validate_time_range(start_time: datetime, end_time: datetime) -> tuple[datetime, datetime]:
    start_time = ensure_utc(start_time)
    end_time = ensure_utc(end_time)
    if end_time <= start_time:
        raise ValidationException("Schedule end_time must be after start_time")
    return start_time, end_time


class SchedulingService:
    """Schedule management service."""

    def __init__(
        self,
        repository: SchedulingRepository,
        courses_repository: CoursesRepository,
        users_repository: UsersRepository,
        audit_repository: AuditRepository,
    ) -> None:
        self.repository = repository
        self.courses_repository = courses_repository
        self.users_repository = users_repository
        self.audit_repository = audit_repository

    async def _get_course(self, course_id: int) -> Course:
        course = await self.courses_repository.get_course_by_id(course_id)
        if course is None:
            raise NotFoundException("Course not found")
        return course

    async def _validate_teacher(self, teacher_id: int | None) -> None:
        if teacher_id is None:
            return
        teacher = await self.users_repository.get_user_by_id(teacher_id)
        if teacher is None or teacher.role != RoleEnum.TEACHER:
            raise ValidationException(f"User {teacher_id} is not a teacher")

    def _to_read(self, schedule: Schedule, course: Course, enrolled_count: int) -> ScheduleRead:
        return ScheduleRead.model_validate(schedule).model_copy(
            update={
                "effective_capacity": effective_capacity(schedule.capacity, course.capacity),
                "enrolled_count": enrolled_count,
            },
        )

    async def create_schedule(self, course_id: int, payload: ScheduleCreate) -> ScheduleRead:
        """Create schedule occurrence for an existing course."""
        course = await self._get_course(course_id)
        start_time, end_time = _validate_time_range(payload.start_time, payload.end_time)
        timezone = _validate_timezone(payload.timezone or settings.default_schedule_timezone)
        await self._validate_teacher(payload.teacher_id)

        schedule = await self.repository.create_schedule(
            course_id=course.id,
            teacher_id=payload.teacher_id,
            start_time=start_time,
            end_time=end_time,
            timezone=timezone,
            location=payload.location,
            capacity=payload.capacity,
            status=payload.status,
        )
        await self.audit_repository.create_audit_log(
            action="schedule.created",
            entity_type="schedule",
            entity_id=str(schedule.id),
            payload={"course_id": course.id, "capacity": schedule.capacity},
        )
        return self._to_read(schedule, course, enrolled_count=0)

    async def get_schedule(self, schedule_id: int) -> ScheduleRead:
        schedule = await self.repository.get_schedule_by_id(schedule_id)
        if schedule is None:
            raise NotFoundException("Schedule not found")
        course = await self._get_course(schedule.course_id)
        counts = await self.repository.count_occupied_seats([schedule.id])
        return self._to_read(schedule, course, counts.get(schedule.id, 0))

    async def list_course_schedules(self, course_id: int) -> list[ScheduleRead]:
        course = await self._get_course(course_id)
        schedules = await self.repository.list_course_schedules(course.id)
        counts = await self.repository.count_occupied_seats([item.id for item in schedules])
        return [self._to_read(item, course, counts.get(item.id, 0)) for item in schedules]

    async def update_schedule(self, schedule_id: int, payload: ScheduleUpdate) -> ScheduleRead:
        """Update schedule under its row lock so seat counts cannot move meanwhile."""
        found = await self.repository.get_schedule_by_id(schedule_id)
        if found is None:
            raise NotFoundException("Schedule not found")
        # Same lock order as enrollment creates: course first, then schedule.
        course = await self.courses_repository.lock_course(found.course_id, shared=True)
        if course is None:
            raise NotFoundException("Course not found")
        schedule = await self.repository.lock_schedule(schedule_id)
        if schedule is None:
            raise NotFoundException("Schedule not found")

        changes = payload.model_dump(exclude_unset=True)
        for key in ("start_time", "end_time", "timezone", "status"):
            if key in changes and changes[key] is None:
                changes.pop(key)

        if "start_time" in changes or "end_time" in changes:
            changes["start_time"], changes["end_time"] = _validate_time_range(
                changes.get("start_time", schedule.start_time),
                changes.get("end_time", schedule.end_time),
            )
        if "timezone" in changes:
            _validate_timezone(changes["timezone"])
        if "teacher_id" in changes:
            await self._validate_teacher(changes["teacher_id"])

        counts = await self.repository.count_occupied_seats([schedule.id])
        occupied = counts.get(schedule.id, 0)
        if "capacity" in changes:
            new_capacity = effective_capacity(changes["capacity"], course.capacity)
            if new_capacity < occupied:
                raise CapacityExceededException(
                    f"Capacity {new_capacity} is below {occupied} seats already taken",
                )

        schedule = await self.repository.update_schedule(schedule, **changes)
        await self.audit_repository.create_audit_log(
            action="schedule.updated",
            entity_type="schedule",
            entity_id=str(schedule.id),
            payload={key: str(value) for key, value in changes.items()},
        )
        return self._to_read(schedule, course, occupied)


async def get_scheduling_service(session: AsyncSession = Depends(get_db_session)) -> SchedulingService:
    """Dependency provider for scheduling service."""
    return SchedulingService(
        repository=SchedulingRepository(session),
        courses_repository=CoursesRepository(session),
        users_repository=UsersRepository(session),
        audit_repository=AuditRepository(session),
    )
