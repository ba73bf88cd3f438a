from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from langschool.core.enums import CourseLevelEnum, RoleEnum, ScheduleStatusEnum
from langschool.modules.courses.schemas import CourseCreate, CourseUpdate
from langschool.modules.courses.service import CoursesService
from langschool.modules.scheduling.schemas import ScheduleCreate, ScheduleUpdate
from langschool.modules.scheduling.service import SchedulingService, effective_capacity
from langschool.shared.exceptions import (
    CapacityExceededException,
    ConflictException,
    NotFoundException,
    ValidationException,
)

NOW = datetime(2026, 11, 2, 9, 0, tzinfo=UTC)


@dataclass
class FakeCourse:
    id: int
    title: str
    slug: str
    level: CourseLevelEnum
    capacity: int
    price: Decimal = Decimal("0")
    currency: str = "MMK"
    description: str | None = None
    is_active: bool = True


@dataclass
class FakeSchedule:
    id: int
    course_id: int
    teacher_id: int | None
    start_time: datetime
    end_time: datetime
    timezone: str
    location: str | None
    capacity: int | None
    status: ScheduleStatusEnum
    created_at: datetime = NOW
    updated_at: datetime = NOW


@dataclass
class FakeUser:
    id: int
    role: RoleEnum


class FakeCoursesRepository:
    def __init__(self, courses: list[FakeCourse] | None = None, fallback_occupancy: int = 0) -> None:
        self.courses = {course.id: course for course in courses or []}
        self.fallback_occupancy = fallback_occupancy
        self.course_locks: list[tuple[int, bool]] = []

    async def create_course(self, **fields) -> FakeCourse:
        course = FakeCourse(id=len(self.courses) + 1, **fields)
        self.courses[course.id] = course
        return course

    async def get_course_by_id(self, course_id: int) -> FakeCourse | None:
        return self.courses.get(course_id)

    async def lock_course(self, course_id: int, *, shared: bool = False) -> FakeCourse | None:
        self.course_locks.append((course_id, shared))
        return self.courses.get(course_id)

    async def get_course_by_slug(self, slug: str) -> FakeCourse | None:
        return next((course for course in self.courses.values() if course.slug == slug), None)

    async def max_fallback_schedule_occupancy(self, course_id: int) -> int:
        return self.fallback_occupancy

    async def update_course(self, course: FakeCourse, **changes) -> FakeCourse:
        for key, value in changes.items():
            setattr(course, key, value)
        return course


@dataclass
class FakeSchedulingRepository:
    schedules: dict[int, FakeSchedule] = field(default_factory=dict)
    occupied: dict[int, int] = field(default_factory=dict)
    locked: list[int] = field(default_factory=list)

    async def create_schedule(self, **fields) -> FakeSchedule:
        schedule = FakeSchedule(id=len(self.schedules) + 1, **fields)
        self.schedules[schedule.id] = schedule
        return schedule

    async def get_schedule_by_id(self, schedule_id: int) -> FakeSchedule | None:
        return self.schedules.get(schedule_id)

    async def lock_schedule(self, schedule_id: int) -> FakeSchedule | None:
        self.locked.append(schedule_id)
        return self.schedules.get(schedule_id)

    async def list_course_schedules(self, course_id: int) -> list[FakeSchedule]:
        return [item for item in self.schedules.values() if item.course_id == course_id]

    async def count_occupied_seats(self, schedule_ids: list[int]) -> dict[int, int]:
        return {item_id: self.occupied[item_id] for item_id in schedule_ids if item_id in self.occupied}

    async def update_schedule(self, schedule: FakeSchedule, **changes) -> FakeSchedule:
        for key, value in changes.items():
            setattr(schedule, key, value)
        return schedule


class FakeUsersRepository:
    def __init__(self, users: list[FakeUser]) -> None:
        self.users = {user.id: user for user in users}

    async def get_user_by_id(self, user_id: int) -> FakeUser | None:
        return self.users.get(user_id)


class FakeAuditRepository:
    def __init__(self) -> None:
        self.actions: list[str] = []

    async def create_audit_log(self, action: str, entity_type: str, entity_id: str | None, payload: dict) -> None:
        self.actions.append(action)


def _course(course_id: int = 1, capacity: int = 10, slug: str = "korean-101") -> FakeCourse:
    return FakeCourse(
        id=course_id,
        title="Korean 101",
        slug=slug,
        level=CourseLevelEnum.BEGINNER,
        capacity=capacity,
    )


def _scheduling_service(
    courses: FakeCoursesRepository,
    schedules: FakeSchedulingRepository | None = None,
) -> tuple[SchedulingService, FakeSchedulingRepository]:
    schedules = schedules or FakeSchedulingRepository()
    service = SchedulingService(
        repository=schedules,
        courses_repository=courses,
        users_repository=FakeUsersRepository(
            [FakeUser(id=5, role=RoleEnum.TEACHER), FakeUser(id=6, role=RoleEnum.STUDENT)],
        ),
        audit_repository=FakeAuditRepository(),
    )
    return service, schedules


def test_effective_capacity_prefers_schedule_value() -> None:
    assert effective_capacity(4, 20) == 4
    assert effective_capacity(0, 20) == 0
    assert effective_capacity(None, 20) == 20


@pytest.mark.asyncio
async def test_create_course_derives_slug_from_title() -> None:
    audit = FakeAuditRepository()
    service = CoursesService(FakeCoursesRepository(), audit)

    course = await service.create_course(
        CourseCreate(title="  TOPIK II: Writing ", level=CourseLevelEnum.TOPIK, capacity=8),
    )

    assert course.slug == "topik-ii-writing"
    assert course.title == "TOPIK II: Writing"
    assert audit.actions == ["course.created"]


@pytest.mark.asyncio
async def test_create_course_rejects_taken_slug() -> None:
    service = CoursesService(FakeCoursesRepository([_course()]), FakeAuditRepository())

    with pytest.raises(ConflictException):
        await service.create_course(
            CourseCreate(title="Korean 101", level=CourseLevelEnum.BEGINNER, capacity=5),
        )


@pytest.mark.asyncio
async def test_create_course_rejects_slug_without_letters() -> None:
    service = CoursesService(FakeCoursesRepository(), FakeAuditRepository())

    with pytest.raises(ValidationException):
        await service.create_course(
            CourseCreate(title="!!!", level=CourseLevelEnum.BEGINNER, capacity=5),
        )


@pytest.mark.asyncio
async def test_update_course_refuses_capacity_below_inherited_occupancy() -> None:
    repository = FakeCoursesRepository([_course(capacity=10)], fallback_occupancy=6)
    service = CoursesService(repository, FakeAuditRepository())

    with pytest.raises(CapacityExceededException):
        await service.update_course(1, CourseUpdate(capacity=5))

    updated = await service.update_course(1, CourseUpdate(capacity=6, currency="usd"))
    assert updated.capacity == 6
    assert updated.currency == "USD"
    assert repository.course_locks == [(1, False), (1, False)]


@pytest.mark.asyncio
async def test_update_unknown_course_is_not_found() -> None:
    service = CoursesService(FakeCoursesRepository(), FakeAuditRepository())

    with pytest.raises(NotFoundException):
        await service.update_course(9, CourseUpdate(title="New"))


@pytest.mark.asyncio
async def test_create_schedule_requires_end_after_start() -> None:
    service, _ = _scheduling_service(FakeCoursesRepository([_course()]))

    with pytest.raises(ValidationException):
        await service.create_schedule(
            1,
            ScheduleCreate(startTime=NOW, endTime=NOW),
        )


@pytest.mark.asyncio
async def test_create_schedule_requires_teacher_role() -> None:
    service, _ = _scheduling_service(FakeCoursesRepository([_course()]))

    with pytest.raises(ValidationException):
        await service.create_schedule(
            1,
            ScheduleCreate(teacherId=6, startTime=NOW, endTime=NOW + timedelta(hours=1)),
        )


@pytest.mark.asyncio
async def test_create_schedule_rejects_unknown_timezone_and_course() -> None:
    service, _ = _scheduling_service(FakeCoursesRepository([_course()]))

    with pytest.raises(ValidationException):
        await service.create_schedule(
            1,
            ScheduleCreate(startTime=NOW, endTime=NOW + timedelta(hours=1), timezone="Mars/Olympus"),
        )
    with pytest.raises(NotFoundException):
        await service.create_schedule(
            42,
            ScheduleCreate(startTime=NOW, endTime=NOW + timedelta(hours=1)),
        )


@pytest.mark.asyncio
async def test_create_schedule_reports_effective_capacity() -> None:
    service, _ = _scheduling_service(FakeCoursesRepository([_course(capacity=12)]))

    inherited = await service.create_schedule(
        1,
        ScheduleCreate(teacherId=5, startTime=NOW, endTime=NOW + timedelta(hours=2), timezone="Asia/Seoul"),
    )
    own = await service.create_schedule(
        1,
        ScheduleCreate(startTime=NOW, endTime=NOW + timedelta(hours=2), capacity=4),
    )

    assert inherited.effective_capacity == 12
    assert inherited.timezone == "Asia/Seoul"
    assert own.effective_capacity == 4
    assert own.enrolled_count == 0


@pytest.mark.asyncio
async def test_update_schedule_refuses_capacity_below_occupancy() -> None:
    courses = FakeCoursesRepository([_course(capacity=12)])
    service, schedules = _scheduling_service(courses)
    created = await service.create_schedule(
        1,
        ScheduleCreate(startTime=NOW, endTime=NOW + timedelta(hours=1), capacity=6),
    )
    schedules.occupied[created.id] = 5

    with pytest.raises(CapacityExceededException):
        await service.update_schedule(created.id, ScheduleUpdate(capacity=4))

    updated = await service.update_schedule(created.id, ScheduleUpdate(capacity=5))
    assert updated.capacity == 5
    assert updated.enrolled_count == 5
    assert schedules.locked == [created.id, created.id]
    assert courses.course_locks == [(1, True), (1, True)]


@pytest.mark.asyncio
async def test_update_schedule_validates_combined_time_range() -> None:
    service, _ = _scheduling_service(FakeCoursesRepository([_course()]))
    created = await service.create_schedule(
        1,
        ScheduleCreate(startTime=NOW, endTime=NOW + timedelta(hours=1)),
    )

    with pytest.raises(ValidationException):
        await service.update_schedule(created.id, ScheduleUpdate(startTime=NOW + timedelta(hours=3)))


@pytest.mark.asyncio
async def test_list_course_schedules_includes_seat_usage() -> None:
    service, schedules = _scheduling_service(FakeCoursesRepository([_course(capacity=3)]))
    first = await service.create_schedule(
        1,
        ScheduleCreate(startTime=NOW, endTime=NOW + timedelta(hours=1)),
    )
    schedules.occupied[first.id] = 2

    listed = await service.list_course_schedules(1)

    assert [(item.id, item.enrolled_count, item.effective_capacity) for item in listed] == [(first.id, 2, 3)]
