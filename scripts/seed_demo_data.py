"""Seed idempotent demo data for local/non-production environments."""

from __future__ import annotations

import argparse
import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime, time, timedelta
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from langschool.core.config import get_settings
from langschool.core.database import SessionLocal, close_engine
from langschool.core.enums import CourseLevelEnum, DayOfWeekEnum, RoleEnum, UserStatusEnum
from langschool.modules.audit.repository import AuditRepository
from langschool.modules.courses.models import Course
from langschool.modules.courses.repository import CoursesRepository
from langschool.modules.courses.schemas import CourseCreate
from langschool.modules.courses.service import CoursesService
from langschool.modules.gallery.models import GalleryItem
from langschool.modules.gallery.repository import GalleryRepository
from langschool.modules.gallery.schemas import GalleryItemCreate
from langschool.modules.gallery.service import GalleryService
from langschool.modules.scheduling.models import Schedule
from langschool.modules.scheduling.repository import SchedulingRepository
from langschool.modules.scheduling.schemas import ScheduleCreate
from langschool.modules.scheduling.service import SchedulingService
from langschool.modules.timetable.models import TimetableEntry
from langschool.modules.timetable.repository import TimetableRepository
from langschool.modules.timetable.schemas import TimetableEntryCreate
from langschool.modules.timetable.service import TimetableService
from langschool.modules.users.models import User
from langschool.modules.users.repository import UsersRepository

DEMO_USERS = (
    ("demo-admin@langschool.dev", "Demo Admin", RoleEnum.ADMIN),
    ("demo-teacher@langschool.dev", "Demo Teacher", RoleEnum.TEACHER),
    ("demo-student@langschool.dev", "Demo Student", RoleEnum.STUDENT),
)

DEMO_COURSES = (
    ("Korean for Beginners", CourseLevelEnum.BEGINNER, 12, Decimal("150000")),
    ("Intermediate Conversation", CourseLevelEnum.INTERMEDIATE, 10, Decimal("180000")),
    ("TOPIK II Preparation", CourseLevelEnum.TOPIK, 8, Decimal("220000")),
)

DEMO_SCHEDULE_DAY_OFFSETS = (2, 9)
DEMO_SCHEDULE_START_HOUR = 11
DEMO_SCHEDULE_DURATION_MINUTES = 90

DEMO_TIMETABLE = (
    ("Korean for Beginners", CourseLevelEnum.BEGINNER, DayOfWeekEnum.MONDAY, time(18, 0), time(19, 30)),
    ("Korean for Beginners", CourseLevelEnum.BEGINNER, DayOfWeekEnum.WEDNESDAY, time(18, 0), time(19, 30)),
    ("TOPIK II Preparation", CourseLevelEnum.TOPIK, DayOfWeekEnum.SATURDAY, time(9, 30), time(12, 0)),
)

DEMO_GALLERY_URLS = (
    "https://cdn.langschool.dev/gallery/classroom.jpg",
    "https://cdn.langschool.dev/gallery/graduation.jpg",
    "https://cdn.langschool.dev/gallery/culture-day.jpg",
)


@dataclass(slots=True)
class SeedStats:
    users_created: int = 0
    courses_created: int = 0
    schedules_created: int = 0
    gallery_items_created: int = 0
    timetable_entries_created: int = 0


async def _ensure_user(
    session: AsyncSession,
    *,
    email: str,
    name: str,
    role: RoleEnum,
) -> tuple[User, bool]:
    repository = UsersRepository(session)
    user = await repository.get_user_by_email(email)
    if user is None:
        user = await repository.create_user(
            email=email,
            name=name,
            role=role,
            status=UserStatusEnum.ACTIVE,
        )
        return user, True

    await repository.update_user(user, name=name, role=role, status=UserStatusEnum.ACTIVE)
    return user, False


async def _ensure_courses(session: AsyncSession) -> tuple[list[Course], int]:
    courses_service = CoursesService(CoursesRepository(session), AuditRepository(session))
    courses: list[Course] = []
    created = 0
    for title, level, capacity, price in DEMO_COURSES:
        payload = CourseCreate(title=title, level=level, capacity=capacity, price=price)
        existing = await session.scalar(select(Course).where(Course.title == title))
        if existing is not None:
            courses.append(existing)
            continue
        courses.append(await courses_service.create_course(payload))
        created += 1
    return courses, created


def _build_demo_schedule_ranges(now: datetime) -> list[tuple[datetime, datetime]]:
    ranges: list[tuple[datetime, datetime]] = []
    for day_offset in DEMO_SCHEDULE_DAY_OFFSETS:
        target_date = (now + timedelta(days=day_offset)).date()
        start_time = datetime.combine(target_date, time(hour=DEMO_SCHEDULE_START_HOUR, tzinfo=UTC))
        ranges.append((start_time, start_time + timedelta(minutes=DEMO_SCHEDULE_DURATION_MINUTES)))
    return ranges


async def _ensure_schedules(
    session: AsyncSession,
    *,
    courses: list[Course],
    teacher: User,
) -> int:
    scheduling_service = SchedulingService(
        repository=SchedulingRepository(session),
        courses_repository=CoursesRepository(session),
        users_repository=UsersRepository(session),
        audit_repository=AuditRepository(session),
    )
    created = 0
    now = datetime.now(UTC)
    for course in courses:
        for start_time, end_time in _build_demo_schedule_ranges(now):
            existing = await session.scalar(
                select(Schedule).where(
                    Schedule.course_id == course.id,
                    Schedule.start_time == start_time,
                ),
            )
            if existing is not None:
                continue
            await scheduling_service.create_schedule(
                course.id,
                ScheduleCreate(
                    teacher_id=teacher.id,
                    start_time=start_time,
                    end_time=end_time,
                    location="Room A",
                ),
            )
            created += 1
    return created


async def _ensure_gallery(session: AsyncSession) -> int:
    gallery_service = GalleryService(GalleryRepository(session), AuditRepository(session))
    created = 0
    for image_url in DEMO_GALLERY_URLS:
        existing = await session.scalar(select(GalleryItem).where(GalleryItem.image_url == image_url))
        if existing is not None:
            continue
        await gallery_service.create_item(GalleryItemCreate(image_url=image_url))
        created += 1
    return created


async def _ensure_timetable(session: AsyncSession, *, teacher: User) -> int:
    timetable_service = TimetableService(TimetableRepository(session), AuditRepository(session))
    created = 0
    for course_name, level, day_of_week, start_time, end_time in DEMO_TIMETABLE:
        existing = await session.scalar(
            select(TimetableEntry).where(
                TimetableEntry.course_name == course_name,
                TimetableEntry.day_of_week == day_of_week,
                TimetableEntry.start_time == start_time,
            ),
        )
        if existing is not None:
            continue
        await timetable_service.create_entry(
            TimetableEntryCreate(
                course_name=course_name,
                level=level,
                day_of_week=day_of_week,
                start_time=start_time,
                end_time=end_time,
                teacher_name=teacher.name,
            ),
        )
        created += 1
    return created


async def _run_seed(*, allow_production: bool) -> SeedStats:
    settings = get_settings()
    app_env = settings.app_env.strip().lower()
    if app_env in {"production", "prod"} and not allow_production:
        raise RuntimeError(
            "Refusing to seed demo data in production. "
            "Re-run with --allow-production only if you are absolutely sure.",
        )

    stats = SeedStats()

    async with SessionLocal() as session:
        try:
            users: dict[RoleEnum, User] = {}
            for email, name, role in DEMO_USERS:
                user, created = await _ensure_user(session, email=email, name=name, role=role)
                users[role] = user
                stats.users_created += int(created)

            courses, stats.courses_created = await _ensure_courses(session)
            stats.schedules_created = await _ensure_schedules(
                session,
                courses=courses,
                teacher=users[RoleEnum.TEACHER],
            )
            stats.gallery_items_created = await _ensure_gallery(session)
            stats.timetable_entries_created = await _ensure_timetable(
                session,
                teacher=users[RoleEnum.TEACHER],
            )

            await session.commit()
        except Exception:
            await session.rollback()
            raise

    return stats


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Seed idempotent demo data for the language school admin "
            "(staff and student users, courses, upcoming schedules, gallery items, weekly timetable)."
        ),
    )
    parser.add_argument(
        "--allow-production",
        action="store_true",
        help="Allow seeding even when APP_ENV is production/prod.",
    )
    return parser


def _print_summary(stats: SeedStats) -> None:
    print("Demo seed completed.")
    print(f"- Users created: {stats.users_created}")
    print(f"- Courses created: {stats.courses_created}")
    print(f"- Schedules created: {stats.schedules_created}")
    print(f"- Gallery items created: {stats.gallery_items_created}")
    print(f"- Timetable entries created: {stats.timetable_entries_created}")


def main() -> int:
    parser = _build_parser()
    args = parser.parse_args()

    try:
        stats = asyncio.run(_run_seed(allow_production=args.allow_production))
    except Exception as exc:
        print(f"Demo seed failed: {exc}")
        return 1
    finally:
        asyncio.run(close_engine())

    _print_summary(stats)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
