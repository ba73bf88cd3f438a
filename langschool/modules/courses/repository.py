"""Course repository layer."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from langschool.core.enums import CourseLevelEnum, EnrollmentStatusEnum
from langschool.modules.courses.models import Course
from langschool.modules.enrollments.models import Enrollment
from langschool.modules.scheduling.models import Schedule


class CoursesRepository:
    """DB access for courses."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_course(
        self,
        title: str,
        slug: str,
        description: str | None,
        level: CourseLevelEnum,
        capacity: int,
        price: Decimal,
        currency: str,
        is_active: bool,
    ) -> Course:
        course = Course(
            title=title,
            slug=slug,
            description=description,
            level=level,
            capacity=capacity,
            price=price,
            currency=currency.upper(),
            is_active=is_active,
        )
        self.session.add(course)
        await self.session.flush()
        return course

    async def get_course_by_id(self, course_id: int) -> Course | None:
        stmt = select(Course).where(Course.id == course_id)
        return await self.session.scalar(stmt)

    async def lock_course(self, course_id: int, *, shared: bool = False) -> Course | None:
        """Load course with a row lock held until the transaction ends.

        Writers that take seats hold FOR SHARE; capacity edits hold FOR UPDATE,
        so a capacity cut waits for in-flight enrollments and vice versa.
        """
        stmt = (
            select(Course)
            .where(Course.id == course_id)
            .with_for_update(read=shared)
            .execution_options(populate_existing=True)
        )
        return await self.session.scalar(stmt)

    async def get_course_by_slug(self, slug: str) -> Course | None:
        stmt = select(Course).where(Course.slug == slug)
        return await self.session.scalar(stmt)

    async def list_courses(
        self,
        q: str | None,
        level: CourseLevelEnum | None,
        is_active: bool | None,
        limit: int,
        offset: int,
    ) -> tuple[list[Course], int]:
        base_stmt: Select[tuple[Course]] = select(Course)
        if q:
            pattern = f"%{q.strip()}%"
            base_stmt = base_stmt.where(or_(Course.title.ilike(pattern), Course.slug.ilike(pattern)))
        if level is not None:
            base_stmt = base_stmt.where(Course.level == level)
        if is_active is not None:
            base_stmt = base_stmt.where(Course.is_active.is_(is_active))

        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = int((await self.session.scalar(count_stmt)) or 0)

        stmt = base_stmt.order_by(Course.title.asc(), Course.id.asc()).limit(limit).offset(offset)
        items = (await self.session.scalars(stmt)).all()
        return items, total

    async def max_fallback_schedule_occupancy(self, course_id: int) -> int:
        """Largest seat count among schedules that inherit the course capacity."""
        occupancy = (
            select(func.count(Enrollment.id).label("seats"))
            .join(Schedule, Schedule.id == Enrollment.schedule_id)
            .where(
                Schedule.course_id == course_id,
                Schedule.capacity.is_(None),
                Enrollment.status != EnrollmentStatusEnum.CANCELLED,
            )
            .group_by(Enrollment.schedule_id)
            .subquery()
        )
        stmt = select(func.coalesce(func.max(occupancy.c.seats), 0))
        return int((await self.session.scalar(stmt)) or 0)

    async def update_course(self, course: Course, **changes) -> Course:
        for key, value in changes.items():
            setattr(course, key, value)
        await self.session.flush()
        return course
