"""Course business logic layer."""

from __future__ import annotations

import logging

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from langschool.core.database import get_db_session
from langschool.core.enums import CourseLevelEnum
from langschool.modules.audit.repository import AuditRepository
from langschool.modules.courses.models import Course
from langschool.modules.courses.repository import CoursesRepository
from langschool.modules.courses.schemas import CourseCreate, CourseUpdate
from langschool.shared.exceptions import (
    CapacityExceededException,
    ConflictException,
    NotFoundException,
    ValidationException,
)
from langschool.shared.utils import slugify

logger = logging.getLogger(__name__)


class CoursesService:
    """Course catalogue service."""

    def __init__(self, repository: CoursesRepository, audit_repository: AuditRepository) -> None:
        self.repository = repository
        self.audit_repository = audit_repository

    async def _resolve_slug(self, raw_slug: str | None, title: str, course_id: int | None) -> str:
        slug = slugify(raw_slug or title)
        if not slug:
            raise ValidationException("Course slug must contain letters or digits")

        existing = await self.repository.get_course_by_slug(slug)
        if existing is not None and existing.id != course_id:
            raise ConflictException(f"Course slug '{slug}' is already taken")
        return slug

    async def create_course(self, payload: CourseCreate) -> Course:
        """Create course; slug is derived from the title when omitted."""
        slug = await self._resolve_slug(payload.slug, payload.title, course_id=None)
        course = await self.repository.create_course(
            title=payload.title.strip(),
            slug=slug,
            description=payload.description,
            level=payload.level,
            capacity=payload.capacity,
            price=payload.price,
            currency=payload.currency,
            is_active=payload.is_active,
        )
        await self.audit_repository.create_audit_log(
            action="course.created",
            entity_type="course",
            entity_id=str(course.id),
            payload={"slug": course.slug, "capacity": course.capacity},
        )
        logger.info("Course %s created with slug %s", course.id, course.slug)
        return course

    async def get_course(self, course_id: int) -> Course:
        course = await self.repository.get_course_by_id(course_id)
        if course is None:
            raise NotFoundException("Course not found")
        return course

    async def update_course(self, course_id: int, payload: CourseUpdate) -> Course:
        """Update course fields.

        Shrinking capacity is refused while a schedule inheriting it holds
        more seats than the new value. The course row stays locked until
        commit so no enrollment can take an inherited seat meanwhile.
        """
        course = await self.repository.lock_course(course_id)
        if course is None:
            raise NotFoundException("Course not found")
        # description is the only nullable column; other explicit nulls are ignored
        changes = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or key == "description"
        }

        if "slug" in changes:
            changes["slug"] = await self._resolve_slug(changes["slug"], course.title, course.id)
        if "title" in changes:
            changes["title"] = changes["title"].strip()
        if "currency" in changes:
            changes["currency"] = changes["currency"].upper()

        new_capacity = changes.get("capacity")
        if new_capacity is not None and new_capacity < course.capacity:
            occupied = await self.repository.max_fallback_schedule_occupancy(course.id)
            if occupied > new_capacity:
                raise CapacityExceededException(
                    f"Capacity {new_capacity} is below {occupied} seats already taken",
                )

        course = await self.repository.update_course(course, **changes)
        await self.audit_repository.create_audit_log(
            action="course.updated",
            entity_type="course",
            entity_id=str(course.id),
            payload={key: str(value) for key, value in changes.items()},
        )
        return course

    async def list_courses(
        self,
        q: str | None,
        level: CourseLevelEnum | None,
        is_active: bool | None,
        limit: int,
        offset: int,
    ) -> tuple[list[Course], int]:
        return await self.repository.list_courses(
            q=q,
            level=level,
            is_active=is_active,
            limit=limit,
            offset=offset,
        )


async def get_courses_service(session: AsyncSession = Depends(get_db_session)) -> CoursesService:
    """Dependency provider for courses service."""
    return CoursesService(CoursesRepository(session), AuditRepository(session))
