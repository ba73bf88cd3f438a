"""Enrollment business logic layer."""

from __future__ import annotations

import logging

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from langschool.core.config import get_settings
from langschool.core.database import get_db_session
from langschool.core.enums import (
    EnrollmentSourceEnum,
    EnrollmentStatusEnum,
    PaymentStatusEnum,
    ScheduleStatusEnum,
)
from langschool.core.metrics import (
    ENROLLMENT_CAPACITY_REJECTIONS_TOTAL,
    ENROLLMENT_TRANSITIONS_TOTAL,
    ENROLLMENTS_CREATED_TOTAL,
)
from langschool.modules.audit.repository import AuditRepository
from langschool.modules.courses.models import Course
from langschool.modules.courses.repository import CoursesRepository
from langschool.modules.enrollments.models import Enrollment
from langschool.modules.enrollments.repository import EnrollmentRepository
from langschool.modules.enrollments.schemas import EnrollmentCreate, EnrollmentUpdate
from langschool.modules.scheduling.models import Schedule
from langschool.modules.scheduling.repository import SchedulingRepository
from langschool.modules.scheduling.service import effective_capacity
from langschool.modules.users.repository import UsersRepository
from langschool.shared.exceptions import (
    CapacityExceededException,
    InvalidStateException,
    NotFoundException,
    ValidationException,
)
from langschool.shared.utils import normalize_email, utc_now

logger = logging.getLogger(__name__)
settings = get_settings()

ALLOWED_STATUS_TRANSITIONS: dict[EnrollmentStatusEnum, frozenset[EnrollmentStatusEnum]] = {
    EnrollmentStatusEnum.PENDING: frozenset(
        {EnrollmentStatusEnum.APPROVED, EnrollmentStatusEnum.CANCELLED},
    ),
    EnrollmentStatusEnum.APPROVED: frozenset(
        {EnrollmentStatusEnum.ACTIVE, EnrollmentStatusEnum.CANCELLED},
    ),
    EnrollmentStatusEnum.ACTIVE: frozenset(
        {EnrollmentStatusEnum.COMPLETED, EnrollmentStatusEnum.CANCELLED},
    ),
    EnrollmentStatusEnum.COMPLETED: frozenset(),
    EnrollmentStatusEnum.CANCELLED: frozenset(),
}


def _default_name(email: str) -> str:
    return email.split("@", 1)[0]


class EnrollmentService:
    """Enrollment engine: seat accounting plus status and payment lifecycle."""

    def __init__(
        self,
        repository: EnrollmentRepository,
        scheduling_repository: SchedulingRepository,
        courses_repository: CoursesRepository,
        users_repository: UsersRepository,
        audit_repository: AuditRepository,
    ) -> None:
        self.repository = repository
        self.scheduling_repository = scheduling_repository
        self.courses_repository = courses_repository
        self.users_repository = users_repository
        self.audit_repository = audit_repository

    async def _ensure_seat_available(self, schedule: Schedule, course: Course) -> None:
        """Check seats on a schedule whose row lock is already held."""
        capacity = effective_capacity(schedule.capacity, course.capacity)
        taken = await self.repository.count_seats_taken(schedule.id)
        if taken >= capacity:
            ENROLLMENT_CAPACITY_REJECTIONS_TOTAL.inc()
            logger.warning(
                "Schedule %s is full: %s of %s seats taken",
                schedule.id,
                taken,
                capacity,
            )
            raise CapacityExceededException(
                f"Schedule {schedule.id} is full ({taken}/{capacity} seats taken)",
            )

    async def _lock_enrollable_schedule(self, schedule_id: int, course: Course) -> Schedule:
        schedule = await self.scheduling_repository.lock_schedule(schedule_id)
        if schedule is None:
            raise NotFoundException("Schedule not found")
        if schedule.course_id != course.id:
            raise ValidationException(
                f"Schedule {schedule.id} does not belong to course {course.id}",
            )
        if schedule.status != ScheduleStatusEnum.SCHEDULED:
            raise InvalidStateException(f"Schedule {schedule.id} is {schedule.status}")
        return schedule

    async def create_enrollment(self, payload: EnrollmentCreate) -> Enrollment:
        """Enroll a student, creating the user on first sight of the email."""
        email = normalize_email(payload.user_email)

        # Shared course lock, then schedule lock: a concurrent capacity edit
        # either finishes first or waits for this enrollment to commit.
        course = await self.courses_repository.lock_course(payload.course_id, shared=True)
        if course is None:
            raise NotFoundException("Course not found")
        if not course.is_active:
            raise ValidationException(f"Course {course.id} is not accepting enrollments")

        if payload.schedule_id is not None:
            # Lock is held until commit, so concurrent creates count seats one at a time.
            schedule = await self._lock_enrollable_schedule(payload.schedule_id, course)
            await self._ensure_seat_available(schedule, course)

        name = (payload.user_name or "").strip() or _default_name(email)
        user, user_created = await self.users_repository.get_or_create_by_email(email, name)

        enrollment = await self.repository.create_enrollment(
            user_id=user.id,
            course_id=course.id,
            schedule_id=payload.schedule_id,
            source=payload.source,
            notes=payload.notes,
        )
        await self.audit_repository.create_audit_log(
            action="enrollment.created",
            entity_type="enrollment",
            entity_id=str(enrollment.id),
            payload={
                "user_id": user.id,
                "user_created": user_created,
                "course_id": course.id,
                "schedule_id": payload.schedule_id,
                "source": str(payload.source),
            },
        )
        ENROLLMENTS_CREATED_TOTAL.labels(source=str(payload.source)).inc()
        logger.info(
            "Enrollment %s created for user %s on course %s (schedule %s)",
            enrollment.id,
            user.id,
            course.id,
            payload.schedule_id,
        )
        return enrollment

    async def create_intake_enrollment(self, payload: EnrollmentCreate) -> Enrollment:
        """Public intake path: same rules, restricted to public sources."""
        if payload.source not in {EnrollmentSourceEnum.WEBSITE, EnrollmentSourceEnum.FORM}:
            raise ValidationException(f"Source {payload.source} is not allowed for intake")
        return await self.create_enrollment(payload)

    async def _lock_enrollment(self, enrollment_id: int) -> Enrollment:
        enrollment = await self.repository.lock_enrollment(enrollment_id)
        if enrollment is None:
            raise NotFoundException("Enrollment not found")
        return enrollment

    async def _apply_status(self, enrollment: Enrollment, new_status: EnrollmentStatusEnum) -> bool:
        """Move enrollment to a new status. Returns False when nothing changed."""
        current = enrollment.status
        if new_status == current:
            return False

        if (
            settings.enrollment_strict_transitions
            and new_status not in ALLOWED_STATUS_TRANSITIONS[current]
        ):
            raise InvalidStateException(
                f"Cannot move enrollment from {current} to {new_status}",
            )
        if (
            new_status == EnrollmentStatusEnum.ACTIVE
            and settings.enrollment_require_payment_for_activation
            and enrollment.payment_status != PaymentStatusEnum.PAID
        ):
            raise InvalidStateException("Enrollment must be paid before activation")

        if current == EnrollmentStatusEnum.CANCELLED and enrollment.schedule_id is not None:
            # Leaving cancelled takes a seat again.
            course = await self.courses_repository.lock_course(enrollment.course_id, shared=True)
            if course is None:
                raise NotFoundException("Course not found")
            schedule = await self.scheduling_repository.lock_schedule(enrollment.schedule_id)
            if schedule is None:
                raise NotFoundException("Schedule not found")
            await self._ensure_seat_available(schedule, course)

        now = utc_now()
        enrollment.status = new_status
        if new_status == EnrollmentStatusEnum.APPROVED:
            enrollment.approved_at = now
        elif new_status == EnrollmentStatusEnum.CANCELLED:
            enrollment.cancelled_at = now

        ENROLLMENT_TRANSITIONS_TOTAL.labels(
            from_status=str(current),
            to_status=str(new_status),
        ).inc()
        logger.info("Enrollment %s moved from %s to %s", enrollment.id, current, new_status)
        await self.audit_repository.create_audit_log(
            action=(
                "enrollment.approved"
                if new_status == EnrollmentStatusEnum.APPROVED
                else "enrollment.status.updated"
            ),
            entity_type="enrollment",
            entity_id=str(enrollment.id),
            payload={"from": str(current), "to": str(new_status)},
        )
        return True

    async def _apply_payment_status(
        self,
        enrollment: Enrollment,
        new_payment_status: PaymentStatusEnum,
    ) -> bool:
        current = enrollment.payment_status
        if new_payment_status == current:
            return False
        enrollment.payment_status = new_payment_status
        await self.audit_repository.create_audit_log(
            action="enrollment.payment_status.updated",
            entity_type="enrollment",
            entity_id=str(enrollment.id),
            payload={"from": str(current), "to": str(new_payment_status)},
        )
        return True

    async def approve_enrollment(self, enrollment_id: int) -> Enrollment:
        """Approve a pending enrollment. Approving twice is an error."""
        enrollment = await self._lock_enrollment(enrollment_id)
        if enrollment.status != EnrollmentStatusEnum.PENDING:
            raise InvalidStateException(
                f"Only pending enrollments can be approved (current status: {enrollment.status})",
            )
        await self._apply_status(enrollment, EnrollmentStatusEnum.APPROVED)
        return await self.repository.save(enrollment)

    async def update_status(
        self,
        enrollment_id: int,
        new_status: EnrollmentStatusEnum,
    ) -> Enrollment:
        enrollment = await self._lock_enrollment(enrollment_id)
        await self._apply_status(enrollment, new_status)
        return await self.repository.save(enrollment)

    async def update_payment_status(
        self,
        enrollment_id: int,
        new_payment_status: PaymentStatusEnum,
    ) -> Enrollment:
        """Change payment status only; lifecycle status is left untouched."""
        enrollment = await self._lock_enrollment(enrollment_id)
        await self._apply_payment_status(enrollment, new_payment_status)
        return await self.repository.save(enrollment)

    async def update_enrollment(self, enrollment_id: int, payload: EnrollmentUpdate) -> Enrollment:
        """Apply payment and/or status change in one transaction.

        Payment goes first so a single request can mark paid and activate
        when activation requires payment.
        """
        if payload.status is None and payload.payment_status is None:
            raise ValidationException("Provide status or paymentStatus")

        enrollment = await self._lock_enrollment(enrollment_id)
        if payload.payment_status is not None:
            await self._apply_payment_status(enrollment, payload.payment_status)
        if payload.status is not None:
            await self._apply_status(enrollment, payload.status)
        return await self.repository.save(enrollment)

    async def get_enrollment(self, enrollment_id: int) -> Enrollment:
        enrollment = await self.repository.get_enrollment_by_id(enrollment_id)
        if enrollment is None:
            raise NotFoundException("Enrollment not found")
        return enrollment

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
        return await self.repository.list_enrollments(
            status=status,
            payment_status=payment_status,
            schedule_id=schedule_id,
            course_id=course_id,
            user_id=user_id,
            limit=limit,
            offset=offset,
        )


async def get_enrollment_service(session: AsyncSession = Depends(get_db_session)) -> EnrollmentService:
    """Dependency provider for enrollment service."""
    return EnrollmentService(
        repository=EnrollmentRepository(session),
        scheduling_repository=SchedulingRepository(session),
        courses_repository=CoursesRepository(session),
        users_repository=UsersRepository(session),
        audit_repository=AuditRepository(session),
    )
