"""Enrollments API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from langschool.core.enums import EnrollmentStatusEnum, PaymentStatusEnum
from langschool.modules.enrollments.rate_limit import enforce_intake_rate_limit
from langschool.modules.enrollments.schemas import (
    EnrollmentCreate,
    EnrollmentIntake,
    EnrollmentRead,
    EnrollmentUpdate,
)
from langschool.modules.enrollments.service import EnrollmentService, get_enrollment_service
from langschool.shared.pagination import Page, build_page, get_pagination_params

router = APIRouter(prefix="/enrollments", tags=["enrollments"])


@router.get("", response_model=Page[EnrollmentRead])
async def list_enrollments(
    enrollment_status: EnrollmentStatusEnum | None = Query(default=None, alias="status"),
    payment_status: PaymentStatusEnum | None = Query(default=None, alias="paymentStatus"),
    schedule_id: int | None = Query(default=None, alias="scheduleId"),
    course_id: int | None = Query(default=None, alias="courseId"),
    user_id: int | None = Query(default=None, alias="userId"),
    pagination=Depends(get_pagination_params),
    service: EnrollmentService = Depends(get_enrollment_service),
) -> Page[EnrollmentRead]:
    """List enrollments, newest first."""
    items, total = await service.list_enrollments(
        status=enrollment_status,
        payment_status=payment_status,
        schedule_id=schedule_id,
        course_id=course_id,
        user_id=user_id,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    serialized = [EnrollmentRead.model_validate(item) for item in items]
    return build_page(serialized, total, pagination)


@router.post("", response_model=EnrollmentRead, status_code=status.HTTP_201_CREATED)
async def create_enrollment(
    payload: EnrollmentCreate,
    service: EnrollmentService = Depends(get_enrollment_service),
) -> EnrollmentRead:
    """Enroll a student by email, optionally into a schedule."""
    enrollment = await service.create_enrollment(payload)
    return EnrollmentRead.model_validate(enrollment)


@router.post(
    "/intake",
    response_model=EnrollmentRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(enforce_intake_rate_limit)],
)
async def create_intake_enrollment(
    payload: EnrollmentIntake,
    service: EnrollmentService = Depends(get_enrollment_service),
) -> EnrollmentRead:
    """Public enrollment form submission."""
    enrollment = await service.create_intake_enrollment(payload.to_create())
    return EnrollmentRead.model_validate(enrollment)


@router.get("/{enrollment_id}", response_model=EnrollmentRead)
async def get_enrollment(
    enrollment_id: int,
    service: EnrollmentService = Depends(get_enrollment_service),
) -> EnrollmentRead:
    enrollment = await service.get_enrollment(enrollment_id)
    return EnrollmentRead.model_validate(enrollment)


@router.put("/{enrollment_id}", response_model=EnrollmentRead)
async def update_enrollment(
    enrollment_id: int,
    payload: EnrollmentUpdate,
    service: EnrollmentService = Depends(get_enrollment_service),
) -> EnrollmentRead:
    """Change status and/or payment status."""
    enrollment = await service.update_enrollment(enrollment_id, payload)
    return EnrollmentRead.model_validate(enrollment)


@router.post("/{enrollment_id}/approve", response_model=EnrollmentRead)
async def approve_enrollment(
    enrollment_id: int,
    service: EnrollmentService = Depends(get_enrollment_service),
) -> EnrollmentRead:
    """Approve a pending enrollment."""
    enrollment = await service.approve_enrollment(enrollment_id)
    return EnrollmentRead.model_validate(enrollment)
