"""Courses API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from langschool.core.enums import CourseLevelEnum
from langschool.modules.courses.schemas import CourseCreate, CourseRead, CourseUpdate
from langschool.modules.courses.service import CoursesService, get_courses_service
from langschool.modules.scheduling.schemas import ScheduleCreate, ScheduleRead
from langschool.modules.scheduling.service import SchedulingService, get_scheduling_service
from langschool.shared.pagination import Page, build_page, get_pagination_params

router = APIRouter(prefix="/courses", tags=["courses"])


@router.get("", response_model=Page[CourseRead])
async def list_courses(
    q: str | None = Query(default=None, max_length=255),
    level: CourseLevelEnum | None = Query(default=None),
    is_active: bool | None = Query(default=None),
    pagination=Depends(get_pagination_params),
    service: CoursesService = Depends(get_courses_service),
) -> Page[CourseRead]:
    """List course catalogue."""
    items, total = await service.list_courses(q, level, is_active, pagination.limit, pagination.offset)
    serialized = [CourseRead.model_validate(item) for item in items]
    return build_page(serialized, total, pagination)


@router.post("", response_model=CourseRead, status_code=status.HTTP_201_CREATED)
async def create_course(
    payload: CourseCreate,
    service: CoursesService = Depends(get_courses_service),
) -> CourseRead:
    course = await service.create_course(payload)
    return CourseRead.model_validate(course)


@router.get("/{course_id}", response_model=CourseRead)
async def get_course(
    course_id: int,
    service: CoursesService = Depends(get_courses_service),
) -> CourseRead:
    course = await service.get_course(course_id)
    return CourseRead.model_validate(course)


@router.put("/{course_id}", response_model=CourseRead)
async def update_course(
    course_id: int,
    payload: CourseUpdate,
    service: CoursesService = Depends(get_courses_service),
) -> CourseRead:
    course = await service.update_course(course_id, payload)
    return CourseRead.model_validate(course)


@router.get("/{course_id}/schedules", response_model=list[ScheduleRead])
async def list_course_schedules(
    course_id: int,
    service: SchedulingService = Depends(get_scheduling_service),
) -> list[ScheduleRead]:
    """List schedule occurrences of a course with seat usage."""
    return await service.list_course_schedules(course_id)


@router.post(
    "/{course_id}/schedules",
    response_model=ScheduleRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_course_schedule(
    course_id: int,
    payload: ScheduleCreate,
    service: SchedulingService = Depends(get_scheduling_service),
) -> ScheduleRead:
    """Create schedule occurrence for a course."""
    return await service.create_schedule(course_id, payload)
