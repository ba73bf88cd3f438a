"""Timetable API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from langschool.core.enums import DayOfWeekEnum, TimetableStatusEnum
from langschool.modules.timetable.schemas import (
    TimetableEntryCreate,
    TimetableEntryRead,
    TimetableEntryUpdate,
)
from langschool.modules.timetable.service import TimetableService, get_timetable_service
from langschool.shared.pagination import Page, build_page, get_pagination_params

router = APIRouter(prefix="/timetable", tags=["timetable"])


@router.get("", response_model=Page[TimetableEntryRead])
async def list_timetable_entries(
    entry_status: TimetableStatusEnum | None = Query(default=None, alias="status"),
    day_of_week: DayOfWeekEnum | None = Query(default=None, alias="dayOfWeek"),
    pagination=Depends(get_pagination_params),
    service: TimetableService = Depends(get_timetable_service),
) -> Page[TimetableEntryRead]:
    """List weekly slots, Monday first, then by start time."""
    items, total = await service.list_entries(
        entry_status,
        day_of_week,
        pagination.limit,
        pagination.offset,
    )
    serialized = [TimetableEntryRead.model_validate(item) for item in items]
    return build_page(serialized, total, pagination)


@router.post("", response_model=TimetableEntryRead, status_code=status.HTTP_201_CREATED)
async def create_timetable_entry(
    payload: TimetableEntryCreate,
    service: TimetableService = Depends(get_timetable_service),
) -> TimetableEntryRead:
    entry = await service.create_entry(payload)
    return TimetableEntryRead.model_validate(entry)


@router.get("/{entry_id}", response_model=TimetableEntryRead)
async def get_timetable_entry(
    entry_id: int,
    service: TimetableService = Depends(get_timetable_service),
) -> TimetableEntryRead:
    entry = await service.get_entry(entry_id)
    return TimetableEntryRead.model_validate(entry)


@router.put("/{entry_id}", response_model=TimetableEntryRead)
async def update_timetable_entry(
    entry_id: int,
    payload: TimetableEntryUpdate,
    service: TimetableService = Depends(get_timetable_service),
) -> TimetableEntryRead:
    entry = await service.update_entry(entry_id, payload)
    return TimetableEntryRead.model_validate(entry)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_timetable_entry(
    entry_id: int,
    service: TimetableService = Depends(get_timetable_service),
) -> Response:
    await service.delete_entry(entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
