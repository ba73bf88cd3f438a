"""Scheduling API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from langschool.modules.scheduling.schemas import ScheduleRead, ScheduleUpdate
from langschool.modules.scheduling.service import SchedulingService, get_scheduling_service

router = APIRouter(prefix="/schedules", tags=["scheduling"])


@router.get("/{schedule_id}", response_model=ScheduleRead)
async def get_schedule(
    schedule_id: int,
    service: SchedulingService = Depends(get_scheduling_service),
) -> ScheduleRead:
    """Return schedule with effective capacity and seats taken."""
    return await service.get_schedule(schedule_id)


@router.put("/{schedule_id}", response_model=ScheduleRead)
async def update_schedule(
    schedule_id: int,
    payload: ScheduleUpdate,
    service: SchedulingService = Depends(get_scheduling_service),
) -> ScheduleRead:
    return await service.update_schedule(schedule_id, payload)
