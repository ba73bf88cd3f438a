"""Scheduling schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from langschool.core.enums import ScheduleStatusEnum


class ScheduleCreate(BaseModel):
    """Create schedule request."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    teacher_id: int | None = None
    start_time: datetime
    end_time: datetime
    timezone: str | None = Field(default=None, max_length=64)
    location: str | None = Field(default=None, max_length=255)
    capacity: int | None = Field(default=None, ge=0)
    status: ScheduleStatusEnum = ScheduleStatusEnum.SCHEDULED


class ScheduleUpdate(BaseModel):
    """Partial schedule update; explicit null clears teacher, location or capacity."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    teacher_id: int | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    timezone: str | None = Field(default=None, max_length=64)
    location: str | None = Field(default=None, max_length=255)
    capacity: int | None = Field(default=None, ge=0)
    status: ScheduleStatusEnum | None = None


class ScheduleRead(BaseModel):
    """Schedule response schema with seat usage."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    course_id: int
    teacher_id: int | None
    start_time: datetime
    end_time: datetime
    timezone: str
    location: str | None
    capacity: int | None
    status: ScheduleStatusEnum
    effective_capacity: int = 0
    enrolled_count: int = 0
    created_at: datetime
    updated_at: datetime
