"""Timetable schemas."""

from __future__ import annotations

from datetime import datetime, time

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from langschool.core.enums import CourseLevelEnum, DayOfWeekEnum, TimetableStatusEnum


class TimetableEntryCreate(BaseModel):
    """Create weekly timetable entry request."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    course_name: str = Field(min_length=1, max_length=255)
    level: CourseLevelEnum
    day_of_week: DayOfWeekEnum
    start_time: time
    end_time: time
    teacher_name: str = Field(min_length=1, max_length=255)
    status: TimetableStatusEnum = TimetableStatusEnum.ACTIVE


class TimetableEntryUpdate(BaseModel):
    """Partial timetable entry update."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    course_name: str | None = Field(default=None, min_length=1, max_length=255)
    level: CourseLevelEnum | None = None
    day_of_week: DayOfWeekEnum | None = None
    start_time: time | None = None
    end_time: time | None = None
    teacher_name: str | None = Field(default=None, min_length=1, max_length=255)
    status: TimetableStatusEnum | None = None


class TimetableEntryRead(BaseModel):
    """Timetable entry response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    course_name: str
    level: CourseLevelEnum
    day_of_week: DayOfWeekEnum
    start_time: time
    end_time: time
    teacher_name: str
    status: TimetableStatusEnum
    created_at: datetime
    updated_at: datetime
