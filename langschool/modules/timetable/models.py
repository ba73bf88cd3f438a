"""Timetable ORM models."""

from __future__ import annotations

from datetime import time

from sqlalchemy import CheckConstraint, Index, String, Time
from sqlalchemy.orm import Mapped, mapped_column

from langschool.core.database import Base, BaseModelMixin, value_enum
from langschool.core.enums import CourseLevelEnum, DayOfWeekEnum, TimetableStatusEnum


class TimetableEntry(BaseModelMixin, Base):
    """Recurring weekly class slot as published on the school site."""

    __tablename__ = "timetable_entries"
    __table_args__ = (
        CheckConstraint("end_time > start_time", name="end_after_start"),
        Index("ix_timetable_entries_day_of_week_start_time", "day_of_week", "start_time"),
    )

    course_name: Mapped[str] = mapped_column(String(255), nullable=False)
    level: Mapped[CourseLevelEnum] = mapped_column(
        value_enum(CourseLevelEnum, "course_level_enum"),
        nullable=False,
    )
    day_of_week: Mapped[DayOfWeekEnum] = mapped_column(
        value_enum(DayOfWeekEnum, "day_of_week_enum"),
        nullable=False,
    )
    start_time: Mapped[time] = mapped_column(Time(), nullable=False)
    end_time: Mapped[time] = mapped_column(Time(), nullable=False)
    teacher_name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[TimetableStatusEnum] = mapped_column(
        value_enum(TimetableStatusEnum, "timetable_status_enum"),
        default=TimetableStatusEnum.ACTIVE,
        nullable=False,
        index=True,
    )
