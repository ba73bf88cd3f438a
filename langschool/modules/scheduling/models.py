"""Scheduling ORM models."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from langschool.core.database import Base, BaseModelMixin, value_enum
from langschool.core.enums import ScheduleStatusEnum

if TYPE_CHECKING:
    from langschool.modules.courses.models import Course
    from langschool.modules.enrollments.models import Enrollment
    from langschool.modules.users.models import User


class Schedule(BaseModelMixin, Base):
    """Concrete class occurrence of a course."""

    __tablename__ = "schedules"
    __table_args__ = (
        CheckConstraint("end_time > start_time", name="end_after_start"),
        CheckConstraint("capacity IS NULL OR capacity >= 0", name="capacity_non_negative"),
    )

    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    teacher_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    timezone: Mapped[str] = mapped_column(String(64), nullable=False)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    capacity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    status: Mapped[ScheduleStatusEnum] = mapped_column(
        value_enum(ScheduleStatusEnum, "schedule_status_enum"),
        default=ScheduleStatusEnum.SCHEDULED,
        nullable=False,
        index=True,
    )

    course: Mapped["Course"] = relationship(back_populates="schedules")
    teacher: Mapped["User | None"] = relationship(back_populates="teaching_schedules")
    enrollments: Mapped[list["Enrollment"]] = relationship(back_populates="schedule")
