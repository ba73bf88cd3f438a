"""Enrollment ORM models."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from langschool.core.database import Base, BaseModelMixin, utc_now, value_enum
from langschool.core.enums import EnrollmentSourceEnum, EnrollmentStatusEnum, PaymentStatusEnum

if TYPE_CHECKING:
    from langschool.modules.courses.models import Course
    from langschool.modules.scheduling.models import Schedule
    from langschool.modules.users.models import User


class Enrollment(BaseModelMixin, Base):
    """Student binding to a course and optionally one schedule occurrence."""

    __tablename__ = "enrollments"
    __table_args__ = (
        Index("ix_enrollments_schedule_id_status", "schedule_id", "status"),
        Index("ix_enrollments_enrolled_at_id", "enrolled_at", "id"),
    )

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    schedule_id: Mapped[int | None] = mapped_column(
        ForeignKey("schedules.id", ondelete="RESTRICT"),
        nullable=True,
    )

    status: Mapped[EnrollmentStatusEnum] = mapped_column(
        value_enum(EnrollmentStatusEnum, "enrollment_status_enum"),
        default=EnrollmentStatusEnum.PENDING,
        nullable=False,
        index=True,
    )
    payment_status: Mapped[PaymentStatusEnum] = mapped_column(
        value_enum(PaymentStatusEnum, "payment_status_enum"),
        default=PaymentStatusEnum.UNPAID,
        nullable=False,
        index=True,
    )
    source: Mapped[EnrollmentSourceEnum] = mapped_column(
        value_enum(EnrollmentSourceEnum, "enrollment_source_enum"),
        default=EnrollmentSourceEnum.ADMIN,
        nullable=False,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    enrolled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    user: Mapped["User"] = relationship(back_populates="enrollments")
    course: Mapped["Course"] = relationship(back_populates="enrollments")
    schedule: Mapped["Schedule | None"] = relationship(back_populates="enrollments")
