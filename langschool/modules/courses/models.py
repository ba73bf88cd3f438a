"""Course ORM models."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from langschool.core.database import Base, BaseModelMixin, value_enum
from langschool.core.enums import CourseLevelEnum

if TYPE_CHECKING:
    from langschool.modules.enrollments.models import Enrollment
    from langschool.modules.scheduling.models import Schedule


class Course(BaseModelMixin, Base):
    """Course offered by the school."""

    __tablename__ = "courses"
    __table_args__ = (
        CheckConstraint("capacity >= 0", name="capacity_non_negative"),
        CheckConstraint("price >= 0", name="price_non_negative"),
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    level: Mapped[CourseLevelEnum] = mapped_column(
        value_enum(CourseLevelEnum, "course_level_enum"),
        nullable=False,
        index=True,
    )
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default="MMK", nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    schedules: Mapped[list["Schedule"]] = relationship(back_populates="course")
    enrollments: Mapped[list["Enrollment"]] = relationship(back_populates="course")
