"""User ORM models."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from langschool.core.database import Base, BaseModelMixin, value_enum
from langschool.core.enums import RoleEnum, UserStatusEnum

if TYPE_CHECKING:
    from langschool.modules.enrollments.models import Enrollment
    from langschool.modules.scheduling.models import Schedule


class User(BaseModelMixin, Base):
    """School user: staff, teacher or student."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[RoleEnum] = mapped_column(
        value_enum(RoleEnum, "role_enum"),
        default=RoleEnum.STUDENT,
        nullable=False,
        index=True,
    )
    status: Mapped[UserStatusEnum] = mapped_column(
        value_enum(UserStatusEnum, "user_status_enum"),
        default=UserStatusEnum.ACTIVE,
        nullable=False,
    )

    enrollments: Mapped[list["Enrollment"]] = relationship(back_populates="user")
    teaching_schedules: Mapped[list["Schedule"]] = relationship(back_populates="teacher")
