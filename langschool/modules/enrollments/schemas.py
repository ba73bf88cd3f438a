"""Enrollment schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from langschool.core.enums import EnrollmentSourceEnum, EnrollmentStatusEnum, PaymentStatusEnum


class EnrollmentCreate(BaseModel):
    """Admin enrollment request.

    The email is validated by the service so that malformed addresses are
    reported the same way for every entry point.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_email: str = Field(max_length=255)
    user_name: str | None = Field(default=None, max_length=255)
    course_id: int = Field(ge=1)
    schedule_id: int | None = Field(default=None, ge=1)
    notes: str | None = Field(default=None, max_length=2000)
    source: EnrollmentSourceEnum = EnrollmentSourceEnum.ADMIN


class EnrollmentIntake(BaseModel):
    """Public enrollment request submitted from the website or a form."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_email: str = Field(max_length=255)
    user_name: str | None = Field(default=None, max_length=255)
    course_id: int = Field(ge=1)
    schedule_id: int | None = Field(default=None, ge=1)
    notes: str | None = Field(default=None, max_length=2000)
    source: Literal[EnrollmentSourceEnum.WEBSITE, EnrollmentSourceEnum.FORM] = (
        EnrollmentSourceEnum.WEBSITE
    )

    def to_create(self) -> EnrollmentCreate:
        return EnrollmentCreate(**self.model_dump())


class EnrollmentUpdate(BaseModel):
    """Status and/or payment status change."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: EnrollmentStatusEnum | None = None
    payment_status: PaymentStatusEnum | None = None


class EnrollmentRead(BaseModel):
    """Enrollment response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    course_id: int
    schedule_id: int | None
    status: EnrollmentStatusEnum
    payment_status: PaymentStatusEnum
    source: EnrollmentSourceEnum
    notes: str | None
    enrolled_at: datetime
    approved_at: datetime | None
    cancelled_at: datetime | None
    created_at: datetime
    updated_at: datetime
