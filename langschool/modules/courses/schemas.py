"""Course schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from langschool.core.enums import CourseLevelEnum


class CourseCreate(BaseModel):
    """Create course request."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = Field(min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=255)
    description: str | None = None
    level: CourseLevelEnum
    capacity: int = Field(ge=0)
    price: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    currency: str = Field(default="MMK", min_length=3, max_length=3)
    is_active: bool = True


class CourseUpdate(BaseModel):
    """Partial course update."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str | None = Field(default=None, min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=255)
    description: str | None = None
    level: CourseLevelEnum | None = None
    capacity: int | None = Field(default=None, ge=0)
    price: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    is_active: bool | None = None


class CourseRead(BaseModel):
    """Course response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    slug: str
    description: str | None
    level: CourseLevelEnum
    capacity: int
    price: Decimal
    currency: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
