"""User schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from langschool.core.enums import RoleEnum, UserStatusEnum


class UserCreate(BaseModel):
    """Admin user creation request."""

    email: EmailStr
    name: str = Field(min_length=1, max_length=255)
    role: RoleEnum = RoleEnum.STUDENT
    status: UserStatusEnum = UserStatusEnum.ACTIVE


class UserUpdate(BaseModel):
    """Partial user update."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    role: RoleEnum | None = None
    status: UserStatusEnum | None = None


class UserRead(BaseModel):
    """User output schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    role: RoleEnum
    status: UserStatusEnum
    created_at: datetime
    updated_at: datetime
