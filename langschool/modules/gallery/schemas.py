"""Gallery schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class GalleryItemCreate(BaseModel):
    """Gallery item registration payload."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    image_url: str = Field(min_length=1, max_length=1024)
    caption: str | None = Field(default=None, max_length=500)


class GalleryReorderRequest(BaseModel):
    """Complete list of gallery ids in their new display order."""

    ids: list[int]


class GalleryItemRead(BaseModel):
    """Gallery item response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    image_url: str
    caption: str | None
    sort_order: int
    created_at: datetime
    updated_at: datetime
