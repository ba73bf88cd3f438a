"""Reusable page/per_page pagination helpers."""

from __future__ import annotations

import math
from typing import Generic, TypeVar

from fastapi import Query
from pydantic import BaseModel

T = TypeVar("T")


class PaginationParams(BaseModel):
    """Pagination query params."""

    page: int
    per_page: int

    @property
    def limit(self) -> int:
        return self.per_page

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


def get_pagination_params(
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=20, ge=1, le=100),
) -> PaginationParams:
    """FastAPI dependency for pagination params."""
    return PaginationParams(page=page, per_page=per_page)


class Page(BaseModel, Generic[T]):
    """Generic paginated response."""

    items: list[T]
    total: int
    page: int
    per_page: int
    total_pages: int


def build_page(items: list[T], total: int, params: PaginationParams) -> Page[T]:
    """Build page object from query result and params."""
    return Page(
        items=items,
        total=total,
        page=params.page,
        per_page=params.per_page,
        total_pages=max(1, math.ceil(total / params.per_page)),
    )
