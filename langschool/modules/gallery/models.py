"""Gallery ORM models."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from langschool.core.database import Base, BaseModelMixin


class GalleryItem(BaseModelMixin, Base):
    """Image shown on the school site, ranked by sort_order."""

    __tablename__ = "gallery_items"
    __table_args__ = (
        # Checked at commit so a reorder can permute positions row by row.
        UniqueConstraint(
            "sort_order",
            name="uq_gallery_items_sort_order",
            deferrable=True,
            initially="DEFERRED",
        ),
        CheckConstraint("sort_order >= 1", name="sort_order_positive"),
    )

    image_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    caption: Mapped[str | None] = mapped_column(String(500), nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False)
