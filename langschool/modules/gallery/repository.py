"""Gallery repository layer."""

from __future__ import annotations

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from langschool.modules.gallery.models import GalleryItem


class GalleryRepository:
    """DB operations for gallery items."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_items(self) -> list[GalleryItem]:
        stmt = select(GalleryItem).order_by(GalleryItem.sort_order.asc(), GalleryItem.id.asc())
        return (await self.session.scalars(stmt)).all()

    async def lock_items(self) -> list[GalleryItem]:
        """Serialize gallery writers for the rest of the transaction.

        The table lock also covers an empty gallery, where there are no rows
        to lock; plain reads are not blocked by it.
        """
        await self.session.execute(text("LOCK TABLE gallery_items IN SHARE ROW EXCLUSIVE MODE"))
        stmt = select(GalleryItem).order_by(GalleryItem.id.asc()).with_for_update()
        return (await self.session.scalars(stmt)).all()

    async def create_item(self, image_url: str, caption: str | None, sort_order: int) -> GalleryItem:
        item = GalleryItem(image_url=image_url, caption=caption, sort_order=sort_order)
        self.session.add(item)
        await self.session.flush()
        return item

    async def delete_item(self, item: GalleryItem) -> None:
        await self.session.delete(item)
        await self.session.flush()

    async def save_all(self, items: list[GalleryItem]) -> list[GalleryItem]:
        await self.session.flush()
        return items
