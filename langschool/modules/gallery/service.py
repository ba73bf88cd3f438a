"""Gallery business logic layer."""

from __future__ import annotations

import logging
from collections import Counter

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from langschool.core.database import get_db_session
from langschool.modules.audit.repository import AuditRepository
from langschool.modules.gallery.models import GalleryItem
from langschool.modules.gallery.repository import GalleryRepository
from langschool.modules.gallery.schemas import GalleryItemCreate
from langschool.shared.exceptions import NotFoundException, ValidationException

logger = logging.getLogger(__name__)


def _by_position(items: list[GalleryItem]) -> list[GalleryItem]:
    return sorted(items, key=lambda item: (item.sort_order, item.id))


class GalleryService:
    """Gallery service keeping sort_order dense and unique."""

    def __init__(self, repository: GalleryRepository, audit_repository: AuditRepository) -> None:
        self.repository = repository
        self.audit_repository = audit_repository

    async def list_items(self) -> list[GalleryItem]:
        return await self.repository.list_items()

    async def create_item(self, payload: GalleryItemCreate) -> GalleryItem:
        """Append item after the current last position."""
        items = await self.repository.lock_items()
        next_position = max((item.sort_order for item in items), default=0) + 1
        item = await self.repository.create_item(
            image_url=payload.image_url.strip(),
            caption=payload.caption,
            sort_order=next_position,
        )
        await self.audit_repository.create_audit_log(
            action="gallery.item.created",
            entity_type="gallery_item",
            entity_id=str(item.id),
            payload={"sort_order": item.sort_order},
        )
        return item

    async def delete_item(self, item_id: int) -> None:
        """Remove item and close the gap it leaves in the ordering."""
        items = await self.repository.lock_items()
        target = next((item for item in items if item.id == item_id), None)
        if target is None:
            raise NotFoundException("Gallery item not found")

        await self.repository.delete_item(target)
        remaining = _by_position([item for item in items if item.id != item_id])
        for position, item in enumerate(remaining, start=1):
            item.sort_order = position
        await self.repository.save_all(remaining)

        await self.audit_repository.create_audit_log(
            action="gallery.item.deleted",
            entity_type="gallery_item",
            entity_id=str(item_id),
            payload={"remaining": len(remaining)},
        )

    async def reorder(self, ordered_ids: list[int]) -> list[GalleryItem]:
        """Assign 1-based positions following ordered_ids.

        ordered_ids must name every gallery item exactly once; otherwise
        nothing is changed.
        """
        duplicates = sorted(item_id for item_id, count in Counter(ordered_ids).items() if count > 1)
        if duplicates:
            raise ValidationException(f"Duplicate gallery ids: {duplicates}")

        items = await self.repository.lock_items()
        by_id = {item.id: item for item in items}
        unknown = sorted(set(ordered_ids) - by_id.keys())
        missing = sorted(by_id.keys() - set(ordered_ids))
        if unknown or missing:
            raise ValidationException(
                f"Reorder must list every gallery item exactly once "
                f"(unknown: {unknown}, missing: {missing})",
            )

        for position, item_id in enumerate(ordered_ids, start=1):
            by_id[item_id].sort_order = position
        await self.repository.save_all(items)

        await self.audit_repository.create_audit_log(
            action="gallery.reordered",
            entity_type="gallery_item",
            entity_id=None,
            payload={"ids": list(ordered_ids)},
        )
        logger.info("Gallery reordered (%s items)", len(ordered_ids))
        return _by_position(items)


async def get_gallery_service(session: AsyncSession = Depends(get_db_session)) -> GalleryService:
    """Dependency provider for gallery service."""
    return GalleryService(GalleryRepository(session), AuditRepository(session))
