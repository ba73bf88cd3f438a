"""Gallery API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from langschool.modules.gallery.schemas import (
    GalleryItemCreate,
    GalleryItemRead,
    GalleryReorderRequest,
)
from langschool.modules.gallery.service import GalleryService, get_gallery_service

router = APIRouter(prefix="/gallery", tags=["gallery"])


@router.get("", response_model=list[GalleryItemRead])
async def list_gallery_items(
    service: GalleryService = Depends(get_gallery_service),
) -> list[GalleryItemRead]:
    """List gallery items in display order."""
    items = await service.list_items()
    return [GalleryItemRead.model_validate(item) for item in items]


@router.post("", response_model=GalleryItemRead, status_code=status.HTTP_201_CREATED)
async def create_gallery_item(
    payload: GalleryItemCreate,
    service: GalleryService = Depends(get_gallery_service),
) -> GalleryItemRead:
    item = await service.create_item(payload)
    return GalleryItemRead.model_validate(item)


@router.put("/reorder", response_model=list[GalleryItemRead])
async def reorder_gallery(
    payload: GalleryReorderRequest,
    service: GalleryService = Depends(get_gallery_service),
) -> list[GalleryItemRead]:
    """Rewrite display order from a complete id list."""
    items = await service.reorder(payload.ids)
    return [GalleryItemRead.model_validate(item) for item in items]


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_gallery_item(
    item_id: int,
    service: GalleryService = Depends(get_gallery_service),
) -> Response:
    await service.delete_item(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
