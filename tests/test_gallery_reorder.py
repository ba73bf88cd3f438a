from __future__ import annotations

import random
from dataclasses import dataclass

import pytest
from sqlalchemy import UniqueConstraint

from langschool.modules.gallery.models import GalleryItem
from langschool.modules.gallery.schemas import GalleryItemCreate
from langschool.modules.gallery.service import GalleryService
from langschool.shared.exceptions import NotFoundException, ValidationException


@dataclass
class FakeGalleryItem:
    id: int
    image_url: str
    sort_order: int
    caption: str | None = None


class FakeGalleryRepository:
    def __init__(self, items: list[FakeGalleryItem] | None = None) -> None:
        self.items: list[FakeGalleryItem] = items or []
        self.lock_calls = 0
        self.saves = 0
        self._next_id = max((item.id for item in self.items), default=0) + 1

    async def list_items(self) -> list[FakeGalleryItem]:
        return sorted(self.items, key=lambda item: item.sort_order)

    async def lock_items(self) -> list[FakeGalleryItem]:
        self.lock_calls += 1
        return sorted(self.items, key=lambda item: item.id)

    async def create_item(self, image_url: str, caption: str | None, sort_order: int) -> FakeGalleryItem:
        item = FakeGalleryItem(id=self._next_id, image_url=image_url, caption=caption, sort_order=sort_order)
        self._next_id += 1
        self.items.append(item)
        return item

    async def delete_item(self, item: FakeGalleryItem) -> None:
        self.items.remove(item)

    async def save_all(self, items: list[FakeGalleryItem]) -> list[FakeGalleryItem]:
        self.saves += 1
        return items


class FakeAuditRepository:
    def __init__(self) -> None:
        self.actions: list[str] = []

    async def create_audit_log(self, action: str, entity_type: str, entity_id: str | None, payload: dict) -> None:
        self.actions.append(action)


def _make_items(count: int) -> list[FakeGalleryItem]:
    return [
        FakeGalleryItem(id=index * 10, image_url=f"https://cdn.test/{index}.jpg", sort_order=index)
        for index in range(1, count + 1)
    ]


def _positions(repository: FakeGalleryRepository) -> dict[int, int]:
    return {item.id: item.sort_order for item in repository.items}


@pytest.mark.asyncio
async def test_reorder_assigns_dense_positions_for_any_permutation() -> None:
    rng = random.Random(42)
    for _ in range(20):
        repository = FakeGalleryRepository(_make_items(6))
        service = GalleryService(repository, FakeAuditRepository())
        ordered_ids = [item.id for item in repository.items]
        rng.shuffle(ordered_ids)

        result = await service.reorder(ordered_ids)

        assert [item.id for item in result] == ordered_ids
        assert sorted(item.sort_order for item in repository.items) == [1, 2, 3, 4, 5, 6]
        assert _positions(repository) == {item_id: pos for pos, item_id in enumerate(ordered_ids, start=1)}


@pytest.mark.asyncio
async def test_reorder_with_unknown_id_fails_without_mutation() -> None:
    repository = FakeGalleryRepository(_make_items(3))
    audit = FakeAuditRepository()
    service = GalleryService(repository, audit)
    before = _positions(repository)

    with pytest.raises(ValidationException):
        await service.reorder([30, 20, 999])

    assert _positions(repository) == before
    assert repository.saves == 0
    assert audit.actions == []


@pytest.mark.asyncio
async def test_reorder_with_missing_id_fails_without_mutation() -> None:
    repository = FakeGalleryRepository(_make_items(3))
    service = GalleryService(repository, FakeAuditRepository())
    before = _positions(repository)

    with pytest.raises(ValidationException):
        await service.reorder([30, 10])

    assert _positions(repository) == before


@pytest.mark.asyncio
async def test_reorder_with_duplicate_ids_fails_without_mutation() -> None:
    repository = FakeGalleryRepository(_make_items(3))
    service = GalleryService(repository, FakeAuditRepository())
    before = _positions(repository)

    with pytest.raises(ValidationException):
        await service.reorder([10, 10, 20, 30])

    assert _positions(repository) == before


@pytest.mark.asyncio
async def test_reorder_empty_gallery_with_empty_list() -> None:
    repository = FakeGalleryRepository()
    service = GalleryService(repository, FakeAuditRepository())

    assert await service.reorder([]) == []


@pytest.mark.asyncio
async def test_create_appends_after_last_position() -> None:
    repository = FakeGalleryRepository(_make_items(2))
    audit = FakeAuditRepository()
    service = GalleryService(repository, audit)

    item = await service.create_item(GalleryItemCreate(imageUrl=" https://cdn.test/new.jpg "))

    assert item.sort_order == 3
    assert item.image_url == "https://cdn.test/new.jpg"
    assert repository.lock_calls == 1
    assert audit.actions == ["gallery.item.created"]


@pytest.mark.asyncio
async def test_create_in_empty_gallery_starts_at_one() -> None:
    repository = FakeGalleryRepository()
    service = GalleryService(repository, FakeAuditRepository())

    item = await service.create_item(GalleryItemCreate(image_url="https://cdn.test/first.jpg"))

    assert item.sort_order == 1


@pytest.mark.asyncio
async def test_delete_renumbers_remaining_items() -> None:
    repository = FakeGalleryRepository(_make_items(4))
    audit = FakeAuditRepository()
    service = GalleryService(repository, audit)

    await service.delete_item(20)

    assert _positions(repository) == {10: 1, 30: 2, 40: 3}
    assert audit.actions == ["gallery.item.deleted"]


@pytest.mark.asyncio
async def test_delete_unknown_item_is_not_found() -> None:
    repository = FakeGalleryRepository(_make_items(2))
    service = GalleryService(repository, FakeAuditRepository())

    with pytest.raises(NotFoundException):
        await service.delete_item(999)
    assert _positions(repository) == {10: 1, 20: 2}


def test_sort_order_unique_constraint_is_deferred() -> None:
    constraints = [
        constraint
        for constraint in GalleryItem.__table__.constraints
        if isinstance(constraint, UniqueConstraint)
    ]

    assert len(constraints) == 1
    assert [column.name for column in constraints[0].columns] == ["sort_order"]
    assert constraints[0].deferrable is True
    assert constraints[0].initially == "DEFERRED"
