"""Tests for the accommodations store and the shared store behavior."""

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from maintenance_tracker.errors import NotAuthenticatedError, RemoteError
from maintenance_tracker.remote.base import AuthUser
from maintenance_tracker.remote.local import LocalDataService
from maintenance_tracker.schemas.accommodation import Accommodation, AccommodationCreate, AccommodationUpdate
from maintenance_tracker.services.accommodation_service import AccommodationService
from maintenance_tracker.stores.accommodations import AccommodationsStore

pytestmark = pytest.mark.asyncio

NOW = datetime(2026, 10, 1, tzinfo=timezone.utc)


def make_accommodation(record_id: str, status: str = "active", **overrides) -> Accommodation:
    fields = {
        "id": record_id,
        "code": record_id.upper()[:4],
        "name": f"Villa {record_id}",
        "status": status,
        "created_by": "user-1",
        "created_at": NOW,
        "updated_at": NOW,
    }
    fields.update(overrides)
    return Accommodation(**fields)


@pytest.fixture
def store(remote: LocalDataService) -> AccommodationsStore:
    return AccommodationsStore(AccommodationService(remote))


@pytest.fixture
def fake_service() -> AsyncMock:
    return AsyncMock()


class TestFetch:
    async def test_fetch_all(self, store: AccommodationsStore, accommodation: Accommodation) -> None:
        await store.fetch_all()
        assert store.accommodations == (accommodation,)
        assert store.total_count == 1
        assert store.is_loading is False

    async def test_fetch_by_id_sets_selected(self, store: AccommodationsStore, accommodation: Accommodation) -> None:
        await store.fetch_by_id(accommodation.id)
        assert store.selected == accommodation

    async def test_fetch_by_id_missing_clears_selected(
        self, store: AccommodationsStore, accommodation: Accommodation
    ) -> None:
        await store.fetch_by_id(accommodation.id)
        await store.fetch_by_id("00000000-0000-0000-0000-000000000000")
        assert store.selected is None

    async def test_failure_releases_loading_and_keeps_items(self, fake_service: AsyncMock) -> None:
        store = AccommodationsStore(fake_service)
        fake_service.get_all.return_value = [make_accommodation("a1")]
        await store.fetch_all()

        fake_service.get_all.side_effect = RemoteError("network down")
        with pytest.raises(RemoteError):
            await store.fetch_all()

        assert store.is_loading is False
        assert [a.id for a in store.accommodations] == ["a1"]

    async def test_overlapping_loads(self, fake_service: AsyncMock) -> None:
        gate = asyncio.Event()

        async def slow_get_all():
            await gate.wait()
            return []

        fake_service.get_all.side_effect = slow_get_all
        store = AccommodationsStore(fake_service)

        first = asyncio.create_task(store.fetch_all())
        second = asyncio.create_task(store.fetch_all())
        await asyncio.sleep(0)
        assert store.is_loading is True

        gate.set()
        await asyncio.gather(first, second)
        assert store.is_loading is False


class TestMutations:
    async def test_create_prepends(self, store: AccommodationsStore, accommodation: Accommodation) -> None:
        await store.fetch_all()
        created = await store.create(AccommodationCreate(code="cd2", name="Casa Norte"))
        assert store.total_count == 2
        assert store.accommodations[0] == created
        assert created.code == "CD2"

    async def test_create_does_not_duplicate(self, fake_service: AsyncMock) -> None:
        record = make_accommodation("a1")
        fake_service.get_all.return_value = [record]
        fake_service.create.return_value = record
        store = AccommodationsStore(fake_service)
        await store.fetch_all()

        await store.create(AccommodationCreate(code="a1", name="Villa a1"))

        assert store.total_count == 1

    async def test_create_failure_leaves_state(self, store: AccommodationsStore, test_user: AuthUser) -> None:
        with pytest.raises(NotAuthenticatedError):
            await store.create(AccommodationCreate(code="ab1", name="Villa Sur"))
        assert store.total_count == 0

    async def test_update_replaces_in_place(self, fake_service: AsyncMock) -> None:
        fake_service.get_all.return_value = [make_accommodation("a1"), make_accommodation("a2")]
        store = AccommodationsStore(fake_service)
        await store.fetch_all()
        renamed = make_accommodation("a2", name="Villa Renombrada")
        fake_service.update.return_value = renamed

        await store.update(AccommodationUpdate(id="a2", name="Villa Renombrada"))

        assert [a.id for a in store.accommodations] == ["a1", "a2"]
        assert store.accommodations[1].name == "Villa Renombrada"

    async def test_update_refreshes_selected(self, store: AccommodationsStore, accommodation: Accommodation) -> None:
        await store.fetch_by_id(accommodation.id)
        await store.update(AccommodationUpdate(id=accommodation.id, status="inactive"))
        assert store.selected is not None
        assert store.selected.status == "inactive"

    async def test_update_of_unheld_record_not_added(
        self, store: AccommodationsStore, accommodation: Accommodation
    ) -> None:
        await store.update(AccommodationUpdate(id=accommodation.id, name="Villa Oeste"))
        assert store.total_count == 0

    async def test_remove_clears_selected(self, store: AccommodationsStore, accommodation: Accommodation) -> None:
        await store.fetch_all()
        await store.fetch_by_id(accommodation.id)

        await store.remove(accommodation.id)

        assert store.total_count == 0
        assert store.selected is None

    async def test_remove_keeps_other_selected(self, fake_service: AsyncMock) -> None:
        fake_service.get_all.return_value = [make_accommodation("a1"), make_accommodation("a2")]
        fake_service.get_by_id.return_value = make_accommodation("a1")
        store = AccommodationsStore(fake_service)
        await store.fetch_all()
        await store.fetch_by_id("a1")

        await store.remove("a2")

        assert [a.id for a in store.accommodations] == ["a1"]
        assert store.selected is not None
        assert store.selected.id == "a1"

    async def test_remove_failure_keeps_record(self, fake_service: AsyncMock) -> None:
        fake_service.get_all.return_value = [make_accommodation("a1")]
        fake_service.remove.side_effect = RemoteError("permission denied")
        store = AccommodationsStore(fake_service)
        await store.fetch_all()

        with pytest.raises(RemoteError):
            await store.remove("a1")
        assert store.total_count == 1

    async def test_clear_selected(self, store: AccommodationsStore, accommodation: Accommodation) -> None:
        await store.fetch_by_id(accommodation.id)
        store.clear_selected()
        assert store.selected is None


class TestViews:
    async def test_status_views(self, fake_service: AsyncMock) -> None:
        fake_service.get_all.return_value = [
            make_accommodation("a1"),
            make_accommodation("a2", status="inactive"),
            make_accommodation("a3"),
        ]
        store = AccommodationsStore(fake_service)
        await store.fetch_all()

        assert [a.id for a in store.active_accommodations] == ["a1", "a3"]
        assert [a.id for a in store.inactive_accommodations] == ["a2"]
        assert store.active_count == 2
        assert store.inactive_count == 1
        assert store.total_count == 3
