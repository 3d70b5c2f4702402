"""Tests for the task adapter and completion stamping."""

from decimal import Decimal

import pytest

from maintenance_tracker.errors import NotAuthenticatedError, RemoteError
from maintenance_tracker.remote.base import AuthUser
from maintenance_tracker.remote.local import LocalDataService
from maintenance_tracker.schemas.accommodation import Accommodation
from maintenance_tracker.schemas.task import TaskCreate, TaskUpdate
from maintenance_tracker.services.task_service import TaskService, stamp_completion


class TestStampCompletion:
    def test_completed_sets_timestamp(self):
        payload = stamp_completion({"status": "completed"})
        assert payload["completed_at"] is not None

    @pytest.mark.parametrize("status", ["pending", "in_progress", "cancelled"])
    def test_other_status_clears_timestamp(self, status):
        payload = stamp_completion({"status": status, "completed_at": "2026-01-01T00:00:00+00:00"})
        assert payload["completed_at"] is None

    def test_without_status_untouched(self):
        assert stamp_completion({"description": "x"}) == {"description": "x"}


class TestCreate:
    async def test_defaults_and_attribution(self, remote: LocalDataService, signed_in: AuthUser, task_data) -> None:
        task = await TaskService(remote).create(task_data())
        assert task.status == "pending"
        assert task.priority == "medium"
        assert task.completed_at is None
        assert task.created_by == signed_in.id
        assert task.assigned_to == signed_in.id

    async def test_accommodation_embedded(self, remote: LocalDataService, accommodation: Accommodation, task_data) -> None:
        task = await TaskService(remote).create(task_data())
        assert task.accommodation is not None
        assert task.accommodation.code == "AB1"
        assert task.accommodation.name == "Villa Sur"

    async def test_created_completed_is_stamped(self, remote: LocalDataService, task_data) -> None:
        task = await TaskService(remote).create(task_data(status="completed"))
        assert task.completed_at is not None

    async def test_money_and_dates(self, remote: LocalDataService, task_data) -> None:
        task = await TaskService(remote).create(task_data(estimated_cost="45.50", due_date="2026-11-02"))
        assert task.estimated_cost == Decimal("45.5")
        assert task.due_date.isoformat() == "2026-11-02"  # type: ignore[union-attr]

    async def test_requires_signed_in_user(
        self, remote: LocalDataService, accommodation: Accommodation, task_data
    ) -> None:
        await remote.sign_out()
        with pytest.raises(NotAuthenticatedError):
            await TaskService(remote).create(task_data())

    async def test_unknown_accommodation(self, remote: LocalDataService, signed_in: AuthUser) -> None:
        data = TaskCreate(
            accommodation_id="00000000-0000-0000-0000-000000000000",
            area_catalog_id="kitchen",
            description="Oven",
        )
        with pytest.raises(RemoteError):
            await TaskService(remote).create(data)


class TestRead:
    async def test_detail_includes_address(self, remote: LocalDataService, task_data) -> None:
        service = TaskService(remote)
        created = await service.create(task_data())
        task = await service.get_by_id(created.id)
        assert task is not None
        assert task.accommodation is not None
        assert task.accommodation.address == "Calle Mayor 1"

    async def test_list_embed_has_no_address(self, remote: LocalDataService, task_data) -> None:
        service = TaskService(remote)
        await service.create(task_data())
        tasks = await service.get_all()
        assert tasks[0].accommodation is not None
        assert tasks[0].accommodation.address is None

    async def test_get_by_accommodation(
        self, remote: LocalDataService, signed_in: AuthUser, accommodation: Accommodation, task_data
    ) -> None:
        service = TaskService(remote)
        other = await remote.insert(
            "accommodations", {"code": "ZZ9", "name": "Casa Norte", "status": "active", "created_by": signed_in.id}
        )
        mine = await service.create(task_data())
        await service.create(task_data(accommodation_id=other["id"]))

        tasks = await service.get_by_accommodation(accommodation.id)
        assert [t.id for t in tasks] == [mine.id]


class TestStatusChanges:
    async def test_update_status_round_trip(self, remote: LocalDataService, task_data) -> None:
        service = TaskService(remote)
        task = await service.create(task_data())

        completed = await service.update_status(task.id, "completed")
        assert completed.status == "completed"
        assert completed.completed_at is not None

        reopened = await service.update_status(task.id, "pending")
        assert reopened.status == "pending"
        assert reopened.completed_at is None

    async def test_update_with_status_stamps(self, remote: LocalDataService, task_data) -> None:
        service = TaskService(remote)
        task = await service.create(task_data())
        updated = await service.update(
            TaskUpdate(id=task.id, status="completed", repairer_name="Luis", repair_cost="80")
        )
        assert updated.completed_at is not None
        assert updated.repairer_name == "Luis"
        assert updated.repair_cost == Decimal("80")

    async def test_update_without_status_keeps_timestamp(self, remote: LocalDataService, task_data) -> None:
        service = TaskService(remote)
        task = await service.create(task_data(status="completed"))
        updated = await service.update(TaskUpdate(id=task.id, completion_notes="Replaced washer"))
        assert updated.completed_at == task.completed_at
        assert updated.completion_notes == "Replaced washer"

    @pytest.mark.parametrize("field", ["status", "priority", "description", "area_catalog_id", "accommodation_id"])
    def test_required_columns_cannot_be_nulled(self, field: str) -> None:
        with pytest.raises(ValueError, match="may not be null"):
            TaskUpdate(id="t1", **{field: None})

    def test_report_fields_may_be_nulled(self) -> None:
        update = TaskUpdate(id="t1", repair_cost=None, due_date=None, element_catalog_id=None)
        assert update.model_dump(exclude_unset=True) == {
            "id": "t1",
            "repair_cost": None,
            "due_date": None,
            "element_catalog_id": None,
        }

    async def test_update_status_missing_task(self, remote: LocalDataService, signed_in: AuthUser) -> None:
        with pytest.raises(RemoteError):
            await TaskService(remote).update_status("00000000-0000-0000-0000-000000000000", "completed")
