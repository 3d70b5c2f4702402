"""Tasks store: status and priority views, status transitions."""

from maintenance_tracker.schemas.task import Task, TaskCreate, TaskPriority, TaskStatus, TaskUpdate
from maintenance_tracker.services.task_service import TaskService
from maintenance_tracker.stores.base import ResourceStore


class TasksStore(ResourceStore[Task, TaskCreate, TaskUpdate]):
    """Tasks, newest first.

    Priority views leave out completed tasks; status views do not.
    """

    _service: TaskService

    def __init__(self, service: TaskService) -> None:
        super().__init__(service)

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self.items

    def by_status(self, status: TaskStatus) -> list[Task]:
        return self.filter(lambda t: t.status == status)

    def open_by_priority(self, priority: TaskPriority) -> list[Task]:
        return self.filter(lambda t: t.priority == priority and t.status != "completed")

    @property
    def pending_tasks(self) -> list[Task]:
        return self.by_status("pending")

    @property
    def in_progress_tasks(self) -> list[Task]:
        return self.by_status("in_progress")

    @property
    def completed_tasks(self) -> list[Task]:
        return self.by_status("completed")

    @property
    def cancelled_tasks(self) -> list[Task]:
        return self.by_status("cancelled")

    @property
    def high_priority_tasks(self) -> list[Task]:
        return self.open_by_priority("high")

    @property
    def medium_priority_tasks(self) -> list[Task]:
        return self.open_by_priority("medium")

    @property
    def low_priority_tasks(self) -> list[Task]:
        return self.open_by_priority("low")

    @property
    def pending_count(self) -> int:
        return self.count(lambda t: t.status == "pending")

    @property
    def in_progress_count(self) -> int:
        return self.count(lambda t: t.status == "in_progress")

    @property
    def completed_count(self) -> int:
        return self.count(lambda t: t.status == "completed")

    async def fetch_by_accommodation(self, accommodation_id: str) -> None:
        """Replace the collection with one accommodation's tasks."""
        with self._loading():
            self._items = list(await self._service.get_by_accommodation(accommodation_id))

    async def update_status(self, task_id: str, status: TaskStatus) -> Task:
        """Move a task to ``status``; ``completed_at`` follows it."""
        record = await self._service.update_status(task_id, status)
        self._replace(record)
        return record
