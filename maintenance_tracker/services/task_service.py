"""Task adapter: attribution, accommodation embedding, and completion stamping."""

from datetime import datetime, timezone
from typing import Any

from maintenance_tracker.schemas.task import Task, TaskCreate, TaskStatus, TaskUpdate
from maintenance_tracker.services.base import NEWEST_FIRST, ResourceService, get_current_user_id, remote_errors

ACCOMMODATION_EMBED = "*, accommodation:accommodations(id, code, name)"
ACCOMMODATION_DETAIL_EMBED = "*, accommodation:accommodations(id, code, name, address)"


def stamp_completion(payload: dict[str, Any]) -> dict[str, Any]:
    """Keep ``completed_at`` set exactly when ``status`` is ``completed``.

    Only touches payloads that carry a status.
    """
    if "status" in payload and payload["status"] is not None:
        if payload["status"] == "completed":
            payload["completed_at"] = datetime.now(timezone.utc).isoformat()
        else:
            payload["completed_at"] = None
    return payload


class TaskService(ResourceService[Task]):
    table = "tasks"
    model = Task
    label = "task"
    columns = ACCOMMODATION_EMBED
    detail_columns = ACCOMMODATION_DETAIL_EMBED

    async def get_by_accommodation(self, accommodation_id: str) -> list[Task]:
        with remote_errors("fetching tasks by accommodation"):
            rows = await self._remote.select(
                self.table,
                columns=self.columns,
                filters={"accommodation_id": accommodation_id},
                order=NEWEST_FIRST,
            )
            return [self._parse(row) for row in rows]

    async def create(self, data: TaskCreate) -> Task:
        user_id = await get_current_user_id(self._remote)
        payload = stamp_completion(data.model_dump(mode="json"))
        payload["created_by"] = user_id
        payload["assigned_to"] = user_id
        return await self._insert(payload)

    async def update(self, data: TaskUpdate) -> Task:
        payload = data.model_dump(mode="json", exclude_unset=True, exclude={"id"})
        return await self._patch(data.id, stamp_completion(payload))

    async def update_status(self, task_id: str, status: TaskStatus) -> Task:
        payload = stamp_completion({"status": status})
        return await self._patch(task_id, payload, action="updating task status")
