"""Task routes over the tasks store."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from maintenance_tracker.api.deps import get_tasks_store, require_auth
from maintenance_tracker.schemas.auth import MessageResponse
from maintenance_tracker.schemas.task import (
    Task,
    TaskCreate,
    TaskListResponse,
    TaskPatch,
    TaskPriority,
    TaskStatus,
    TaskStatusChange,
    TaskUpdate,
)
from maintenance_tracker.stores.tasks import TasksStore

router = APIRouter(prefix="/tasks", tags=["tasks"], dependencies=[Depends(require_auth)])


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    status_filter: TaskStatus | None = Query(None, alias="status"),
    priority: TaskPriority | None = Query(None),
    store: TasksStore = Depends(get_tasks_store),
) -> TaskListResponse:
    """All tasks, newest first.

    ``priority`` lists open (not completed) tasks only.
    """
    await store.fetch_all()
    items = list(store.tasks)
    if status_filter is not None:
        items = store.by_status(status_filter)
    if priority is not None:
        items = [t for t in items if t.priority == priority and t.status != "completed"]
    return TaskListResponse(items=items, total=len(items))


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task(body: TaskCreate, store: TasksStore = Depends(get_tasks_store)) -> Task:
    return await store.create(body)


@router.get("/{task_id}", response_model=Task)
async def get_task(task_id: str, store: TasksStore = Depends(get_tasks_store)) -> Task:
    await store.fetch_by_id(task_id)
    if store.selected is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return store.selected


@router.put("/{task_id}", response_model=Task)
async def update_task(task_id: str, body: TaskPatch, store: TasksStore = Depends(get_tasks_store)) -> Task:
    """Partially update a task. Only explicitly set fields are changed."""
    return await store.update(TaskUpdate(id=task_id, **body.model_dump(exclude_unset=True)))


@router.patch("/{task_id}/status", response_model=Task)
async def change_task_status(
    task_id: str,
    body: TaskStatusChange,
    store: TasksStore = Depends(get_tasks_store),
) -> Task:
    return await store.update_status(task_id, body.status)


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(task_id: str, store: TasksStore = Depends(get_tasks_store)) -> MessageResponse:
    await store.remove(task_id)
    return MessageResponse(message="Task deleted")
