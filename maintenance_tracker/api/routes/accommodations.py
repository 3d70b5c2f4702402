"""Accommodation routes over the accommodations store."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from maintenance_tracker.api.deps import get_accommodations_store, get_tasks_store, require_auth
from maintenance_tracker.schemas.accommodation import (
    Accommodation,
    AccommodationCreate,
    AccommodationListResponse,
    AccommodationPatch,
    AccommodationStatus,
    AccommodationUpdate,
)
from maintenance_tracker.schemas.auth import MessageResponse
from maintenance_tracker.schemas.task import TaskListResponse
from maintenance_tracker.stores.accommodations import AccommodationsStore
from maintenance_tracker.stores.tasks import TasksStore

router = APIRouter(prefix="/accommodations", tags=["accommodations"], dependencies=[Depends(require_auth)])


@router.get("", response_model=AccommodationListResponse)
async def list_accommodations(
    status_filter: AccommodationStatus | None = Query(None, alias="status"),
    store: AccommodationsStore = Depends(get_accommodations_store),
) -> AccommodationListResponse:
    """All accommodations, newest first."""
    await store.fetch_all()
    if status_filter == "active":
        items = store.active_accommodations
    elif status_filter == "inactive":
        items = store.inactive_accommodations
    else:
        items = list(store.accommodations)
    return AccommodationListResponse(items=items, total=len(items))


@router.post("", response_model=Accommodation, status_code=status.HTTP_201_CREATED)
async def create_accommodation(
    body: AccommodationCreate,
    store: AccommodationsStore = Depends(get_accommodations_store),
) -> Accommodation:
    return await store.create(body)


@router.get("/{accommodation_id}", response_model=Accommodation)
async def get_accommodation(
    accommodation_id: str,
    store: AccommodationsStore = Depends(get_accommodations_store),
) -> Accommodation:
    await store.fetch_by_id(accommodation_id)
    if store.selected is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Accommodation not found")
    return store.selected


@router.put("/{accommodation_id}", response_model=Accommodation)
async def update_accommodation(
    accommodation_id: str,
    body: AccommodationPatch,
    store: AccommodationsStore = Depends(get_accommodations_store),
) -> Accommodation:
    """Partially update an accommodation. Only explicitly set fields are changed."""
    update = AccommodationUpdate(id=accommodation_id, **body.model_dump(exclude_unset=True))
    return await store.update(update)


@router.delete("/{accommodation_id}", response_model=MessageResponse)
async def delete_accommodation(
    accommodation_id: str,
    store: AccommodationsStore = Depends(get_accommodations_store),
) -> MessageResponse:
    await store.remove(accommodation_id)
    return MessageResponse(message="Accommodation deleted")


@router.get("/{accommodation_id}/tasks", response_model=TaskListResponse)
async def list_accommodation_tasks(
    accommodation_id: str,
    tasks: TasksStore = Depends(get_tasks_store),
) -> TaskListResponse:
    """Tasks filed against one accommodation, newest first."""
    await tasks.fetch_by_accommodation(accommodation_id)
    return TaskListResponse(items=list(tasks.tasks), total=tasks.total_count)
