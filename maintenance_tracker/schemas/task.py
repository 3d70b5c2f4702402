"""Pydantic v2 schemas for maintenance tasks."""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from maintenance_tracker.schemas.accommodation import AccommodationSummary

TaskPriority = Literal["high", "medium", "low"]
TaskStatus = Literal["pending", "in_progress", "completed", "cancelled"]

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class TaskCreate(BaseModel):
    """Schema for filing a new task."""

    accommodation_id: str
    area_catalog_id: str = Field(..., min_length=1)
    element_catalog_id: str | None = None
    description: str = Field(..., min_length=1, max_length=1000)
    priority: TaskPriority = "medium"
    status: TaskStatus = "pending"
    due_date: date | None = None
    estimated_cost: Decimal | None = Field(None, ge=0)


class TaskPatch(BaseModel):
    """Partial changes to a task, including the completion report fields."""

    accommodation_id: str | None = None
    area_catalog_id: str | None = Field(None, min_length=1)
    element_catalog_id: str | None = None
    description: str | None = Field(None, min_length=1, max_length=1000)
    priority: TaskPriority | None = None
    status: TaskStatus | None = None
    due_date: date | None = None
    estimated_cost: Decimal | None = Field(None, ge=0)
    repairer_name: str | None = Field(None, max_length=255)
    repair_cost: Decimal | None = Field(None, ge=0)
    time_spent_days: float | None = Field(None, ge=0)
    completion_notes: str | None = None

    @field_validator("accommodation_id", "area_catalog_id", "description", "priority", "status", mode="before")
    @classmethod
    def _not_null(cls, value: object) -> object:
        # Omit a field to leave it unchanged; these columns cannot be cleared.
        if value is None:
            raise ValueError("may not be null")
        return value


class TaskUpdate(TaskPatch):
    """A patch addressed to one task."""

    id: str


class TaskStatusChange(BaseModel):
    status: TaskStatus


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class Task(BaseModel):
    """Task as stored remotely, optionally with its accommodation embedded."""

    id: str
    accommodation_id: str
    area_catalog_id: str
    element_catalog_id: str | None = None
    description: str
    priority: TaskPriority
    status: TaskStatus
    due_date: date | None = None
    estimated_cost: Decimal | None = None
    repairer_name: str | None = None
    repair_cost: Decimal | None = None
    time_spent_days: float | None = None
    completion_notes: str | None = None
    created_by: str
    assigned_to: str | None = None
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None = None
    accommodation: AccommodationSummary | None = None

    model_config = ConfigDict(from_attributes=True)


class TaskListResponse(BaseModel):
    """List of tasks with its size."""

    items: list[Task]
    total: int
