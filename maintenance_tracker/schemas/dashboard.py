"""Landing page summary."""

from pydantic import BaseModel

from maintenance_tracker.schemas.user import UserRole


class AccommodationCounts(BaseModel):
    total: int
    active: int
    inactive: int


class TaskCounts(BaseModel):
    total: int
    pending: int
    in_progress: int
    completed: int
    open_high_priority: int


class DashboardResponse(BaseModel):
    """Counts shown to a signed-in user on the landing page."""

    display_name: str
    role: UserRole
    accommodations: AccommodationCounts
    tasks: TaskCounts
