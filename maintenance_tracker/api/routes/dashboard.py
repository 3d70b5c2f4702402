"""Landing page for signed-in users."""

from fastapi import APIRouter, Depends

from maintenance_tracker.api.deps import get_accommodations_store, get_tasks_store, require_auth
from maintenance_tracker.auth.session_manager import SessionManager
from maintenance_tracker.schemas.dashboard import AccommodationCounts, DashboardResponse, TaskCounts
from maintenance_tracker.stores.accommodations import AccommodationsStore
from maintenance_tracker.stores.tasks import TasksStore

router = APIRouter(tags=["dashboard"])


@router.get("/", response_model=DashboardResponse)
async def dashboard(
    sessions: SessionManager = Depends(require_auth),
    accommodations: AccommodationsStore = Depends(get_accommodations_store),
    tasks: TasksStore = Depends(get_tasks_store),
) -> DashboardResponse:
    await accommodations.fetch_all()
    await tasks.fetch_all()
    return DashboardResponse(
        display_name=sessions.user_display_name,
        role=sessions.user_role,
        accommodations=AccommodationCounts(
            total=accommodations.total_count,
            active=accommodations.active_count,
            inactive=accommodations.inactive_count,
        ),
        tasks=TaskCounts(
            total=tasks.total_count,
            pending=tasks.pending_count,
            in_progress=tasks.in_progress_count,
            completed=tasks.completed_count,
            open_high_priority=len(tasks.high_priority_tasks),
        ),
    )
