"""Process-wide collaborators, built once at start-up and passed to consumers."""

import logging
from dataclasses import dataclass
from datetime import timedelta

from maintenance_tracker.auth.guard import RouteGuard
from maintenance_tracker.auth.session_manager import SessionManager
from maintenance_tracker.config import Settings
from maintenance_tracker.database import create_engine, create_session_factory, init_models
from maintenance_tracker.remote.base import RemoteDataService
from maintenance_tracker.remote.local import LocalDataService
from maintenance_tracker.remote.supabase import SupabaseClient
from maintenance_tracker.services.accommodation_service import AccommodationService
from maintenance_tracker.services.task_service import TaskService
from maintenance_tracker.stores.accommodations import AccommodationsStore
from maintenance_tracker.stores.tasks import TasksStore

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    remote: RemoteDataService
    sessions: SessionManager
    guard: RouteGuard
    accommodations: AccommodationsStore
    tasks: TasksStore

    @classmethod
    def from_remote(cls, remote: RemoteDataService) -> "AppContext":
        """Wire the session manager, guard, and both stores to ``remote``."""
        sessions = SessionManager(remote)
        return cls(
            remote=remote,
            sessions=sessions,
            guard=RouteGuard(sessions),
            accommodations=AccommodationsStore(AccommodationService(remote)),
            tasks=TasksStore(TaskService(remote)),
        )

    async def start(self) -> None:
        await self.sessions.setup_auth_listener()

    async def aclose(self) -> None:
        self.sessions.teardown_auth_listener()
        await self.remote.aclose()


async def build_remote(settings: Settings) -> RemoteDataService:
    """Instantiate the backend selected by ``settings.data_backend``."""
    if settings.data_backend == "local":
        engine = create_engine(settings.local_database_url, echo=settings.debug)
        await init_models(engine)
        logger.info("Using local data backend at %s", engine.url.render_as_string(hide_password=True))
        return LocalDataService(
            create_session_factory(engine),
            secret_key=settings.local_jwt_secret_key,
            algorithm=settings.local_jwt_algorithm,
            session_ttl=timedelta(minutes=settings.local_session_expire_minutes),
            engine=engine,
        )

    logger.info("Using remote data backend at %s", settings.supabase_url)
    return SupabaseClient(
        settings.supabase_url,
        settings.supabase_publishable_key,
        timeout=settings.request_timeout_seconds,
    )


async def build_context(settings: Settings) -> AppContext:
    context = AppContext.from_remote(await build_remote(settings))
    await context.start()
    return context
