"""Maintenance Tracker FastAPI application shell.

Run with::

    python -m maintenance_tracker.main

The app holds a single signed-in session for the whole process, like the
browser client it stands in for. It listens on ``HOST`` (loopback by default)
and refuses requests from non-loopback peers.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from maintenance_tracker.api.deps import GuardRedirect, local_clients_only
from maintenance_tracker.api.routes.accommodations import router as accommodations_router
from maintenance_tracker.api.routes.auth import router as auth_router
from maintenance_tracker.api.routes.dashboard import router as dashboard_router
from maintenance_tracker.api.routes.tasks import router as tasks_router
from maintenance_tracker.config import Settings, get_settings
from maintenance_tracker.context import AppContext, build_context
from maintenance_tracker.errors import NotAuthenticatedError, RemoteError
from maintenance_tracker.remote.base import RowNotFound

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    # Root logger so all maintenance_tracker.* loggers reach stderr.
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def _guard_redirect(_request: Request, exc: GuardRedirect) -> RedirectResponse:
    return RedirectResponse(exc.location, status_code=status.HTTP_303_SEE_OTHER)


async def _not_authenticated(_request: Request, exc: NotAuthenticatedError) -> JSONResponse:
    return JSONResponse({"detail": exc.message}, status_code=status.HTTP_401_UNAUTHORIZED)


async def _remote_error(_request: Request, exc: RemoteError) -> JSONResponse:
    if isinstance(exc.__cause__, RowNotFound):
        return JSONResponse({"detail": exc.message}, status_code=status.HTTP_404_NOT_FOUND)
    return JSONResponse({"detail": exc.message}, status_code=status.HTTP_502_BAD_GATEWAY)


def create_app(settings: Settings | None = None, context: AppContext | None = None) -> FastAPI:
    """Build the application.

    Args:
        settings: Configuration; read from the environment when omitted.
            Missing remote credentials abort start-up here.
        context: Prebuilt collaborators (tests). When omitted, the lifespan
            handler builds one from ``settings`` and disposes it on shutdown.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if context is not None:
            yield
            return
        app.state.context = await build_context(settings)
        logger.info("%s %s started (%s backend)", settings.app_name, settings.app_version, settings.data_backend)
        try:
            yield
        finally:
            await app.state.context.aclose()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Maintenance tracking for lodging units: sessions, accommodations, and tasks.",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        dependencies=[Depends(local_clients_only)],
    )
    if context is not None:
        app.state.context = context

    app.add_exception_handler(GuardRedirect, _guard_redirect)  # type: ignore[arg-type]
    app.add_exception_handler(NotAuthenticatedError, _not_authenticated)  # type: ignore[arg-type]
    app.add_exception_handler(RemoteError, _remote_error)  # type: ignore[arg-type]

    # Routers
    app.include_router(auth_router)
    app.include_router(dashboard_router)
    app.include_router(accommodations_router)
    app.include_router(tasks_router)

    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy", "service": settings.app_name}

    return app


if __name__ == "__main__":
    _settings = get_settings()
    uvicorn.run(create_app, factory=True, host=_settings.host, port=_settings.port)
