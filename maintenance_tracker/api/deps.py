"""Shared API dependencies: single import point for all routers.

The ``AppContext`` built at start-up lives on ``app.state.context``; routers
reach the session manager, guard, and stores through it::

    from maintenance_tracker.api.deps import get_tasks_store, require_auth
"""

import ipaddress

from fastapi import Depends, HTTPException, Request, status

from maintenance_tracker.auth.session_manager import SessionManager
from maintenance_tracker.context import AppContext
from maintenance_tracker.stores.accommodations import AccommodationsStore
from maintenance_tracker.stores.tasks import TasksStore


class GuardRedirect(Exception):
    """Raised by guard dependencies; turned into a redirect response by the app."""

    def __init__(self, location: str) -> None:
        super().__init__(location)
        self.location = location


def local_clients_only(request: Request) -> None:
    """Reject peers outside this machine: the signed-in session is process-wide."""
    host = request.client.host if request.client else None
    try:
        is_local = host is not None and ipaddress.ip_address(host).is_loopback
    except ValueError:
        is_local = False
    if not is_local:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only local clients are served")


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_sessions(context: AppContext = Depends(get_context)) -> SessionManager:
    return context.sessions


def get_accommodations_store(context: AppContext = Depends(get_context)) -> AccommodationsStore:
    return context.accommodations


def get_tasks_store(context: AppContext = Depends(get_context)) -> TasksStore:
    return context.tasks


async def require_auth(request: Request, context: AppContext = Depends(get_context)) -> SessionManager:
    """Guard for protected routes.

    Raises:
        GuardRedirect: To the login entry point, carrying the requested path.
    """
    full_path = request.url.path
    if request.url.query:
        full_path = f"{full_path}?{request.url.query}"
    redirect = await context.guard.check(request.url.path, requires_auth=True, full_path=full_path)
    if redirect is not None:
        raise GuardRedirect(redirect.location)
    return context.sessions


async def login_entry(request: Request, context: AppContext = Depends(get_context)) -> None:
    """Guard for the login page: signed-in users are sent to the landing page."""
    redirect = await context.guard.check(request.url.path, requires_auth=False)
    if redirect is not None:
        raise GuardRedirect(redirect.location)


__all__ = [
    "GuardRedirect",
    "get_accommodations_store",
    "get_context",
    "get_sessions",
    "get_tasks_store",
    "local_clients_only",
    "login_entry",
    "require_auth",
]
