"""Login entry point, logout, and session status."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import RedirectResponse

from maintenance_tracker.api.deps import get_context, get_sessions, login_entry
from maintenance_tracker.auth.guard import safe_redirect_target
from maintenance_tracker.auth.session_manager import SessionManager
from maintenance_tracker.context import AppContext
from maintenance_tracker.errors import RemoteError
from maintenance_tracker.schemas.auth import LoginPageResponse, LoginRequest, SessionResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.get("/login", response_model=LoginPageResponse, dependencies=[Depends(login_entry)])
async def login_page(redirect: str | None = Query(None)) -> LoginPageResponse:
    """Anonymous landing point; authenticated visitors are bounced to ``/``."""
    return LoginPageResponse(message="Sign in to continue", redirect=safe_redirect_target(redirect))


@router.post("/login", status_code=status.HTTP_303_SEE_OTHER)
async def login(
    body: LoginRequest,
    redirect: str | None = Query(None),
    sessions: SessionManager = Depends(get_sessions),
) -> RedirectResponse:
    """Authenticate with email and password, then continue to ``redirect``."""
    try:
        await sessions.login(body.email, body.password)
    except RemoteError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=exc.message) from exc
    return RedirectResponse(safe_redirect_target(redirect), status_code=status.HTTP_303_SEE_OTHER)


@router.post("/logout", status_code=status.HTTP_303_SEE_OTHER)
async def logout(context: AppContext = Depends(get_context)) -> RedirectResponse:
    """End the session and return to the login entry point."""
    await context.sessions.logout()
    context.accommodations.clear_selected()
    context.tasks.clear_selected()
    return RedirectResponse(context.guard.login_path, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/session", response_model=SessionResponse)
async def current_session(sessions: SessionManager = Depends(get_sessions)) -> SessionResponse:
    """Report the current authentication state, restoring it first if needed."""
    await sessions.check_auth()
    user = sessions.user
    return SessionResponse(
        is_authenticated=sessions.is_authenticated,
        user_id=user.id if user else None,
        email=user.email if user else None,
        role=sessions.user_role,
        display_name=sessions.user_display_name,
        profile=sessions.profile,
    )
