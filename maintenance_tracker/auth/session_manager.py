"""Authentication state machine over the remote auth API.

States: uninitialized -> checking -> authenticated | unauthenticated, then
back and forth through login, logout, and remote auth events.
``is_initialized`` latches once the first check finishes; ``logout`` resets it
so the next check goes back to the remote.
"""

import asyncio
import logging
from collections.abc import Callable

from maintenance_tracker.errors import RemoteError, get_error_message
from maintenance_tracker.remote.base import AuthEvent, AuthUser, RemoteDataService, RowNotFound, Session
from maintenance_tracker.schemas.user import DEFAULT_ROLE, UserProfile, UserRole

logger = logging.getLogger(__name__)

PROFILES_TABLE = "users"


class SessionManager:
    """Owns the current user and profile for this process."""

    def __init__(self, remote: RemoteDataService) -> None:
        self._remote = remote
        self.user: AuthUser | None = None
        self.profile: UserProfile | None = None
        self.is_loading = False
        self.is_initialized = False
        self._check_in_flight: asyncio.Future[None] | None = None
        self._unsubscribe: Callable[[], None] | None = None

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def user_role(self) -> UserRole:
        return self.profile.role if self.profile is not None else DEFAULT_ROLE

    @property
    def user_display_name(self) -> str:
        if self.profile is not None and self.profile.full_name:
            return self.profile.full_name
        if self.user is not None and self.user.email:
            return self.user.email
        return "Usuario"

    def _clear(self) -> None:
        self.user = None
        self.profile = None

    # ------------------------------------------------------------------
    # Bootstrap
    # ------------------------------------------------------------------

    async def check_auth(self) -> None:
        """Restore an existing remote session once. Never raises.

        Concurrent callers share the same in-flight check.
        """
        if self.is_initialized:
            return
        if self._check_in_flight is None:
            self._check_in_flight = asyncio.ensure_future(self._check_auth())
        await asyncio.shield(self._check_in_flight)

    async def _check_auth(self) -> None:
        try:
            self.is_loading = True
            session = await self._remote.get_session()
            if session is not None:
                self.user = session.user
                await self.fetch_profile()
            else:
                self._clear()
        except Exception as exc:
            logger.error("Error checking auth: %s", get_error_message(exc))
            self._clear()
        finally:
            self.is_loading = False
            self.is_initialized = True
            self._check_in_flight = None

    async def fetch_profile(self) -> None:
        """Load the current user's profile, falling back to a synthesized one. Never raises."""
        user = self.user
        if user is None:
            return

        try:
            row = await self._remote.select_one(PROFILES_TABLE, {"id": user.id})
            profile = UserProfile.model_validate(row)
        except Exception as exc:
            if isinstance(exc, RowNotFound):
                logger.warning("No profile row for user %s, using default profile", user.id)
            else:
                logger.warning("Error fetching profile for user %s: %s", user.id, get_error_message(exc))
            profile = UserProfile.fallback(user.id, user.email)

        # The user may have signed out or changed while the profile was loading.
        if self.user is not None and self.user.id == user.id:
            self.profile = profile

    # ------------------------------------------------------------------
    # Login / logout
    # ------------------------------------------------------------------

    async def login(self, email: str, password: str) -> None:
        """Exchange credentials for a session.

        Raises:
            RemoteError: With the remote's message when the credentials are refused.
        """
        try:
            self.is_loading = True
            session = await self._remote.sign_in_with_password(email, password)
            self.user = session.user
            await self.fetch_profile()
        except Exception as exc:
            message = get_error_message(exc)
            logger.error("Error logging in: %s", message)
            raise RemoteError(message) from exc
        finally:
            self.is_loading = False

    async def logout(self) -> None:
        """End the remote session and forget local state.

        Raises:
            RemoteError: If the remote refuses; local state is kept so the caller can retry.
        """
        try:
            self.is_loading = True
            await self._remote.sign_out()
            self._clear()
            self.is_initialized = False
        except Exception as exc:
            message = get_error_message(exc)
            logger.error("Error logging out: %s", message)
            raise RemoteError(message) from exc
        finally:
            self.is_loading = False

    # ------------------------------------------------------------------
    # Remote auth events
    # ------------------------------------------------------------------

    async def setup_auth_listener(self) -> None:
        """Subscribe to remote auth events. Safe to call more than once."""
        if self._unsubscribe is not None:
            return
        self._unsubscribe = await self._remote.on_auth_state_change(self._on_auth_state_change)

    def teardown_auth_listener(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def _on_auth_state_change(self, event: AuthEvent, session: Session | None) -> None:
        # Until the first check_auth completes, events (including the
        # provider's INITIAL_SESSION replay) are ignored.
        if not self.is_initialized:
            logger.debug("Ignoring %s before auth bootstrap", event.value)
            return

        if event is AuthEvent.SIGNED_IN and session is not None:
            self.user = session.user
            await self.fetch_profile()
        elif event is AuthEvent.SIGNED_OUT:
            self._clear()
