"""Contract every remote data backend implements: auth API plus row-level CRUD."""

import inspect
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

# PostgREST error code for "single object requested, zero rows returned"
ROW_NOT_FOUND_CODE = "PGRST116"


class AuthEvent(str, Enum):
    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"


@dataclass(frozen=True)
class AuthUser:
    """The identity a session is bound to."""

    id: str
    email: str | None = None


@dataclass(frozen=True)
class Session:
    """Server-issued proof of authentication."""

    access_token: str
    user: AuthUser
    expires_at: datetime | None = None
    refresh_token: str | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        return (now or datetime.now(timezone.utc)) >= self.expires_at


@dataclass(frozen=True)
class Order:
    column: str
    descending: bool = True


class RemoteServiceError(Exception):
    """Failure reported by a backend, whatever its transport."""

    def __init__(self, message: str, code: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code


class RowNotFound(RemoteServiceError):
    """A single-row lookup matched nothing."""

    def __init__(self, message: str = "No rows returned", status_code: int | None = 406) -> None:
        super().__init__(message, code=ROW_NOT_FOUND_CODE, status_code=status_code)


Row = dict[str, Any]
Filters = Mapping[str, Any]
AuthStateCallback = Callable[[AuthEvent, Session | None], Awaitable[None] | None]


class RemoteDataService(ABC):
    """Auth + data access consumed by the session manager and resource adapters.

    Subclasses hold the current session and call :meth:`_emit` whenever it
    changes so subscribers registered through :meth:`on_auth_state_change`
    see ``SIGNED_IN`` / ``SIGNED_OUT`` / ``TOKEN_REFRESHED``.
    """

    def __init__(self) -> None:
        self._listeners: list[AuthStateCallback] = []

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    @abstractmethod
    async def get_session(self) -> Session | None: ...

    @abstractmethod
    async def get_user(self) -> AuthUser | None: ...

    @abstractmethod
    async def sign_in_with_password(self, email: str, password: str) -> Session: ...

    @abstractmethod
    async def sign_out(self) -> None: ...

    async def on_auth_state_change(self, callback: AuthStateCallback) -> Callable[[], None]:
        """Subscribe to auth events. Returns an unsubscribe function.

        The current session is replayed to the new subscriber as
        ``INITIAL_SESSION`` right away.
        """
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        try:
            session = await self.get_session()
        except RemoteServiceError as exc:
            logger.warning("Could not restore session for new subscriber: %s", exc.message)
            session = None
        await self._notify(callback, AuthEvent.INITIAL_SESSION, session)
        return unsubscribe

    async def _emit(self, event: AuthEvent, session: Session | None) -> None:
        for callback in list(self._listeners):
            await self._notify(callback, event, session)

    @staticmethod
    async def _notify(callback: AuthStateCallback, event: AuthEvent, session: Session | None) -> None:
        try:
            result = callback(event, session)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Auth state subscriber failed on %s", event.value)

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------

    @abstractmethod
    async def select(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: Filters | None = None,
        order: Order | None = None,
    ) -> list[Row]: ...

    @abstractmethod
    async def select_one(self, table: str, filters: Filters, *, columns: str = "*") -> Row:
        """Return exactly one row. Raises :class:`RowNotFound` when nothing matches."""

    @abstractmethod
    async def insert(self, table: str, row: Row, *, columns: str = "*") -> Row: ...

    @abstractmethod
    async def update(self, table: str, filters: Filters, patch: Row, *, columns: str = "*") -> Row: ...

    @abstractmethod
    async def delete(self, table: str, filters: Filters) -> None: ...

    async def aclose(self) -> None:
        """Release network or database resources."""
        return None
