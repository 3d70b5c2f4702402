"""Navigation guard: decides whether a path may be entered in the current session."""

from dataclasses import dataclass
from urllib.parse import urlencode

from maintenance_tracker.auth.session_manager import SessionManager

LOGIN_PATH = "/login"
HOME_PATH = "/"


@dataclass(frozen=True)
class Redirect:
    location: str


def safe_redirect_target(target: str | None, default: str = HOME_PATH) -> str:
    """Accept only same-site absolute paths as post-login destinations."""
    if not target or not target.startswith("/") or target.startswith("//"):
        return default
    return target


class RouteGuard:
    """Consulted before every navigation.

    Protected paths trigger a one-time session check when the session manager
    has not been initialized yet; unauthenticated visitors are sent to the
    login entry point with the requested path attached.
    """

    def __init__(
        self,
        sessions: SessionManager,
        *,
        login_path: str = LOGIN_PATH,
        home_path: str = HOME_PATH,
    ) -> None:
        self._sessions = sessions
        self.login_path = login_path
        self.home_path = home_path

    def login_redirect(self, requested: str) -> Redirect:
        query = urlencode({"redirect": requested}, safe="/")
        return Redirect(f"{self.login_path}?{query}")

    async def check(self, path: str, *, requires_auth: bool = True, full_path: str | None = None) -> Redirect | None:
        """Return where to go instead of ``path``, or ``None`` to proceed."""
        if not requires_auth:
            if path == self.login_path and self._sessions.is_authenticated:
                return Redirect(self.home_path)
            return None

        if not self._sessions.is_initialized:
            await self._sessions.check_auth()

        if not self._sessions.is_authenticated:
            return self.login_redirect(full_path or path)
        return None
