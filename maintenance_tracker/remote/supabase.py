"""Supabase-compatible backend: GoTrue auth + PostgREST data over httpx."""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx

from maintenance_tracker.remote.base import (
    ROW_NOT_FOUND_CODE,
    AuthEvent,
    AuthUser,
    Filters,
    Order,
    RemoteDataService,
    RemoteServiceError,
    Row,
    RowNotFound,
    Session,
)

logger = logging.getLogger(__name__)

_SINGLE_OBJECT = "application/vnd.pgrst.object+json"
_WHITESPACE = re.compile(r"\s+")


def _compact(columns: str) -> str:
    """PostgREST rejects whitespace inside ``select``."""
    return _WHITESPACE.sub("", columns)


def _eq_params(filters: Filters | None) -> dict[str, str]:
    params: dict[str, str] = {}
    for column, value in (filters or {}).items():
        if value is None:
            params[column] = "is.null"
        elif isinstance(value, bool):
            params[column] = f"eq.{str(value).lower()}"
        else:
            params[column] = f"eq.{value}"
    return params


def _error_message(response: httpx.Response) -> tuple[str, str | None]:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}", None
    if not isinstance(body, dict):
        return f"HTTP {response.status_code}", None
    message = body.get("message") or body.get("msg") or body.get("error_description") or body.get("error")
    code = body.get("code") or body.get("error_code")
    return str(message or f"HTTP {response.status_code}"), (str(code) if code is not None else None)


def _parse_user(data: dict[str, Any]) -> AuthUser:
    return AuthUser(id=str(data["id"]), email=data.get("email"))


def _parse_session(data: dict[str, Any]) -> Session:
    expires_at: datetime | None = None
    if data.get("expires_at") is not None:
        expires_at = datetime.fromtimestamp(int(data["expires_at"]), tz=timezone.utc)
    elif data.get("expires_in") is not None:
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=int(data["expires_in"]))
    return Session(
        access_token=data["access_token"],
        refresh_token=data.get("refresh_token"),
        expires_at=expires_at,
        user=_parse_user(data["user"]),
    )


class SupabaseClient(RemoteDataService):
    """Talks to a Supabase project with its public (publishable) key.

    The session lives in memory for the life of the process. An expired
    session is refreshed on the next :meth:`get_session` when a refresh token
    is available.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        *,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__()
        self._api_key = api_key
        self._http = http_client or httpx.AsyncClient(base_url=url.rstrip("/"), timeout=timeout)
        self._session: Session | None = None

    # ------------------------------------------------------------------
    # HTTP plumbing
    # ------------------------------------------------------------------

    def _headers(self, *, single: bool = False, prefer: str | None = None) -> dict[str, str]:
        token = self._session.access_token if self._session else self._api_key
        headers = {"apikey": self._api_key, "Authorization": f"Bearer {token}"}
        if single:
            headers["Accept"] = _SINGLE_OBJECT
        if prefer:
            headers["Prefer"] = prefer
        return headers

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise RemoteServiceError(f"Could not reach remote service: {exc}") from exc

        if response.is_success:
            return response

        message, code = _error_message(response)
        if code == ROW_NOT_FOUND_CODE:
            raise RowNotFound(message, status_code=response.status_code)
        raise RemoteServiceError(message, code=code, status_code=response.status_code)

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteServiceError("Malformed response from remote service") from exc

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    async def get_session(self) -> Session | None:
        session = self._session
        if session is None or not session.is_expired():
            return session

        if not session.refresh_token:
            logger.info("Session for %s expired without refresh token", session.user.id)
            self._session = None
            return None

        try:
            response = await self._request(
                "POST",
                "/auth/v1/token",
                params={"grant_type": "refresh_token"},
                json={"refresh_token": session.refresh_token},
                headers={"apikey": self._api_key},
            )
        except RemoteServiceError as exc:
            if exc.status_code is not None and 400 <= exc.status_code < 500:
                logger.info("Refresh token rejected for %s: %s", session.user.id, exc.message)
                self._session = None
                await self._emit(AuthEvent.SIGNED_OUT, None)
                return None
            raise

        self._session = _parse_session(self._json(response))
        await self._emit(AuthEvent.TOKEN_REFRESHED, self._session)
        return self._session

    async def get_user(self) -> AuthUser | None:
        session = await self.get_session()
        if session is None:
            return None
        try:
            response = await self._request("GET", "/auth/v1/user", headers=self._headers())
        except RemoteServiceError as exc:
            if exc.status_code in (401, 403):
                return None
            raise
        return _parse_user(self._json(response))

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        response = await self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
            headers={"apikey": self._api_key},
        )
        self._session = _parse_session(self._json(response))
        logger.info("Signed in as %s", self._session.user.id)
        await self._emit(AuthEvent.SIGNED_IN, self._session)
        return self._session

    async def sign_out(self) -> None:
        if self._session is not None:
            await self._request("POST", "/auth/v1/logout", headers=self._headers())
            logger.info("Signed out %s", self._session.user.id)
        self._session = None
        await self._emit(AuthEvent.SIGNED_OUT, None)

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------

    async def select(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: Filters | None = None,
        order: Order | None = None,
    ) -> list[Row]:
        params = {"select": _compact(columns), **_eq_params(filters)}
        if order is not None:
            params["order"] = f"{order.column}.{'desc' if order.descending else 'asc'}"
        response = await self._request("GET", f"/rest/v1/{table}", params=params, headers=self._headers())
        return self._json(response) or []

    async def select_one(self, table: str, filters: Filters, *, columns: str = "*") -> Row:
        params = {"select": _compact(columns), **_eq_params(filters)}
        response = await self._request("GET", f"/rest/v1/{table}", params=params, headers=self._headers(single=True))
        return self._json(response)

    async def insert(self, table: str, row: Row, *, columns: str = "*") -> Row:
        response = await self._request(
            "POST",
            f"/rest/v1/{table}",
            params={"select": _compact(columns)},
            json=[row],
            headers=self._headers(single=True, prefer="return=representation"),
        )
        return self._json(response)

    async def update(self, table: str, filters: Filters, patch: Row, *, columns: str = "*") -> Row:
        response = await self._request(
            "PATCH",
            f"/rest/v1/{table}",
            params={"select": _compact(columns), **_eq_params(filters)},
            json=patch,
            headers=self._headers(single=True, prefer="return=representation"),
        )
        return self._json(response)

    async def delete(self, table: str, filters: Filters) -> None:
        await self._request("DELETE", f"/rest/v1/{table}", params=_eq_params(filters), headers=self._headers())

    async def aclose(self) -> None:
        await self._http.aclose()
