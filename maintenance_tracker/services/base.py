"""Shared plumbing for the per-resource adapters over RemoteDataService."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from maintenance_tracker.errors import NotAuthenticatedError, RemoteError, get_error_message
from maintenance_tracker.remote.base import Order, RemoteDataService, RemoteServiceError, RowNotFound

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)

NEWEST_FIRST = Order("created_at", descending=True)


@contextmanager
def remote_errors(action: str) -> Iterator[None]:
    """Log and normalize any backend failure raised inside the block into :class:`RemoteError`."""
    try:
        yield
    except (RemoteServiceError, ValidationError) as exc:
        message = get_error_message(exc)
        logger.error("Error %s: %s", action, message)
        raise RemoteError(message) from exc


async def get_current_user_id(remote: RemoteDataService) -> str:
    """Return the signed-in user's id or raise :class:`NotAuthenticatedError`."""
    with remote_errors("resolving current user"):
        user = await remote.get_user()
    if user is None:
        raise NotAuthenticatedError()
    return user.id


class ResourceService(Generic[RecordT]):
    """Row-level operations for one collection, returning validated records.

    Subclasses set ``table``, ``model`` and ``label`` and build their own
    create payloads (attribution and normalization differ per resource).
    """

    table: ClassVar[str]
    model: ClassVar[type[BaseModel]]
    label: ClassVar[str]
    columns: ClassVar[str] = "*"
    detail_columns: ClassVar[str | None] = None

    def __init__(self, remote: RemoteDataService) -> None:
        self._remote = remote

    def _parse(self, row: dict[str, Any]) -> RecordT:
        return self.model.model_validate(row)  # type: ignore[return-value]

    async def get_all(self) -> list[RecordT]:
        """All records, newest first."""
        with remote_errors(f"fetching {self.table}"):
            rows = await self._remote.select(self.table, columns=self.columns, order=NEWEST_FIRST)
            return [self._parse(row) for row in rows]

    async def get_by_id(self, record_id: str) -> RecordT | None:
        """One record, or ``None`` when the remote reports no such row."""
        with remote_errors(f"fetching {self.label}"):
            try:
                row = await self._remote.select_one(
                    self.table,
                    {"id": record_id},
                    columns=self.detail_columns or self.columns,
                )
            except RowNotFound:
                return None
            return self._parse(row)

    async def _insert(self, payload: dict[str, Any]) -> RecordT:
        with remote_errors(f"creating {self.label}"):
            row = await self._remote.insert(self.table, payload, columns=self.columns)
            return self._parse(row)

    async def _patch(self, record_id: str, payload: dict[str, Any], action: str | None = None) -> RecordT:
        with remote_errors(action or f"updating {self.label}"):
            row = await self._remote.update(self.table, {"id": record_id}, payload, columns=self.columns)
            return self._parse(row)

    async def remove(self, record_id: str) -> None:
        with remote_errors(f"deleting {self.label}"):
            await self._remote.delete(self.table, {"id": record_id})
