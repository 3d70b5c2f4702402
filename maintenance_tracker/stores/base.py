"""Local cache of one remote collection, mutated only after the remote confirms."""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Generic, Protocol, TypeVar

logger = logging.getLogger(__name__)


class Identified(Protocol):
    @property
    def id(self) -> str: ...


RecordT = TypeVar("RecordT", bound=Identified)
CreateT = TypeVar("CreateT")
UpdateT = TypeVar("UpdateT")

RecordT_co = TypeVar("RecordT_co", bound=Identified, covariant=True)
CreateT_contra = TypeVar("CreateT_contra", contravariant=True)
UpdateT_contra = TypeVar("UpdateT_contra", contravariant=True)


class Backend(Protocol[RecordT_co, CreateT_contra, UpdateT_contra]):
    """What a store needs from its adapter."""

    async def get_all(self) -> list[RecordT_co]: ...

    async def get_by_id(self, record_id: str) -> RecordT_co | None: ...

    async def create(self, data: CreateT_contra) -> RecordT_co: ...

    async def update(self, data: UpdateT_contra) -> RecordT_co: ...

    async def remove(self, record_id: str) -> None: ...


class ResourceStore(Generic[RecordT, CreateT, UpdateT]):
    """Ordered collection (newest first) plus one optional selected record.

    Every mutation awaits the adapter first and only then touches local
    state, using the returned record as the source of truth. Adapter errors
    propagate unchanged and leave local state as it was.
    """

    def __init__(self, service: Backend[RecordT, CreateT, UpdateT]) -> None:
        self._service = service
        self._items: list[RecordT] = []
        self._selected: RecordT | None = None
        self._loads_in_flight = 0

    # ------------------------------------------------------------------
    # State (read-only from outside)
    # ------------------------------------------------------------------

    @property
    def items(self) -> tuple[RecordT, ...]:
        return tuple(self._items)

    @property
    def selected(self) -> RecordT | None:
        return self._selected

    @property
    def is_loading(self) -> bool:
        return self._loads_in_flight > 0

    @property
    def total_count(self) -> int:
        return len(self._items)

    def filter(self, predicate: Callable[[RecordT], bool]) -> list[RecordT]:
        return [item for item in self._items if predicate(item)]

    def count(self, predicate: Callable[[RecordT], bool]) -> int:
        return sum(1 for item in self._items if predicate(item))

    @contextmanager
    def _loading(self) -> Iterator[None]:
        self._loads_in_flight += 1
        try:
            yield
        finally:
            self._loads_in_flight -= 1

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def fetch_all(self) -> None:
        """Replace the collection with the remote one."""
        with self._loading():
            self._items = list(await self._service.get_all())

    async def fetch_by_id(self, record_id: str) -> None:
        """Point ``selected`` at the remote record (``None`` if it does not exist)."""
        with self._loading():
            self._selected = await self._service.get_by_id(record_id)

    async def create(self, data: CreateT) -> RecordT:
        record = await self._service.create(data)
        self._items = [item for item in self._items if item.id != record.id]
        self._items.insert(0, record)
        return record

    async def update(self, data: UpdateT) -> RecordT:
        record = await self._service.update(data)
        self._replace(record)
        return record

    async def remove(self, record_id: str) -> None:
        await self._service.remove(record_id)
        self._items = [item for item in self._items if item.id != record_id]
        if self._selected is not None and self._selected.id == record_id:
            self._selected = None

    def clear_selected(self) -> None:
        self._selected = None

    def _replace(self, record: RecordT) -> None:
        """Swap in ``record`` where its id sits; position never changes.

        A record this store does not hold is not added: the collection may be
        a filtered subset (e.g. one accommodation's tasks).
        """
        for index, item in enumerate(self._items):
            if item.id == record.id:
                self._items[index] = record
                break
        else:
            logger.debug("%s %s updated remotely but not held locally", type(record).__name__, record.id)
        if self._selected is not None and self._selected.id == record.id:
            self._selected = record
