"""Accommodations store."""

from maintenance_tracker.schemas.accommodation import Accommodation, AccommodationCreate, AccommodationUpdate
from maintenance_tracker.stores.base import ResourceStore


class AccommodationsStore(ResourceStore[Accommodation, AccommodationCreate, AccommodationUpdate]):
    """Accommodations, newest first, with status views."""

    @property
    def accommodations(self) -> tuple[Accommodation, ...]:
        return self.items

    @property
    def active_accommodations(self) -> list[Accommodation]:
        return self.filter(lambda a: a.status == "active")

    @property
    def inactive_accommodations(self) -> list[Accommodation]:
        return self.filter(lambda a: a.status == "inactive")

    @property
    def active_count(self) -> int:
        return self.count(lambda a: a.status == "active")

    @property
    def inactive_count(self) -> int:
        return self.count(lambda a: a.status == "inactive")
