"""Accommodation adapter: attribution and code normalization on create."""

from maintenance_tracker.schemas.accommodation import Accommodation, AccommodationCreate, AccommodationUpdate
from maintenance_tracker.services.base import ResourceService, get_current_user_id


class AccommodationService(ResourceService[Accommodation]):
    table = "accommodations"
    model = Accommodation
    label = "accommodation"

    async def create(self, data: AccommodationCreate) -> Accommodation:
        user_id = await get_current_user_id(self._remote)
        payload = data.model_dump(mode="json")
        payload["code"] = data.code.upper()
        payload["created_by"] = user_id
        return await self._insert(payload)

    async def update(self, data: AccommodationUpdate) -> Accommodation:
        payload = data.model_dump(mode="json", exclude_unset=True, exclude={"id"})
        return await self._patch(data.id, payload)
