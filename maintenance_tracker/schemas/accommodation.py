"""Pydantic v2 schemas for accommodations."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

AccommodationStatus = Literal["active", "inactive"]

# Upper-cased on create; lower case is accepted from forms.
CODE_PATTERN = "^[A-Za-z0-9]+$"

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class AccommodationCreate(BaseModel):
    """Schema for creating a new accommodation."""

    code: str = Field(..., min_length=1, max_length=4, pattern=CODE_PATTERN)
    name: str = Field(..., min_length=3, max_length=100)
    address: str | None = Field(None, max_length=255)
    status: AccommodationStatus = "active"
    notes: str | None = Field(None, max_length=500)


class AccommodationPatch(BaseModel):
    """Partial changes to an accommodation. All fields optional."""

    code: str | None = Field(None, min_length=1, max_length=4, pattern=CODE_PATTERN)
    name: str | None = Field(None, min_length=3, max_length=100)
    address: str | None = Field(None, max_length=255)
    status: AccommodationStatus | None = None
    notes: str | None = Field(None, max_length=500)

    @field_validator("code", "name", "status", mode="before")
    @classmethod
    def _not_null(cls, value: object) -> object:
        if value is None:
            raise ValueError("may not be null")
        return value


class AccommodationUpdate(AccommodationPatch):
    """A patch addressed to one accommodation."""

    id: str


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class Accommodation(BaseModel):
    """Accommodation as stored remotely."""

    id: str
    code: str
    name: str
    address: str | None = None
    status: AccommodationStatus
    notes: str | None = None
    created_by: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AccommodationSummary(BaseModel):
    """The slice of an accommodation embedded in task rows."""

    id: str
    code: str
    name: str
    address: str | None = None


class AccommodationListResponse(BaseModel):
    """List of accommodations with its size."""

    items: list[Accommodation]
    total: int
