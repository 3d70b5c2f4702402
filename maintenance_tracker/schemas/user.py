"""User profile schema."""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict

UserRole = Literal["supervisor", "chief"]

DEFAULT_ROLE: UserRole = "supervisor"


class UserProfile(BaseModel):
    """Profile row from the ``users`` collection, one-to-one with the auth user."""

    id: str
    role: UserRole = DEFAULT_ROLE
    full_name: str
    profile_picture_url: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def fallback(cls, user_id: str, email: str | None) -> "UserProfile":
        """Synthesize a supervisor profile named after the email's local part."""
        now = datetime.now(timezone.utc)
        local_part = (email or "").split("@")[0]
        return cls(
            id=user_id,
            role=DEFAULT_ROLE,
            full_name=local_part or "Usuario",
            profile_picture_url=None,
            created_at=now,
            updated_at=now,
        )
