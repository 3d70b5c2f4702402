"""Accommodation model: the lodging units tasks are filed against."""

import uuid

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from maintenance_tracker.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Accommodation(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "accommodations"

    code: Mapped[str] = mapped_column(String(4), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    address: Mapped[str | None] = mapped_column(String(255), default=None)
    status: Mapped[str] = mapped_column(String(20), default="active", nullable=False)  # active, inactive
    notes: Mapped[str | None] = mapped_column(Text, default=None)
    created_by: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("auth_users.id"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Accommodation(id={self.id}, code={self.code!r}, name={self.name!r})>"
