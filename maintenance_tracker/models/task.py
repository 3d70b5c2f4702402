"""Task model: a maintenance job on one accommodation."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from maintenance_tracker.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Task(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "tasks"

    accommodation_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("accommodations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    area_catalog_id: Mapped[str] = mapped_column(String(64), nullable=False)
    element_catalog_id: Mapped[str | None] = mapped_column(String(64), default=None)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    priority: Mapped[str] = mapped_column(String(10), default="medium", nullable=False)  # high, medium, low
    status: Mapped[str] = mapped_column(String(20), default="pending", nullable=False)
    due_date: Mapped[date | None] = mapped_column(default=None)
    estimated_cost: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), default=None)
    repairer_name: Mapped[str | None] = mapped_column(String(255), default=None)
    repair_cost: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), default=None)
    time_spent_days: Mapped[Decimal | None] = mapped_column(Numeric(6, 2), default=None)
    completion_notes: Mapped[str | None] = mapped_column(Text, default=None)
    created_by: Mapped[uuid.UUID] = mapped_column(ForeignKey("auth_users.id"), nullable=False)
    assigned_to: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("auth_users.id"), default=None)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, status={self.status!r}, priority={self.priority!r})>"
