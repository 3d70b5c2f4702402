"""Auth accounts and user profiles."""

import uuid

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from maintenance_tracker.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class AuthAccount(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Credentials checked by ``sign_in_with_password``. Never exposed as a data table."""

    __tablename__ = "auth_users"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<AuthAccount id={self.id} email={self.email!r}>"


class User(TimestampMixin, Base):
    """Profile row for an auth account (one-to-one by id)."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("auth_users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    role: Mapped[str] = mapped_column(String(20), default="supervisor", nullable=False)  # supervisor, chief
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    profile_picture_url: Mapped[str | None] = mapped_column(String(512), default=None)

    def __repr__(self) -> str:
        return f"<User id={self.id} full_name={self.full_name!r} role={self.role!r}>"
