"""Pydantic v2 schemas for the login form and session responses."""

from pydantic import BaseModel, EmailStr, Field, field_validator

from maintenance_tracker.schemas.user import UserProfile, UserRole


class LoginRequest(BaseModel):
    """Schema for email/password login."""

    email: EmailStr
    password: str = Field(..., min_length=6)

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class SessionResponse(BaseModel):
    """Who is signed in, as the application shell reports it."""

    is_authenticated: bool
    user_id: str | None = None
    email: str | None = None
    role: UserRole
    display_name: str
    profile: UserProfile | None = None


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str


class LoginPageResponse(BaseModel):
    """What the login entry point tells an anonymous visitor."""

    message: str
    redirect: str
