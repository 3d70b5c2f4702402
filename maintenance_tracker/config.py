"""Application configuration using pydantic-settings."""

import warnings
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_INSECURE_JWT_DEFAULT = "change-me-in-production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "Maintenance Tracker"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"  # development, staging, production
    log_level: str = "INFO"

    # Server. There is one session per process, so the shell is local-only.
    host: str = "127.0.0.1"
    port: int = 8000

    # Remote data service (Supabase-compatible REST API)
    supabase_url: str = ""
    supabase_publishable_key: str = ""
    request_timeout_seconds: float = 10.0

    # Which RemoteDataService backs the stores: supabase, local
    data_backend: str = "supabase"

    # Local backend (SQLAlchemy)
    local_database_url: str = "sqlite+aiosqlite:///./maintenance.db"
    local_jwt_secret_key: str = _INSECURE_JWT_DEFAULT
    local_jwt_algorithm: str = "HS256"
    local_session_expire_minutes: int = 60

    @field_validator("supabase_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @field_validator("data_backend")
    @classmethod
    def _check_backend(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in ("supabase", "local"):
            raise ValueError("DATA_BACKEND must be 'supabase' or 'local'")
        return value

    @model_validator(mode="after")
    def _require_remote_credentials(self) -> "Settings":
        """The remote endpoint and public key are mandatory for the REST backend."""
        if self.data_backend == "supabase" and not (self.supabase_url and self.supabase_publishable_key.strip()):
            raise ValueError(
                "Missing remote service configuration. "
                "Set SUPABASE_URL and SUPABASE_PUBLISHABLE_KEY in the environment or your .env file."
            )
        return self

    @model_validator(mode="after")
    def _validate_secrets(self) -> "Settings":
        """Reject the insecure local JWT secret in production and warn in development."""
        if self.data_backend == "local" and self.local_jwt_secret_key == _INSECURE_JWT_DEFAULT:
            if self.environment == "production":
                raise ValueError(
                    "LOCAL_JWT_SECRET_KEY must be set to a strong random value in production. "
                    'Generate one with: python -c "import secrets; print(secrets.token_urlsafe(64))"'
                )
            warnings.warn(
                "Using default local JWT secret; only acceptable for local development. "
                "Set LOCAL_JWT_SECRET_KEY in your .env file.",
                UserWarning,
                stacklevel=1,
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    return Settings()
