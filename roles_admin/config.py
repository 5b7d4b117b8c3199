"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./roles.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    database_lock_timeout_seconds: float = Field(
        default=5.0,
        description="Seconds to wait for a locked SQLite database before failing",
        gt=0,
    )
    app_timezone: str = Field(
        default="UTC",
        description="Timezone used for audit timestamps (IANA name or UTC±HH:MM)",
    )
    role_search_case_sensitive: bool = Field(
        default=False,
        description="Whether substring filters on roles respect letter case",
    )
    cors_allowed_origins: list[str] = Field(
        default_factory=list,
        description="Origins allowed to call the admin API from a browser",
    )

    @field_validator("database_url")
    @classmethod
    def _strip_database_url(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("DATABASE_URL must not be blank")
        return stripped


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
