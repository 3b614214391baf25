"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        description="Secret key for signing JWT tokens", min_length=1
    )
    access_token_expire_minutes: int = Field(
        default=60 * 24,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    app_timezone: str = Field(
        default="UTC",
        description="IANA timezone name used for timestamps; unknown names fall back to UTC",
    )
    privileged_roles: str = Field(
        default="admin",
        description="Comma separated roles allowed to see and manage every notification",
    )
    broadcast_visibility: Literal["all", "privileged"] = Field(
        default="all",
        description=(
            "Who can see broadcast notifications: every user (read-only) or only "
            "privileged users"
        ),
    )
    notifications_default_page_size: int = Field(default=20, gt=0)
    notifications_max_page_size: int = Field(default=100, gt=0)
    log_level: str = Field(default="INFO")
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma separated origins allowed to call the API from a browser",
    )

    @property
    def privileged_role_set(self) -> frozenset[str]:
        """Return the normalized set of privileged role aliases."""

        return frozenset(
            role.strip().lower() for role in self.privileged_roles.split(",") if role.strip()
        )

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


__all__ = ["Settings", "get_settings"]
