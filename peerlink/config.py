"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
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
        default=60,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    app_timezone: str = Field(
        default="UTC",
        description="Timezone used to stamp and compare record timestamps",
    )
    notification_unread_ttl_seconds: int = Field(
        default=7 * 24 * 60 * 60,
        description="Lifetime of an unread notification counted from its creation",
        gt=0,
    )
    notification_read_ttl_seconds: int = Field(
        default=24 * 60 * 60,
        description="Lifetime of a read notification counted from its creation",
        gt=0,
    )
    notification_sweep_interval_seconds: float = Field(
        default=60.0,
        description="Seconds between two runs of the notification expiry sweep",
        gt=0,
    )
    change_feed_initial_backoff_seconds: float = Field(
        default=0.5,
        description="First delay before resubscribing to the notification change feed",
        gt=0,
    )
    change_feed_max_backoff_seconds: float = Field(
        default=30.0,
        description="Upper bound for the change feed resubscription delay",
        gt=0,
    )
    change_feed_max_retries: int = Field(
        default=10,
        description="Consecutive failed subscriptions tolerated before giving up",
        ge=0,
    )
    realtime_acknowledge_errors: bool = Field(
        default=False,
        description="Send a sendMessageFailed frame back to the originating connection",
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Origins allowed to call the API from a browser",
    )

    @model_validator(mode="after")
    def _validate_backoff_bounds(self) -> "Settings":
        if self.change_feed_initial_backoff_seconds > self.change_feed_max_backoff_seconds:
            raise ValueError(
                "CHANGE_FEED_INITIAL_BACKOFF_SECONDS must not exceed CHANGE_FEED_MAX_BACKOFF_SECONDS"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
