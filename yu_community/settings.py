"""Settings for the YU Community backend."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_field(default, *env_names: str):
    if env_names:
        alias = AliasChoices(*env_names) if len(env_names) > 1 else env_names[0]
        return Field(default=default, validation_alias=alias)
    return Field(default=default)


class Settings(BaseSettings):
    redis_url: str = _env_field("redis://localhost:6379/0", "REDIS_URL")
    secret_key: str = _env_field("dev-secret-change-me", "SECRET_KEY")
    access_ttl_minutes: int = _env_field(60, "ACCESS_TTL_MINUTES")
    argon2_time_cost: int = _env_field(3, "ARGON2_TIME_COST")
    argon2_memory_cost_kib: int = _env_field(65536, "ARGON2_MEMORY_COST_KIB")
    argon2_parallelism: int = _env_field(4, "ARGON2_PARALLELISM")

    environment: str = _env_field("production", "ENV", "APP_ENV", "ENVIRONMENT")
    obs_enabled: bool = _env_field(True, "OBS_ENABLED")
    obs_log_level: str = _env_field("INFO", "LOG_LEVEL")
    obs_log_sampling_rate_info: float = _env_field(1.0, "LOG_SAMPLING_RATE_INFO")
    service_name: str = _env_field("yu-community-api", "SERVICE_NAME")
    git_commit: str = _env_field("unknown", "GIT_COMMIT", "COMMIT_SHA", "SOURCE_VERSION")

    # Lifecycle transitions are mirrored to Redis streams for downstream consumers
    lifecycle_streams_enabled: bool = _env_field(True, "LIFECYCLE_STREAMS_ENABLED")
    lifecycle_stream_maxlen: int = _env_field(10000, "LIFECYCLE_STREAM_MAXLEN")

    # Upcoming event reminders
    reminders_enabled: bool = _env_field(False, "REMINDERS_ENABLED")
    reminder_window_hours: int = _env_field(24, "REMINDER_WINDOW_HOURS")
    reminder_poll_seconds: float = _env_field(300.0, "REMINDER_POLL_SECONDS")
    reminder_dedupe_ttl_seconds: int = _env_field(7 * 24 * 3600, "REMINDER_DEDUPE_TTL_SECONDS")

    # Day boundaries for "events on date" lookups
    calendar_timezone: str = _env_field("UTC", "CALENDAR_TIMEZONE")

    seed_demo_data: bool = _env_field(True, "SEED_DEMO_DATA")
    cors_allow_origins: Any = _env_field((), "CORS_ALLOW_ORIGINS")

    # Environment helpers
    def is_prod(self) -> bool:
        return self.environment.lower() in ("prod", "production", "live")

    def is_dev(self) -> bool:
        return self.environment.lower() in ("dev", "development")

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        case_sensitive=False,
        env_nested_delimiter="__",
    )

    @field_validator("cors_allow_origins", mode="before")
    def _split_cors(cls, value):  # type: ignore[override]
        if value in (None, ""):
            return ()
        if isinstance(value, str):
            return tuple(part.strip() for part in value.split(",") if part.strip())
        if isinstance(value, (list, tuple, set)):
            return tuple(str(item).strip() for item in value if str(item).strip())
        return ()


def _normalise_level(level: str) -> str:
    return level.upper()


settings = Settings()
settings.obs_log_level = _normalise_level(settings.obs_log_level)
