"""Application configuration management."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Centralised application settings derived from environment variables."""

    database_url: str = Field(
        default="sqlite:///./data/runcoach.db",
        description="SQLAlchemy-compatible database URL.",
    )
    app_host: str = Field(default="0.0.0.0")
    app_port: int = Field(default=8000, ge=1, le=65535)

    debug: bool = Field(default=False)

    # Goal defaults applied when the athlete leaves a field blank
    default_current_frequency: int = Field(default=3, ge=1, le=14)
    default_longest_recent_run: int = Field(default=30, ge=0)
    default_max_weekday_time: int = Field(default=60, ge=10)
    default_max_weekend_time: int = Field(default=90, ge=10)

    log_level: str = Field(default="INFO")
    log_dir: Path = Field(default=Path("logs"))
    scheduler_day_of_week: str = Field(default="mon")
    scheduler_hour: int = Field(default=6, ge=0, le=23)
    scheduler_minute: int = Field(default=0, ge=0, le=59)
    scheduler_lock_file: Path = Field(default=Path(".scheduler.lock"))

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        valid = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
        upper = value.upper()
        if upper not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(sorted(valid))}")
        return upper

    @field_validator("scheduler_day_of_week")
    @classmethod
    def normalize_day_of_week(cls, value: str) -> str:
        """Accept cron-style day abbreviations only."""

        valid = {"mon", "tue", "wed", "thu", "fri", "sat", "sun"}
        lower = value.strip().lower()[:3]
        if lower not in valid:
            raise ValueError(f"SCHEDULER_DAY_OF_WEEK must be one of {', '.join(sorted(valid))}")
        return lower


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance so it can be reused across the app."""

    settings = Settings()
    settings.log_dir.mkdir(parents=True, exist_ok=True)
    return settings
