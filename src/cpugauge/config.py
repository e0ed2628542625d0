from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cpugauge.models import CATEGORIES as KNOWN_CATEGORIES


class MonitorSettings(BaseSettings):
    # ─── Sampling ─────────────────────────────────────────────────────────────
    PERIOD_MS: int = 1000
    TRACK_PROCESS: bool = False
    # Comma-separated string, plain env values are not JSON-parsed into tuples.
    CATEGORIES: str = ",".join(KNOWN_CATEGORIES)

    # ─── Logging ──────────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    @field_validator("PERIOD_MS")
    @classmethod
    def positive_period(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("PERIOD_MS must be positive")
        return value

    @field_validator("CATEGORIES")
    @classmethod
    def known_categories(cls, value: str) -> str:
        names = [name.strip() for name in value.split(",") if name.strip()]
        if not names:
            raise ValueError("CATEGORIES must name at least one category")
        unknown = sorted(set(names) - set(KNOWN_CATEGORIES))
        if unknown:
            raise ValueError(f"unknown categories: {', '.join(unknown)}")
        return ",".join(names)

    @field_validator("LOG_LEVEL")
    @classmethod
    def known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level: {value}")
        return level

    @property
    def categories(self) -> tuple[str, ...]:
        return tuple(self.CATEGORIES.split(","))

    model_config = SettingsConfigDict(
        env_prefix="CPUGAUGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> MonitorSettings:
    return MonitorSettings()
