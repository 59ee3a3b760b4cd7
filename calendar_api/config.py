"""Environment-driven settings for the calendar API."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUE_VALUES


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Settings:
    service_name: str = "calendar-api"
    version: str = "1.0.0"
    log_level: str = "INFO"
    log_file: str | None = None
    seed_sample_data: bool = True
    first_event_id: int = 1
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:3000"])
    bulk_max_events: int = 100
    host: str = "127.0.0.1"
    port: int = 8000


def load_settings() -> Settings:
    """Build settings from the process environment (and ``.env`` if present)."""
    load_dotenv()
    defaults = Settings()
    return Settings(
        log_level=os.getenv("CALENDAR_LOG_LEVEL", defaults.log_level).strip().upper(),
        log_file=os.getenv("CALENDAR_LOG_FILE", "").strip() or None,
        seed_sample_data=_env_bool("CALENDAR_SEED_SAMPLE_DATA", defaults.seed_sample_data),
        first_event_id=_env_int("CALENDAR_FIRST_EVENT_ID", defaults.first_event_id),
        cors_origins=_env_list("CALENDAR_CORS_ORIGINS", defaults.cors_origins),
        bulk_max_events=_env_int("CALENDAR_BULK_MAX_EVENTS", defaults.bulk_max_events),
        host=os.getenv("CALENDAR_HOST", defaults.host),
        port=_env_int("CALENDAR_PORT", defaults.port),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
