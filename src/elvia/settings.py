"""Centralized application settings for configuration-driven components."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import time
from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from elvia.config import get_bool, get_config_value, get_float
from elvia.registry.data_source import DEFAULT_CATALOG_PATH

NOTIFIER_MODES = ("immediate", "deferred")


def _parse_csv(value: str | None, *, fallback: Iterable[str]) -> list[str]:
    if not value:
        return list(fallback)
    return [item.strip() for item in value.split(",") if item.strip()]


def parse_check_time(value: str) -> time:
    """Parse an ``HH:MM`` wall-clock time."""
    try:
        hours, minutes = value.strip().split(":")
        return time(hour=int(hours), minute=int(minutes))
    except ValueError as exc:
        raise ValueError(f"Invalid check time {value!r}; expected HH:MM") from exc


@dataclass(slots=True)
class AppSettings:
    app_env: str = "dev"
    service_name: str = "elvia-graduation-engagement"
    app_version: str = "1.0.0"
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:3000"])
    timezone: str = "America/Bogota"
    check_time: time = time(hour=9)
    scheduler_enabled: bool = True
    check_on_start: bool = True
    notifier: str = "deferred"
    message_latency_ms: float = 150.0
    catalog_path: Path = DEFAULT_CATALOG_PATH
    event_history: int = 500
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.notifier not in NOTIFIER_MODES:
            raise ValueError(f"Unknown notifier {self.notifier!r}; expected one of {NOTIFIER_MODES}")
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone {self.timezone!r}") from exc

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def cors_allowlist(self) -> list[str]:
        if self.app_env == "dev" and not self.cors_origins:
            return ["*"]
        return self.cors_origins


def load_app_settings() -> AppSettings:
    catalog = get_config_value("ELVIA_CATALOG_PATH")
    return AppSettings(
        app_env=get_config_value("APP_ENV", "dev") or "dev",
        service_name=get_config_value("SERVICE_NAME", "elvia-graduation-engagement")
        or "elvia-graduation-engagement",
        app_version=get_config_value("APP_VERSION", "1.0.0") or "1.0.0",
        cors_origins=_parse_csv(
            get_config_value("CORS_ORIGINS"), fallback=("http://localhost:3000",)
        ),
        timezone=get_config_value("ELVIA_TIMEZONE", "America/Bogota") or "America/Bogota",
        check_time=parse_check_time(get_config_value("ELVIA_CHECK_TIME", "09:00") or "09:00"),
        scheduler_enabled=get_bool("ELVIA_SCHEDULER_ENABLED", True),
        check_on_start=get_bool("ELVIA_CHECK_ON_START", True),
        notifier=(get_config_value("ELVIA_NOTIFIER", "deferred") or "deferred").strip().lower(),
        message_latency_ms=get_float("ELVIA_MESSAGE_LATENCY_MS", 150.0),
        catalog_path=Path(catalog).expanduser() if catalog else DEFAULT_CATALOG_PATH,
        event_history=int(get_float("ELVIA_EVENT_HISTORY", 500)),
        log_level=(get_config_value("LOG_LEVEL", "INFO") or "INFO").upper(),
    )


@lru_cache
def get_app_settings() -> AppSettings:
    return load_app_settings()
