""" Configuration management for the application."""

from __future__ import annotations

from functools import lru_cache
import os
from pathlib import Path

from elvia.config_adapter import ConfigAdapter, ConfigSource, DotEnvConfigSource, EnvConfigSource


@lru_cache
def _config_adapter() -> ConfigAdapter:
    sources: list[ConfigSource] = [EnvConfigSource()]
    dotenv_path = Path(os.getenv("DOTENV_PATH", ".env"))
    sources.append(DotEnvConfigSource(path=dotenv_path))
    return ConfigAdapter(tuple(sources))


def get_config_value(key: str, default: str | None = None) -> str | None:
    return _config_adapter().get(key, default)


def get_bool(key: str, default: bool) -> bool:
    raw = get_config_value(key)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def get_float(key: str, default: float) -> float:
    raw = get_config_value(key)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be a number, got {raw!r}") from exc
