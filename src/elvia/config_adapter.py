"""Sources the settings layer reads from: the process environment, then a .env file."""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Protocol


class ConfigSource(Protocol):
    def get(self, key: str) -> str | None: ...


class EnvConfigSource:
    def get(self, key: str) -> str | None:
        return os.getenv(key)


def _parse_dotenv_line(raw_line: str) -> tuple[str, str] | None:
    line = raw_line.strip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    key, value = line.split("=", 1)
    key = key.strip().removeprefix("export ").strip()
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        value = value[1:-1]
    return key, value


@dataclass(slots=True)
class DotEnvConfigSource:
    """Values from a ``KEY=value`` file, read once on first lookup.

    A missing file behaves like an empty one.
    """

    path: Path = Path(".env")
    _values: dict[str, str] | None = field(default=None, init=False)

    def get(self, key: str) -> str | None:
        if self._values is None:
            try:
                lines = self.path.read_text(encoding="utf-8").splitlines()
            except FileNotFoundError:
                lines = []
            self._values = dict(filter(None, map(_parse_dotenv_line, lines)))
        return self._values.get(key)


@dataclass(slots=True)
class ConfigAdapter:
    """First source that knows a key wins."""

    sources: tuple[ConfigSource, ...]

    def get(self, key: str, default: str | None = None) -> str | None:
        for source in self.sources:
            value = source.get(key)
            if value is not None:
                return value
        return default
