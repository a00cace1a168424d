"""Shared fixtures for Elvia tests."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timedelta, timezone
import os
from pathlib import Path
import sys

import pytest

# Ensure the src layout is importable without an editable install
SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

os.environ.setdefault("ELVIA_DISABLE_TRACING", "1")

from elvia import config as cfg  # noqa: E402
from elvia.conversation.engine import ConversationEngine  # noqa: E402
from elvia.orchestrator.event_bus import InMemoryEventBus  # noqa: E402
from elvia.orchestrator.notifier import ImmediateNotifier  # noqa: E402
from elvia.orchestrator.recorder import RecordingEventBus  # noqa: E402
from elvia.registry.data_source import InMemoryDataSource  # noqa: E402


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now += timedelta(**delta)


@pytest.fixture(autouse=True)
def clear_config_cache(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    # Prevent tests from accidentally reading a real .env file.
    monkeypatch.setenv("DOTENV_PATH", "tests/.env.DO_NOT_USE")
    cfg._config_adapter.cache_clear()
    yield
    cfg._config_adapter.cache_clear()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2025, 7, 20, 14, 0, tzinfo=timezone.utc))


@pytest.fixture
def data_source() -> InMemoryDataSource:
    return InMemoryDataSource.load()


@pytest.fixture
def bus() -> RecordingEventBus:
    return RecordingEventBus(InMemoryEventBus())


@pytest.fixture
def engine(
    bus: RecordingEventBus, data_source: InMemoryDataSource, clock: FrozenClock
) -> Iterator[ConversationEngine]:
    engine = ConversationEngine(
        bus=bus, data_source=data_source, notifier=ImmediateNotifier(), clock=clock
    )
    yield engine
    engine.close()
