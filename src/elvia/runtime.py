"""Wires the bus, catalog, engine and trigger together for one process."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from threading import Event as ThreadEvent, Thread

from elvia.conversation.engine import ConversationEngine
from elvia.orchestrator.event_bus import InMemoryEventBus
from elvia.orchestrator.notifier import DeferredNotifier, ImmediateNotifier, Notifier
from elvia.orchestrator.recorder import RecordingEventBus
from elvia.registry.data_source import DataSource, InMemoryDataSource
from elvia.scheduler.graduation import GraduationTrigger
from elvia.settings import AppSettings, get_app_settings

logger = logging.getLogger(__name__)


def build_notifier(settings: AppSettings) -> Notifier:
    if settings.notifier == "immediate":
        return ImmediateNotifier()
    return DeferredNotifier(latency_seconds=settings.message_latency_ms / 1000.0)


@dataclass(slots=True)
class Runtime:
    """Explicitly constructed service objects shared by the API and CLI."""

    settings: AppSettings
    bus: RecordingEventBus
    data_source: DataSource
    notifier: Notifier
    engine: ConversationEngine
    trigger: GraduationTrigger
    _stop: ThreadEvent = field(default_factory=ThreadEvent, init=False)
    _threads: list[Thread] = field(default_factory=list, init=False)

    def start(self, *, scheduler: bool | None = None) -> None:
        """Start the engine worker and, if enabled, the daily trigger."""
        if self._threads:
            return
        worker = Thread(target=self.engine.run, args=(self._stop,), name="elvia-engine", daemon=True)
        worker.start()
        self._threads.append(worker)
        if self.settings.scheduler_enabled if scheduler is None else scheduler:
            self.trigger.start(check_immediately=self.settings.check_on_start)
        logger.info(
            "runtime.started",
            extra={"extra": {"scheduler": self.trigger.is_running, "notifier": self.settings.notifier}},
        )

    def stop(self) -> None:
        self._stop.set()
        self.trigger.stop()
        for thread in self._threads:
            thread.join(timeout=5.0)
        self._threads.clear()
        self.notifier.close()
        self.engine.close()
        logger.info("runtime.stopped")


def build_runtime(
    settings: AppSettings | None = None,
    *,
    data_source: DataSource | None = None,
    notifier: Notifier | None = None,
) -> Runtime:
    settings = settings or get_app_settings()
    bus = RecordingEventBus(InMemoryEventBus(), max_events=settings.event_history)
    catalog = data_source or InMemoryDataSource.load(settings.catalog_path)
    delivery = notifier or build_notifier(settings)
    engine = ConversationEngine(bus=bus, data_source=catalog, notifier=delivery)
    trigger = GraduationTrigger(
        bus=bus,
        data_source=catalog,
        tz=settings.tz,
        run_at=settings.check_time,
    )
    return Runtime(
        settings=settings,
        bus=bus,
        data_source=catalog,
        notifier=delivery,
        engine=engine,
        trigger=trigger,
    )
