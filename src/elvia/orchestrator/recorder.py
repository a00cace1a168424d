"""Event recording helper."""

from __future__ import annotations

from collections import deque
from threading import Lock

from elvia.contracts.events import Event
from elvia.orchestrator.event_bus import E, EventBus, Subscription


class RecordingEventBus:
    """Wraps another EventBus and records published events.

    ``max_events`` bounds the history so a long-running service does not
    grow it without limit; ``None`` keeps everything.
    """

    def __init__(self, bus: EventBus, max_events: int | None = None) -> None:
        self.bus = bus
        self._events: deque[Event] = deque(maxlen=max_events)
        self._lock = Lock()

    @property
    def events(self) -> list[Event]:
        with self._lock:
            return list(self._events)

    def publish(self, event: Event) -> None:
        with self._lock:
            self._events.append(event)
        self.bus.publish(event)

    def subscribe(self, event_cls: type[E]) -> Subscription[E]:
        return self.bus.subscribe(event_cls)

    def of_type(self, event_cls: type[E], student_id: int | None = None) -> list[E]:
        return [
            event
            for event in self.events
            if isinstance(event, event_cls)
            and (student_id is None or event.student_id == student_id)
        ]

    def clear(self) -> None:
        with self._lock:
            self._events.clear()
