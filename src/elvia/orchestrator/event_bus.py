"""Event bus implementations for Elvia."""

from __future__ import annotations

from queue import Empty, Queue
from threading import Lock
from typing import Generic, Protocol, TypeVar

from elvia.contracts.events import Event

E = TypeVar("E", bound=Event)


class Subscription(Generic[E]):
    """FIFO mailbox for one subscriber of one event class."""

    def __init__(self, event_cls: type[E]) -> None:
        self.event_cls = event_cls
        self._queue: Queue[E] = Queue()
        self.closed = False

    def put(self, event: E) -> None:
        if not self.closed:
            self._queue.put(event)

    def next_event(self, timeout: float | None = None) -> E | None:
        """Return the next event or None if timed out."""
        try:
            return self._queue.get(timeout=timeout)
        except Empty:
            return None

    def drain(self) -> list[E]:
        """Return every event already queued without blocking."""
        events: list[E] = []
        while True:
            try:
                events.append(self._queue.get_nowait())
            except Empty:
                return events

    def pending(self) -> int:
        return self._queue.qsize()

    def close(self) -> None:
        self.closed = True


class EventBus(Protocol):
    """Abstract event bus interface."""

    def publish(self, event: Event) -> None:
        """Publish an event to every subscriber of its class."""

    def subscribe(self, event_cls: type[E]) -> Subscription[E]:
        """Register a new subscriber for the given event class."""


class InMemoryEventBus:
    """In-process fan-out bus with one queue per subscription.

    Publishing never blocks; each subscriber drains its own queue in
    publication order.
    """

    def __init__(self) -> None:
        self._subscriptions: dict[type[Event], list[Subscription[Event]]] = {}
        self._lock = Lock()

    def subscribe(self, event_cls: type[E]) -> Subscription[E]:
        subscription: Subscription[E] = Subscription(event_cls)
        with self._lock:
            self._subscriptions.setdefault(event_cls, []).append(subscription)  # type: ignore[arg-type]
        return subscription

    def unsubscribe(self, subscription: Subscription[E]) -> None:
        subscription.close()
        with self._lock:
            subs = self._subscriptions.get(subscription.event_cls, [])
            if subscription in subs:
                subs.remove(subscription)  # type: ignore[arg-type]

    def publish(self, event: Event) -> None:
        with self._lock:
            targets = list(self._subscriptions.get(type(event), ()))
        for subscription in targets:
            subscription.put(event)
