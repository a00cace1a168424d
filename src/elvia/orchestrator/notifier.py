"""Delivery channel for outbound notifications.

The conversation engine hands every outbound side effect (publishing a
prompt, the results message, the completion event) to a Notifier as a
task. Tasks are delivered in submission order.
"""

from __future__ import annotations

from collections.abc import Callable
import logging
from queue import Queue
from threading import Event as ThreadEvent, Lock, Thread
from typing import Protocol

logger = logging.getLogger(__name__)

Task = Callable[[], None]


class Notifier(Protocol):
    def submit(self, task: Task) -> None:
        """Queue a delivery task."""

    def flush(self, timeout: float | None = None) -> bool:
        """Wait until every submitted task has run."""

    def close(self) -> None:
        """Stop accepting work."""


class ImmediateNotifier:
    """Runs each task inline on the caller's thread."""

    def submit(self, task: Task) -> None:
        task()

    def flush(self, timeout: float | None = None) -> bool:
        return True

    def close(self) -> None:
        return None


class DeferredNotifier:
    """Delivers tasks on one background thread after a simulated latency."""

    def __init__(self, latency_seconds: float = 0.15) -> None:
        self.latency_seconds = latency_seconds
        self._queue: Queue[Task | None] = Queue()
        self._stop = ThreadEvent()
        self._lock = Lock()
        self._thread: Thread | None = None

    def _ensure_started(self) -> None:
        with self._lock:
            if self._thread is None:
                self._thread = Thread(target=self._run, name="elvia-notifier", daemon=True)
                self._thread.start()

    def submit(self, task: Task) -> None:
        if self._stop.is_set():
            raise RuntimeError("Notifier is closed")
        self._ensure_started()
        self._queue.put(task)

    def _run(self) -> None:
        while True:
            task = self._queue.get()
            if task is None:
                return
            if self.latency_seconds > 0:
                self._stop.wait(self.latency_seconds)
            try:
                task()
            except Exception:  # noqa: BLE001
                logger.exception("notifier.task_failed")

    def flush(self, timeout: float | None = None) -> bool:
        if self._thread is None:
            return True
        if self._stop.is_set():
            # Closed: the worker runs what was queued before close, then exits.
            self._thread.join(timeout)
            return not self._thread.is_alive()
        done = ThreadEvent()
        self._queue.put(done.set)
        return done.wait(timeout)

    def close(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._queue.put(None)
            self._thread.join(timeout=5.0)
