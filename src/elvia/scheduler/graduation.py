"""Graduation trigger: finds students graduating on a date and announces them."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
import logging
from threading import Event as ThreadEvent, Lock, Thread
from zoneinfo import ZoneInfo

from elvia.contracts.events import GraduationOccurred
from elvia.contracts.models import SchedulerStatus, Student, utc_now
from elvia.observability.metrics import GRADUATION_CHECK_DURATION, GRADUATIONS_DETECTED
from elvia.observability.telemetry import get_tracer
from elvia.orchestrator.event_bus import EventBus
from elvia.registry.data_source import DataSource

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = ZoneInfo("America/Bogota")


def parse_date(value: date | str | None) -> date | None:
    """Accept a date, an ISO ``YYYY-MM-DD`` string or None."""
    if isinstance(value, datetime):
        return value.date()
    if value is None or isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid date {value!r}; expected YYYY-MM-DD") from exc


@dataclass(slots=True)
class GraduationTrigger:
    """Daily and on-demand scan for graduating students.

    Both the background schedule and manual calls go through ``check``.
    Checking the same date twice publishes the same events again; the
    conversation engine ignores duplicate starts.
    """

    bus: EventBus
    data_source: DataSource
    tz: ZoneInfo = DEFAULT_TIMEZONE
    run_at: time = time(hour=9)
    clock: Callable[[], datetime] = utc_now
    _thread: Thread | None = field(default=None, init=False)
    _stop: ThreadEvent = field(default_factory=ThreadEvent, init=False)
    _lock: Lock = field(default_factory=Lock, init=False)
    _last_check: datetime | None = field(default=None, init=False)

    def today(self) -> date:
        return self.clock().astimezone(self.tz).date()

    def check(self, on: date | str | None = None) -> list[Student]:
        """Publish a GraduationOccurred event per student graduating ``on``.

        ``on`` defaults to today in the configured timezone. Returns the
        qualifying students even if publishing one of the events failed.
        """
        target = parse_date(on) or self.today()
        tracer = get_tracer("elvia.scheduler")
        with tracer.start_as_current_span("graduation.check") as span, GRADUATION_CHECK_DURATION.time():
            span.set_attribute("date", target.isoformat())
            students = self.data_source.find_students_by_graduation_date(target)
            self._last_check = self.clock()
            if not students:
                logger.info("graduation.none", extra={"extra": {"date": target.isoformat()}})
                return []

            logger.info(
                "graduation.found",
                extra={"extra": {"date": target.isoformat(), "count": len(students)}},
            )
            for student in students:
                try:
                    self.bus.publish(GraduationOccurred(student_id=student.id))
                    GRADUATIONS_DETECTED.inc()
                except Exception:  # noqa: BLE001
                    logger.exception(
                        "graduation.publish_failed",
                        extra={"extra": {"student_id": student.id}},
                    )
            span.set_attribute("count", len(students))
        return students

    def next_run(self, now: datetime | None = None) -> datetime:
        """Next wall-clock occurrence of ``run_at`` strictly after ``now``."""
        local = (now or self.clock()).astimezone(self.tz)
        candidate = datetime.combine(local.date(), self.run_at, tzinfo=self.tz)
        if candidate <= local:
            candidate = datetime.combine(local.date() + timedelta(days=1), self.run_at, tzinfo=self.tz)
        return candidate

    # ----- Background schedule -----

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self, check_immediately: bool = True) -> None:
        with self._lock:
            if self.is_running:
                logger.warning("graduation.scheduler_already_running")
                return
            if check_immediately:
                self.check()
            self._stop = ThreadEvent()
            self._thread = Thread(
                target=self.run, args=(self._stop,), name="elvia-graduation", daemon=True
            )
            self._thread.start()
        logger.info(
            "graduation.scheduler_started",
            extra={"extra": {"run_at": self.run_at.isoformat(), "timezone": str(self.tz)}},
        )

    def stop(self, timeout: float = 5.0) -> None:
        with self._lock:
            thread = self._thread
            self._stop.set()
            self._thread = None
        if thread is not None:
            thread.join(timeout=timeout)
            logger.info("graduation.scheduler_stopped")

    def run(self, stop_event: ThreadEvent) -> None:
        """Sleep until each daily run time and check, until stop_event is set."""
        while not stop_event.is_set():
            target = self.next_run()
            delay = (target - self.clock()).total_seconds()
            if stop_event.wait(max(delay, 0.0)):
                return
            if self.clock() < target:
                continue
            try:
                self.check()
            except Exception:  # noqa: BLE001
                logger.exception("graduation.check_failed")

    def status(self) -> SchedulerStatus:
        running = self.is_running
        return SchedulerStatus(
            is_running=running,
            next_run=self.next_run() if running else None,
            last_check=self._last_check,
        )
