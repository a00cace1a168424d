"""Scenario runner for Elvia demos."""

from __future__ import annotations

from dataclasses import dataclass, replace
from time import sleep

from elvia.contracts.events import ConversationStarted, Event, GraduationOccurred
from elvia.demo.fixtures import ScenarioFixtures
from elvia.observability.logging import configure_logging
from elvia.observability.telemetry import setup_tracing
from elvia.orchestrator.notifier import Notifier
from elvia.orchestrator.recorder import RecordingEventBus
from elvia.runtime import build_runtime
from elvia.settings import AppSettings


@dataclass(slots=True)
class ScenarioResult:
    """Result from running a scenario."""

    student_id: int
    events: list[Event]
    state: str | None


def run_scenario(
    fixtures: ScenarioFixtures,
    settings: AppSettings | None = None,
    *,
    notifier: Notifier | None = None,
    setup_observability: bool = True,
    timeout: float = 5.0,
) -> ScenarioResult:
    """Run a scenario end-to-end on worker threads and an in-memory bus."""
    settings = replace(settings or AppSettings(), scheduler_enabled=False)
    if setup_observability:
        configure_logging(settings.log_level, service="elvia-demo")
        setup_tracing("elvia-demo")

    runtime = build_runtime(settings, notifier=notifier)
    runtime.start()
    try:
        if fixtures.graduation_date is not None:
            runtime.trigger.check(fixtures.graduation_date)
        else:
            runtime.bus.publish(GraduationOccurred(student_id=fixtures.student_id))

        if fixtures.replies:
            _wait_for_event(runtime.bus, ConversationStarted, fixtures.student_id, timeout)
            for reply in fixtures.replies:
                runtime.engine.handle_message(fixtures.student_id, reply)

        _wait_for_event(runtime.bus, fixtures.expected, fixtures.student_id, timeout)
        conversation = runtime.engine.get(fixtures.student_id)
        return ScenarioResult(
            student_id=fixtures.student_id,
            events=runtime.bus.events,
            state=conversation.state.value if conversation else None,
        )
    finally:
        runtime.stop()


def _wait_for_event(
    bus: RecordingEventBus, event_cls: type[Event], student_id: int, timeout: float = 5.0
) -> None:
    deadline = timeout / 0.05
    for _ in range(int(deadline)):
        if bus.of_type(event_cls, student_id=student_id):
            return
        sleep(0.05)
    raise TimeoutError(f"Timeout waiting for {event_cls.event_type} (student {student_id})")
