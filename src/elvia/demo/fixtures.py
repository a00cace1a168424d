"""Fixture data for demo scenarios."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from elvia.contracts.events import ConversationCompleted, ConversationFailed, Event

CATALOG_GRADUATION_DATE = date(2025, 7, 20)


@dataclass(slots=True)
class ScenarioFixtures:
    """Container for fixture data for a scenario."""

    student_id: int
    replies: list[str] = field(default_factory=list)
    graduation_date: date | None = CATALOG_GRADUATION_DATE
    expected: type[Event] = ConversationCompleted


def happy_path() -> ScenarioFixtures:
    return ScenarioFixtures(student_id=1, replies=["Tiempo completo", "Remoto"])


def unknown_preferences() -> ScenarioFixtures:
    return ScenarioFixtures(student_id=2, replies=["no sé", "No se"])


def missing_student() -> ScenarioFixtures:
    return ScenarioFixtures(student_id=999, graduation_date=None, expected=ConversationFailed)


def retry_path() -> ScenarioFixtures:
    return ScenarioFixtures(
        student_id=1,
        replies=["tal vez mañana", "tiempo parcial", "quizás", "híbrido"],
    )


SCENARIOS = {
    "happy": happy_path,
    "unknown": unknown_preferences,
    "missing": missing_student,
    "retry": retry_path,
}
