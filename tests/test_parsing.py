"""Tests for reply classification."""

from __future__ import annotations

import pytest

from elvia.contracts.types import EmploymentType, WorkModel
from elvia.conversation.parsing import (
    normalize_reply,
    parse_employment_type,
    parse_work_model,
)


def test_normalize_reply_strips_case_and_accents() -> None:
    assert normalize_reply("  No Sé  ") == "no se"
    assert normalize_reply("HÍBRIDO") == "hibrido"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("1", EmploymentType.FULL_TIME),
        ("Tiempo completo por favor", EmploymentType.FULL_TIME),
        ("FULL-TIME", EmploymentType.FULL_TIME),
        ("2", EmploymentType.PART_TIME),
        ("prefiero tiempo parcial", EmploymentType.PART_TIME),
        ("part-time", EmploymentType.PART_TIME),
        ("no sé", EmploymentType.UNKNOWN),
        ("No se", EmploymentType.UNKNOWN),
    ],
)
def test_parse_employment_type(text: str, expected: EmploymentType) -> None:
    assert parse_employment_type(text) is expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("1", WorkModel.REMOTE),
        ("Remoto", WorkModel.REMOTE),
        ("2", WorkModel.ON_SITE),
        ("presencial", WorkModel.ON_SITE),
        ("on-site", WorkModel.ON_SITE),
        ("3", WorkModel.HYBRID),
        ("híbrido", WorkModel.HYBRID),
        ("hibrido", WorkModel.HYBRID),
        ("hybrid", WorkModel.HYBRID),
        ("NO SÉ", WorkModel.UNKNOWN),
    ],
)
def test_parse_work_model(text: str, expected: WorkModel) -> None:
    assert parse_work_model(text) is expected


def test_unrecognised_replies_return_none() -> None:
    assert parse_employment_type("tal vez") is None
    assert parse_work_model("quizás mañana") is None
    assert parse_employment_type("") is None


def test_earlier_rule_wins_on_ambiguous_reply() -> None:
    # Full-time is checked before part-time.
    assert parse_employment_type("2, tiempo completo") is EmploymentType.FULL_TIME
    assert parse_work_model("remoto o presencial") is WorkModel.REMOTE
