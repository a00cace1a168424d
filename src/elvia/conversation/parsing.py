"""Reply classification for conversation prompts.

Matching is case- and accent-insensitive substring search. Rules are tried
in order and the first hit wins, so a reply such as "2, tiempo completo"
resolves to full-time because the full-time rule is checked first.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar
import unicodedata

from elvia.contracts.types import EmploymentType, WorkModel

T = TypeVar("T")

_DONT_KNOW = ("no se",)

EMPLOYMENT_TYPE_RULES: tuple[tuple[EmploymentType, tuple[str, ...]], ...] = (
    (EmploymentType.FULL_TIME, ("1", "completo", "full-time")),
    (EmploymentType.PART_TIME, ("2", "parcial", "part-time")),
    (EmploymentType.UNKNOWN, _DONT_KNOW),
)

WORK_MODEL_RULES: tuple[tuple[WorkModel, tuple[str, ...]], ...] = (
    (WorkModel.REMOTE, ("1", "remoto", "remote")),
    (WorkModel.ON_SITE, ("2", "presencial", "on-site")),
    (WorkModel.HYBRID, ("3", "hibrido", "hybrid")),
    (WorkModel.UNKNOWN, _DONT_KNOW),
)


def normalize_reply(text: str) -> str:
    """Lowercase, trim and strip diacritics ("No Sé" -> "no se")."""
    decomposed = unicodedata.normalize("NFKD", text.strip().lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def classify(text: str, rules: Sequence[tuple[T, tuple[str, ...]]]) -> T | None:
    normalized = normalize_reply(text)
    for value, keywords in rules:
        if any(keyword in normalized for keyword in keywords):
            return value
    return None


def parse_employment_type(text: str) -> EmploymentType | None:
    """Classify a reply to the employment type prompt; None if unparseable."""
    return classify(text, EMPLOYMENT_TYPE_RULES)


def parse_work_model(text: str) -> WorkModel | None:
    """Classify a reply to the work model prompt; None if unparseable."""
    return classify(text, WORK_MODEL_RULES)
