"""Shared enums for Elvia contracts."""

from __future__ import annotations

from enum import Enum


class ConversationState(str, Enum):
    """Stages a graduation conversation moves through."""

    INITIAL = "initial"
    ASKING_EMPLOYMENT_TYPE = "asking_employment_type"
    ASKING_WORK_MODEL = "asking_work_model"
    PROVIDING_JOBS = "providing_jobs"
    COMPLETED = "completed"
    FAILED = "failed"


class EmploymentType(str, Enum):
    """Employment types offered by jobs and collected from students."""

    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    UNKNOWN = "unknown"


class WorkModel(str, Enum):
    """Work models offered by jobs and collected from students."""

    REMOTE = "remote"
    ON_SITE = "on-site"
    HYBRID = "hybrid"
    UNKNOWN = "unknown"


TERMINAL_STATES = frozenset({ConversationState.COMPLETED, ConversationState.FAILED})
