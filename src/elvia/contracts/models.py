"""Domain models for graduation outreach conversations."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

from elvia.contracts.types import ConversationState, EmploymentType, WorkModel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Student(BaseModel):
    """Graduating student as exposed by the data source."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    phone: str
    graduation_date: date
    title: str
    institution: str


class Job(BaseModel):
    """Job posting offered to graduates."""

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    employment_type: EmploymentType
    work_model: WorkModel

    @field_validator("employment_type")
    @classmethod
    def _concrete_employment_type(cls, value: EmploymentType) -> EmploymentType:
        if value is EmploymentType.UNKNOWN:
            raise ValueError("job employment_type must be full-time or part-time")
        return value

    @field_validator("work_model")
    @classmethod
    def _concrete_work_model(cls, value: WorkModel) -> WorkModel:
        if value is WorkModel.UNKNOWN:
            raise ValueError("job work_model must be remote, on-site or hybrid")
        return value


class Preferences(BaseModel):
    """Preferences collected during a conversation.

    ``None`` means the question has not been answered yet, while
    ``UNKNOWN`` records an explicit "don't know" reply.
    """

    employment_type: EmploymentType | None = None
    work_model: WorkModel | None = None


class Conversation(BaseModel):
    """Mutable per-student conversation record."""

    id: str
    student_id: int
    student: Student
    state: ConversationState = ConversationState.INITIAL
    preferences: Preferences = Field(default_factory=Preferences)
    created_at: datetime
    updated_at: datetime

    def touch(self, now: datetime) -> None:
        """Refresh ``updated_at``, keeping it strictly increasing."""
        if now <= self.updated_at:
            now = self.updated_at + timedelta(microseconds=1)
        self.updated_at = now

    def summary(self) -> dict[str, object]:
        return {
            "id": self.id,
            "student_id": self.student_id,
            "student_name": self.student.name,
            "state": self.state.value,
            "preferences": self.preferences.model_dump(mode="json"),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


class SchedulerStatus(BaseModel):
    """Runtime status of the periodic graduation trigger."""

    is_running: bool
    next_run: datetime | None = None
    last_check: datetime | None = None
