"""Event contracts published on the Elvia event bus.

Each event kind is its own model; subscribers register for a concrete
class, so handlers never have to guess the payload shape.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from elvia.contracts.models import Job, utc_now

GRADUATION_OCCURRED = "graduation.occurred"
CONVERSATION_STARTED = "conversation.started"
MESSAGE_SENT = "message.sent"
MESSAGE_RECEIVED = "message.received"
CONVERSATION_COMPLETED = "conversation.completed"
CONVERSATION_FAILED = "conversation.failed"


class Event(BaseModel):
    """Base envelope shared by every event kind."""

    model_config = ConfigDict(frozen=True)

    event_type: ClassVar[str] = "event"

    event_id: UUID = Field(default_factory=uuid4)
    student_id: int
    timestamp: datetime = Field(default_factory=utc_now)
    correlation_id: str | None = None

    def envelope(self) -> dict[str, Any]:
        return {"event_type": self.event_type, **self.model_dump(mode="json")}


class GraduationOccurred(Event):
    event_type: ClassVar[str] = GRADUATION_OCCURRED


class ConversationStarted(Event):
    event_type: ClassVar[str] = CONVERSATION_STARTED

    phone: str


class MessageSent(Event):
    event_type: ClassVar[str] = MESSAGE_SENT

    text: str
    phone: str


class MessageReceived(Event):
    event_type: ClassVar[str] = MESSAGE_RECEIVED

    text: str
    phone: str


class ConversationCompleted(Event):
    event_type: ClassVar[str] = CONVERSATION_COMPLETED

    matched_jobs: list[Job]


class ConversationFailed(Event):
    event_type: ClassVar[str] = CONVERSATION_FAILED

    reason: str


EVENT_TYPES: dict[str, type[Event]] = {
    cls.event_type: cls
    for cls in (
        GraduationOccurred,
        ConversationStarted,
        MessageSent,
        MessageReceived,
        ConversationCompleted,
        ConversationFailed,
    )
}
