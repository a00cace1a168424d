"""Graduation conversation engine.

Owns the live set of conversations and advances them on inbound replies:

GraduationOccurred / start()
  → greeting + employment prompt        (asking_employment_type)
  → reply: full-time | part-time | no sé → work model prompt (asking_work_model)
  → reply: remote | on-site | hybrid | no sé → job matches (providing_jobs → completed)

Unparseable replies re-send the current prompt and leave the record as is.
Replies in any other state only refresh updated_at and are logged. Nothing in here raises
to the caller for those outcomes; they are all part of the flow.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
import logging
from threading import Event as ThreadEvent
from uuid import uuid4

from elvia.contracts.events import (
    ConversationCompleted,
    ConversationFailed,
    ConversationStarted,
    GraduationOccurred,
    MessageReceived,
    MessageSent,
)
from elvia.contracts.models import Conversation, utc_now
from elvia.contracts.types import ConversationState, EmploymentType, WorkModel
from elvia.conversation import messages
from elvia.conversation.fsm import (
    EMPLOYMENT_ANSWERED,
    GREET,
    JOBS_PROVIDED,
    WORK_MODEL_ANSWERED,
    conversation_machine,
)
from elvia.conversation.parsing import parse_employment_type, parse_work_model
from elvia.matching.matcher import match_preferences
from elvia.observability.metrics import (
    CONVERSATIONS_FINISHED,
    CONVERSATIONS_STARTED,
    REPLIES_HANDLED,
)
from elvia.observability.telemetry import get_tracer
from elvia.orchestrator.event_bus import EventBus, Subscription
from elvia.orchestrator.notifier import ImmediateNotifier, Notifier
from elvia.orchestrator.state import ConversationStore, InMemoryConversationStore, StudentLocks
from elvia.registry.data_source import DataSource

logger = logging.getLogger(__name__)

STUDENT_NOT_FOUND = "Student not found"


@dataclass(slots=True)
class ConversationEngine:
    """Per-student conversation state machine driven by the event bus."""

    bus: EventBus
    data_source: DataSource
    notifier: Notifier = field(default_factory=ImmediateNotifier)
    store: ConversationStore = field(default_factory=InMemoryConversationStore)
    clock: Callable[[], datetime] = utc_now
    _locks: StudentLocks = field(default_factory=StudentLocks, init=False)
    _graduations: Subscription[GraduationOccurred] = field(init=False)

    def __post_init__(self) -> None:
        self._graduations = self.bus.subscribe(GraduationOccurred)

    # ----- Operations -----

    def start(self, student_id: int) -> Conversation | None:
        """Open a conversation with a student.

        Returns the new conversation, the existing one for a duplicate
        start, or None when the student is unknown (a ConversationFailed
        event is published instead).
        """
        tracer = get_tracer("elvia.conversation")
        with tracer.start_as_current_span("conversation.start") as span:
            span.set_attribute("student_id", student_id)
            student = self.data_source.find_student(student_id)
            if student is None:
                logger.error(
                    "conversation.student_not_found",
                    extra={"extra": {"student_id": student_id}},
                )
                CONVERSATIONS_FINISHED.labels(outcome="failed").inc()
                self.bus.publish(ConversationFailed(student_id=student_id, reason=STUDENT_NOT_FOUND))
                return None

            with self._locks.for_student(student_id):
                existing = self.store.load(student_id)
                if existing is not None:
                    logger.warning(
                        "conversation.already_exists",
                        extra={
                            "extra": {
                                "student_id": student_id,
                                "conversation_id": existing.id,
                                "state": existing.state.value,
                            }
                        },
                    )
                    return existing

                now = self.clock()
                conversation = Conversation(
                    id=str(uuid4()),
                    student_id=student_id,
                    student=student,
                    created_at=now,
                    updated_at=now,
                )
                self._advance(conversation, GREET)
                self.store.save(conversation)
                CONVERSATIONS_STARTED.inc()
                span.set_attribute("conversation_id", conversation.id)
                logger.info(
                    "conversation.started",
                    extra={"extra": {"student_id": student_id, "conversation_id": conversation.id}},
                )
                self.bus.publish(
                    ConversationStarted(
                        student_id=student_id,
                        phone=student.phone,
                        correlation_id=conversation.id,
                    )
                )
                self._send(conversation, messages.greeting(student))
                return conversation

    def handle_message(self, student_id: int, text: str) -> Conversation | None:
        """Feed an inbound reply to the student's conversation.

        Returns the conversation after handling, or None when the student
        has no live conversation.
        """
        tracer = get_tracer("elvia.conversation")
        with tracer.start_as_current_span("conversation.message") as span:
            span.set_attribute("student_id", student_id)
            # Locks are only handed out for students that have a conversation.
            if self.store.load(student_id) is None:
                return self._no_conversation(student_id)
            with self._locks.for_student(student_id):
                conversation = self.store.load(student_id)
                if conversation is None:
                    return self._no_conversation(student_id)

                self.bus.publish(
                    MessageReceived(
                        student_id=student_id,
                        text=text,
                        phone=conversation.student.phone,
                        correlation_id=conversation.id,
                    )
                )
                span.set_attribute("state", conversation.state.value)
                conversation.touch(self.clock())

                if conversation.state is ConversationState.ASKING_EMPLOYMENT_TYPE:
                    self._on_employment_reply(conversation, text)
                elif conversation.state is ConversationState.ASKING_WORK_MODEL:
                    self._on_work_model_reply(conversation, text)
                else:
                    REPLIES_HANDLED.labels(outcome="out_of_sequence").inc()
                    logger.warning(
                        "conversation.out_of_sequence",
                        extra={
                            "extra": {
                                "student_id": student_id,
                                "state": conversation.state.value,
                                "text": text,
                            }
                        },
                    )
                return conversation

    def get(self, student_id: int) -> Conversation | None:
        return self.store.load(student_id)

    def list_conversations(self) -> list[Conversation]:
        return self.store.list_conversations()

    def delete(self, student_id: int) -> bool:
        if self.store.load(student_id) is None:
            return False
        with self._locks.for_student(student_id):
            removed = self.store.remove(student_id)
        if removed:
            logger.info("conversation.deleted", extra={"extra": {"student_id": student_id}})
        return removed

    # ----- Graduation events -----

    def on_graduation(self, event: GraduationOccurred) -> Conversation | None:
        logger.info(
            "graduation.received",
            extra={"extra": {"student_id": event.student_id, "event_id": str(event.event_id)}},
        )
        return self.start(event.student_id)

    def process_pending(self, timeout: float | None = None) -> int:
        """Handle graduation events already queued; returns how many.

        With a ``timeout``, waits up to that long for the first event when
        the queue is empty.
        """
        events: list[GraduationOccurred] = []
        if timeout is not None and not self._graduations.pending():
            first = self._graduations.next_event(timeout=timeout)
            if first is not None:
                events.append(first)
        events += self._graduations.drain()
        for event in events:
            self._dispatch(event)
        return len(events)

    def run(self, stop_event: ThreadEvent, poll_interval: float = 0.2) -> None:
        """Main loop consuming graduation events until stop_event is set."""
        while not stop_event.is_set():
            event = self._graduations.next_event(timeout=poll_interval)
            if event:
                self._dispatch(event)

    def close(self) -> None:
        self._graduations.close()

    def _dispatch(self, event: GraduationOccurred) -> None:
        try:
            self.on_graduation(event)
        except Exception:  # noqa: BLE001
            logger.exception(
                "graduation.handler_failed",
                extra={"extra": {"student_id": event.student_id}},
            )

    # ----- State handlers -----

    def _on_employment_reply(self, conversation: Conversation, text: str) -> None:
        choice = parse_employment_type(text)
        if choice is None:
            self._reprompt(conversation, text, messages.employment_type_question())
            return
        conversation.preferences.employment_type = choice
        self._advance(conversation, EMPLOYMENT_ANSWERED)
        REPLIES_HANDLED.labels(
            outcome="unknown" if choice is EmploymentType.UNKNOWN else "accepted"
        ).inc()
        self._send(conversation, messages.work_model_question())

    def _on_work_model_reply(self, conversation: Conversation, text: str) -> None:
        choice = parse_work_model(text)
        if choice is None:
            self._reprompt(conversation, text, messages.work_model_question())
            return
        conversation.preferences.work_model = choice
        self._advance(conversation, WORK_MODEL_ANSWERED)
        REPLIES_HANDLED.labels(outcome="unknown" if choice is WorkModel.UNKNOWN else "accepted").inc()
        self._provide_jobs(conversation)

    def _provide_jobs(self, conversation: Conversation) -> None:
        jobs = match_preferences(self.data_source, conversation.preferences)
        text = messages.job_matches(jobs, conversation.preferences)
        self._advance(conversation, JOBS_PROVIDED)
        CONVERSATIONS_FINISHED.labels(outcome="completed").inc()
        logger.info(
            "conversation.completed",
            extra={
                "extra": {
                    "student_id": conversation.student_id,
                    "conversation_id": conversation.id,
                    "matched_jobs": [job.id for job in jobs],
                }
            },
        )
        student_id = conversation.student_id
        phone = conversation.student.phone
        cid = conversation.id

        def deliver() -> None:
            self.bus.publish(MessageSent(student_id=student_id, text=text, phone=phone, correlation_id=cid))
            self.bus.publish(
                ConversationCompleted(student_id=student_id, matched_jobs=jobs, correlation_id=cid)
            )

        self.notifier.submit(deliver)

    def _reprompt(self, conversation: Conversation, text: str, prompt: str) -> None:
        REPLIES_HANDLED.labels(outcome="unparseable").inc()
        logger.info(
            "conversation.reply_unparseable",
            extra={
                "extra": {
                    "student_id": conversation.student_id,
                    "state": conversation.state.value,
                    "text": text,
                }
            },
        )
        self._send(conversation, prompt)

    # ----- Helpers -----

    def _no_conversation(self, student_id: int) -> None:
        REPLIES_HANDLED.labels(outcome="no_conversation").inc()
        logger.warning("conversation.not_found", extra={"extra": {"student_id": student_id}})

    def _advance(self, conversation: Conversation, trigger: str) -> None:
        machine = conversation_machine(conversation.state)
        source = conversation.state
        conversation.state = machine.trigger(trigger)
        conversation.touch(self.clock())
        logger.info(
            "conversation.transition",
            extra={
                "extra": {
                    "student_id": conversation.student_id,
                    "trigger": trigger,
                    "from": source.value,
                    "to": conversation.state.value,
                }
            },
        )

    def _send(self, conversation: Conversation, text: str) -> None:
        student_id = conversation.student_id
        phone = conversation.student.phone
        cid = conversation.id
        logger.info(
            "message.queued",
            extra={"extra": {"student_id": student_id, "conversation_id": cid}},
        )
        self.notifier.submit(
            lambda: self.bus.publish(
                MessageSent(student_id=student_id, text=text, phone=phone, correlation_id=cid)
            )
        )
