"""Tests for the in-memory event bus and the recording wrapper."""

from __future__ import annotations

from elvia.contracts.events import (
    ConversationFailed,
    ConversationStarted,
    GraduationOccurred,
)
from elvia.orchestrator.event_bus import InMemoryEventBus
from elvia.orchestrator.recorder import RecordingEventBus


def test_publish_fans_out_to_every_subscriber_of_the_class() -> None:
    bus = InMemoryEventBus()
    first = bus.subscribe(GraduationOccurred)
    second = bus.subscribe(GraduationOccurred)
    other = bus.subscribe(ConversationFailed)

    event = GraduationOccurred(student_id=1)
    bus.publish(event)

    assert first.next_event(timeout=0.1) == event
    assert second.next_event(timeout=0.1) == event
    assert other.next_event(timeout=0.01) is None


def test_subscription_preserves_publication_order() -> None:
    bus = InMemoryEventBus()
    subscription = bus.subscribe(GraduationOccurred)
    for student_id in (3, 1, 2):
        bus.publish(GraduationOccurred(student_id=student_id))

    assert [e.student_id for e in subscription.drain()] == [3, 1, 2]
    assert subscription.pending() == 0


def test_publish_without_subscribers_is_a_no_op() -> None:
    bus = InMemoryEventBus()
    bus.publish(ConversationStarted(student_id=1, phone="+1"))


def test_unsubscribe_stops_delivery() -> None:
    bus = InMemoryEventBus()
    subscription = bus.subscribe(GraduationOccurred)
    bus.unsubscribe(subscription)
    bus.publish(GraduationOccurred(student_id=1))

    assert subscription.closed
    assert subscription.pending() == 0


def test_recorder_keeps_history_and_filters() -> None:
    bus = RecordingEventBus(InMemoryEventBus())
    bus.publish(GraduationOccurred(student_id=1))
    bus.publish(ConversationFailed(student_id=9, reason="Student not found"))
    bus.publish(GraduationOccurred(student_id=2))

    assert len(bus.events) == 3
    assert [e.student_id for e in bus.of_type(GraduationOccurred)] == [1, 2]
    assert bus.of_type(GraduationOccurred, student_id=2)[0].student_id == 2
    bus.clear()
    assert bus.events == []


def test_recorder_bounds_history() -> None:
    bus = RecordingEventBus(InMemoryEventBus(), max_events=2)
    for student_id in range(5):
        bus.publish(GraduationOccurred(student_id=student_id))

    assert [e.student_id for e in bus.events] == [3, 4]


def test_recorder_forwards_to_wrapped_bus() -> None:
    bus = RecordingEventBus(InMemoryEventBus())
    subscription = bus.subscribe(GraduationOccurred)
    bus.publish(GraduationOccurred(student_id=7))

    event = subscription.next_event(timeout=0.1)
    assert event is not None
    assert event.student_id == 7


def test_envelope_carries_event_type() -> None:
    envelope = ConversationFailed(student_id=5, reason="Student not found").envelope()

    assert envelope["event_type"] == "conversation.failed"
    assert envelope["student_id"] == 5
    assert envelope["reason"] == "Student not found"
