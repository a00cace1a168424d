"""Tests for the conversation transition table."""

from __future__ import annotations

import pytest

from elvia.contracts.types import TERMINAL_STATES, ConversationState
from elvia.conversation.fsm import (
    CONVERSATION_TRANSITIONS,
    EMPLOYMENT_ANSWERED,
    FAIL,
    GREET,
    JOBS_PROVIDED,
    WORK_MODEL_ANSWERED,
    SimpleStateMachine,
    conversation_machine,
)

TRIGGERS = (GREET, FAIL, EMPLOYMENT_ANSWERED, WORK_MODEL_ANSWERED, JOBS_PROVIDED)


def test_linear_path_reaches_completed() -> None:
    machine = conversation_machine()
    for trigger in (GREET, EMPLOYMENT_ANSWERED, WORK_MODEL_ANSWERED, JOBS_PROVIDED):
        machine.trigger(trigger)
    assert machine.state is ConversationState.COMPLETED


def test_fail_only_from_initial() -> None:
    machine = conversation_machine()
    assert machine.trigger(FAIL) is ConversationState.FAILED
    assert not machine.can_trigger(GREET)


@pytest.mark.parametrize("state", list(ConversationState))
def test_every_state_trigger_pair_is_declared_or_rejected(state: ConversationState) -> None:
    declared = {(t.trigger, t.source): t.dest for t in CONVERSATION_TRANSITIONS}
    for trigger in TRIGGERS:
        machine = conversation_machine(state)
        if (trigger, state) in declared:
            assert machine.trigger(trigger) is declared[(trigger, state)]
        else:
            with pytest.raises(RuntimeError):
                machine.trigger(trigger)
            assert machine.state is state


def test_terminal_states_have_no_outgoing_transitions() -> None:
    for state in TERMINAL_STATES:
        machine = conversation_machine(state)
        assert not any(machine.can_trigger(trigger) for trigger in TRIGGERS)


def test_uninitialized_machine_raises() -> None:
    with pytest.raises(RuntimeError):
        _ = SimpleStateMachine().state
