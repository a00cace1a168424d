"""Declared transition graph for graduation conversations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from elvia.contracts.types import ConversationState

GREET = "greet"
FAIL = "fail"
EMPLOYMENT_ANSWERED = "employment_answered"
WORK_MODEL_ANSWERED = "work_model_answered"
JOBS_PROVIDED = "jobs_provided"


@dataclass(frozen=True, slots=True)
class Transition:
    trigger: str
    source: ConversationState
    dest: ConversationState


CONVERSATION_TRANSITIONS: tuple[Transition, ...] = (
    Transition(GREET, ConversationState.INITIAL, ConversationState.ASKING_EMPLOYMENT_TYPE),
    Transition(FAIL, ConversationState.INITIAL, ConversationState.FAILED),
    Transition(
        EMPLOYMENT_ANSWERED,
        ConversationState.ASKING_EMPLOYMENT_TYPE,
        ConversationState.ASKING_WORK_MODEL,
    ),
    Transition(
        WORK_MODEL_ANSWERED,
        ConversationState.ASKING_WORK_MODEL,
        ConversationState.PROVIDING_JOBS,
    ),
    Transition(JOBS_PROVIDED, ConversationState.PROVIDING_JOBS, ConversationState.COMPLETED),
)


class StateMachineBackend(Protocol):
    """Adapter interface so callers can swap FSM implementations."""

    def set_state(self, state: ConversationState) -> None: ...
    def trigger(self, trigger: str) -> ConversationState: ...
    def can_trigger(self, trigger: str) -> bool: ...
    @property
    def state(self) -> ConversationState: ...


class SimpleStateMachine(StateMachineBackend):
    """
    Minimal table-driven FSM.
    Not thread-safe; raises on triggers that are not declared for the current state.
    """

    def __init__(self, transitions: tuple[Transition, ...] = CONVERSATION_TRANSITIONS) -> None:
        self._table: dict[tuple[str, ConversationState], ConversationState] = {
            (t.trigger, t.source): t.dest for t in transitions
        }
        self._state: ConversationState | None = None

    def set_state(self, state: ConversationState) -> None:
        self._state = ConversationState(state)

    def can_trigger(self, trigger: str) -> bool:
        return (trigger, self.state) in self._table

    def trigger(self, trigger: str) -> ConversationState:
        current = self.state
        dest = self._table.get((trigger, current))
        if dest is None:
            raise RuntimeError(f"No transition for trigger '{trigger}' from state '{current.value}'")
        self._state = dest
        return dest

    @property
    def state(self) -> ConversationState:
        if self._state is None:
            raise RuntimeError("State machine not initialized; call set_state() first")
        return self._state


def conversation_machine(state: ConversationState = ConversationState.INITIAL) -> SimpleStateMachine:
    machine = SimpleStateMachine()
    machine.set_state(state)
    return machine
