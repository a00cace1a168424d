"""Live conversation store."""

from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock, RLock
from typing import Protocol

from elvia.contracts.models import Conversation


class ConversationStore(Protocol):
    """Storage for the live set of conversations, one per student."""

    def load(self, student_id: int) -> Conversation | None: ...
    def save(self, conversation: Conversation) -> None: ...
    def remove(self, student_id: int) -> bool: ...
    def list_conversations(self) -> list[Conversation]: ...


@dataclass(slots=True)
class InMemoryConversationStore:
    """In-memory ConversationStore; contents are lost on restart."""

    _db: dict[int, Conversation] = field(default_factory=dict)
    _guard: Lock = field(default_factory=Lock)

    def load(self, student_id: int) -> Conversation | None:
        with self._guard:
            return self._db.get(student_id)

    def save(self, conversation: Conversation) -> None:
        with self._guard:
            self._db[conversation.student_id] = conversation

    def remove(self, student_id: int) -> bool:
        with self._guard:
            return self._db.pop(student_id, None) is not None

    def list_conversations(self) -> list[Conversation]:
        with self._guard:
            return list(self._db.values())

    def __len__(self) -> int:
        with self._guard:
            return len(self._db)


@dataclass(slots=True)
class StudentLocks:
    """Hands out one re-entrant lock per student id."""

    _locks: dict[int, RLock] = field(default_factory=dict)
    _guard: Lock = field(default_factory=Lock)

    def for_student(self, student_id: int) -> RLock:
        with self._guard:
            lock = self._locks.get(student_id)
            if lock is None:
                lock = RLock()
                self._locks[student_id] = lock
            return lock

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
