"""
Short-lived, per-user dialogue memory.

``ConversationMemory`` keeps each user's recent turns for the text-generation
client. Every read and write prunes the user's history, first by age (turns
older than ``max_age`` are dropped) and then by count (only the newest
``max_turns`` survive), and stores the pruned list back. A user whose history
prunes to nothing is removed entirely.

Each user's entry is guarded by its own lock; the registry lock is held only
long enough to look up or create a user's lock, so different users never wait
on each other. Locks are weakly held and vanish once no call is using them.
"""

from __future__ import annotations

import threading
import time
import weakref
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Dict, List, Literal

Role = Literal["user", "assistant"]
_ROLES = ("user", "assistant")

DEFAULT_MAX_TURNS = 20
DEFAULT_MAX_AGE = timedelta(minutes=30)


@dataclass(slots=True, frozen=True)
class ConversationTurn:
    role: Role
    content: str
    created_at: float


class ConversationMemory:
    """Per-user, TTL- and count-bounded conversation history."""

    def __init__(
        self,
        max_turns: int = DEFAULT_MAX_TURNS,
        max_age: timedelta = DEFAULT_MAX_AGE,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if max_turns < 1:
            raise ValueError("max_turns must be >= 1")
        self.max_turns = max_turns
        self.max_age = max_age
        self._clock = clock
        self._histories: Dict[str, List[ConversationTurn]] = {}
        # A user's lock lives only while some call holds it.
        self._locks: weakref.WeakValueDictionary[str, threading.Lock] = weakref.WeakValueDictionary()
        self._registry_lock = threading.Lock()

    def _user_lock(self, user_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = self._locks[user_id] = threading.Lock()
            return lock

    def _prune(self, turns: List[ConversationTurn], now: float) -> List[ConversationTurn]:
        cutoff = now - self.max_age.total_seconds()
        fresh = [t for t in turns if t.created_at >= cutoff]
        return fresh[-self.max_turns:]

    def _store(self, user_id: str, turns: List[ConversationTurn]) -> None:
        if turns:
            self._histories[user_id] = turns
        else:
            self._histories.pop(user_id, None)

    def add(self, user_id: str | int, role: Role, text: str) -> None:
        """Append a turn for ``user_id`` and prune the history."""

        if role not in _ROLES:
            raise ValueError(f"role must be one of {_ROLES}, got {role!r}")
        uid = str(user_id)
        with self._user_lock(uid):
            now = self._clock()
            turns = list(self._histories.get(uid, ()))
            turns.append(ConversationTurn(role=role, content=text, created_at=now))
            self._store(uid, self._prune(turns, now))

    def get(self, user_id: str | int) -> List[Dict[str, str]]:
        """Return ``user_id``'s surviving turns oldest-first as ``{role, content}`` dicts."""

        uid = str(user_id)
        with self._user_lock(uid):
            turns = self._prune(self._histories.get(uid, []), self._clock())
            self._store(uid, turns)
            return [{"role": t.role, "content": t.content} for t in turns]

    def clear(self, user_id: str | int) -> None:
        uid = str(user_id)
        with self._user_lock(uid):
            self._histories.pop(uid, None)

    def clear_all(self) -> None:
        for uid in list(self._histories):
            with self._user_lock(uid):
                self._histories.pop(uid, None)

    def users(self) -> List[str]:
        """Return ids of users that currently hold any history (unpruned)."""

        return list(self._histories)

    def __len__(self) -> int:
        return len(self._histories)


__all__ = ["ConversationMemory", "ConversationTurn", "Role"]
