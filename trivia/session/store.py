"""
Session Store - In-memory game sessions keyed by UserID.

Requests for the same user are serialized: every read-modify-write goes
through `locked(user_id)`, which holds that user's lock for the whole
transaction. Requests for different users never wait on each other.

    with store.locked("u1") as slot:
        session = slot.session          # private copy, or None
        ...mutate the copy...
        slot.session = session          # committed on normal exit

If the block raises, nothing is committed.

The store also keeps the final statistics of each user's last finished
game so that a retried final request gets the same answer.
"""

from __future__ import annotations
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator
import logging
import threading
import time
import weakref

from .state import GameOver, GameSession

logger = logging.getLogger(__name__)


class SessionPolicy(str, Enum):
    """What a new game does to a game already in progress for the user."""
    OVERWRITE = "overwrite"
    REJECT = "reject"


@dataclass
class SessionSlot:
    """A user's entry in the store, as seen inside a transaction."""
    user_id: str
    session: GameSession | None
    finished: GameOver | None


class SessionStore:
    """
    Thread-safe store of game sessions.

    No persistence: sessions live only as long as the process.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self.clock = clock
        self._sessions: dict[str, GameSession] = {}
        self._finished: dict[str, GameOver] = {}
        self._guard = threading.Lock()
        # A user's lock lives only while some request holds a reference to it
        self._locks: weakref.WeakValueDictionary[str, threading.Lock] = (
            weakref.WeakValueDictionary()
        )

    def __len__(self) -> int:
        with self._guard:
            return len(self._sessions)

    def _lock_for(self, user_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[user_id] = lock
            return lock

    @contextmanager
    def locked(self, user_id: str) -> Iterator[SessionSlot]:
        """Exclusive transaction on one user's entry."""
        lock = self._lock_for(user_id)
        with lock:
            with self._guard:
                session = self._sessions.get(user_id)
                slot = SessionSlot(
                    user_id=user_id,
                    session=session.copy() if session else None,
                    finished=self._finished.get(user_id),
                )

            yield slot

            with self._guard:
                if slot.session is None:
                    self._sessions.pop(user_id, None)
                else:
                    self._sessions[user_id] = slot.session
                if slot.finished is None:
                    self._finished.pop(user_id, None)
                else:
                    self._finished[user_id] = slot.finished

    def lookup(self, user_id: str) -> GameSession | None:
        """Snapshot of the user's active session, or None."""
        with self._guard:
            session = self._sessions.get(user_id)
            return session.copy() if session else None

    def finished(self, user_id: str) -> GameOver | None:
        """Statistics of the user's last finished game, or None."""
        with self._guard:
            return self._finished.get(user_id)

    def list_active(self) -> list[str]:
        """UserIDs with a game in progress."""
        with self._guard:
            return sorted(self._sessions)

    def cleanup_stale(self, max_age_seconds: float) -> int:
        """
        Drop sessions idle for longer than max_age_seconds, and finished
        results older than that.

        Returns the number of entries removed.
        """
        cutoff = self.clock() - max_age_seconds
        removed = 0
        with self._guard:
            for user_id in [
                uid for uid, s in self._sessions.items() if s.updated_at < cutoff
            ]:
                del self._sessions[user_id]
                removed += 1
            for user_id in [
                uid for uid, g in self._finished.items() if g.finished_at < cutoff
            ]:
                del self._finished[user_id]
                removed += 1

        if removed:
            logger.info(f"Removed {removed} stale session entries")
        return removed
