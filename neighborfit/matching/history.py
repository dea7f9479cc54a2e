from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Callable, Protocol

from .config import DEFAULT_MATCHING_CONFIG
from .errors import CollaboratorUnavailableError
from .models import HistoryEntry, ScoredCandidate


class HistoryStore(Protocol):
    def append(self, requester_id: str, entries: list[HistoryEntry]) -> None:
        ...


class InMemoryHistoryStore:
    """Process-local match history, one append-only list per requester.

    Appends for the same requester are serialized by a per-requester lock so
    concurrent ranking requests never lose entries.
    """

    def __init__(self) -> None:
        self._history: dict[str, list[HistoryEntry]] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, requester_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(requester_id)
            if lock is None:
                lock = self._locks[requester_id] = threading.Lock()
            return lock

    def _existing_lock(self, requester_id: str) -> threading.Lock | None:
        with self._locks_guard:
            return self._locks.get(requester_id)

    def append(self, requester_id: str, entries: list[HistoryEntry]) -> None:
        with self._lock_for(requester_id):
            self._history.setdefault(requester_id, []).extend(entries)

    def get(self, requester_id: str) -> list[HistoryEntry]:
        # Readers never create a lock; a requester without one has no history.
        lock = self._existing_lock(requester_id)
        if lock is None:
            return []
        with lock:
            return list(self._history.get(requester_id, []))

    def recent(self, requester_id: str, limit: int) -> tuple[list[HistoryEntry], int]:
        """Up to ``limit`` entries, newest first, plus the total stored."""
        entries = self.get(requester_id)
        # Stable: entries from one ranking keep their rank order
        newest_first = sorted(entries, key=lambda e: e.timestamp, reverse=True)
        return newest_first[:limit], len(entries)

    def clear(self) -> None:
        with self._locks_guard:
            locks = list(self._locks.items())
        # Locks are kept so an append already holding one stays serialized
        for requester_id, lock in locks:
            with lock:
                self._history.pop(requester_id, None)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HistoryRecorder:
    """Hands the top of a ranking result to a :class:`HistoryStore`.

    Never forwards more than ``cap`` entries per call; retention is the
    store's business.
    """

    def __init__(
        self,
        store: HistoryStore,
        cap: int = DEFAULT_MATCHING_CONFIG.history_cap,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.cap = cap
        self.clock = clock

    def record_top_results(self, requester_id: str, results: list[ScoredCandidate]) -> list[HistoryEntry]:
        timestamp = self.clock()
        entries = [
            HistoryEntry(candidate_id=r.candidate_id, score=r.display_score, timestamp=timestamp)
            for r in results[: self.cap]
        ]
        if not entries:
            return entries
        try:
            self.store.append(requester_id, entries)
        except Exception as exc:
            raise CollaboratorUnavailableError(f"history store append failed: {exc}") from exc
        return entries
