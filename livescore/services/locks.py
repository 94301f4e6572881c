"""
Per-innings mutual exclusion for scoring calls.
"""
import threading
from contextlib import contextmanager


class InningsLocks:
    """One lock per innings id; different innings never block each other"""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[int, threading.Lock] = {}

    def __contains__(self, innings_id: int) -> bool:
        with self._guard:
            return innings_id in self._locks

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def lock_for(self, innings_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(innings_id)
            if lock is None:
                lock = self._locks[innings_id] = threading.Lock()
            return lock

    def discard(self, innings_id: int):
        """
        Forget the lock of an innings that accepts no more balls. Callers
        already waiting on it keep their reference and are rejected by the
        completed innings itself.
        """
        with self._guard:
            self._locks.pop(innings_id, None)

    @contextmanager
    def hold(self, innings_id: int):
        lock = self.lock_for(innings_id)
        with lock:
            yield
