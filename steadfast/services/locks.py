"""
Per-key mutual exclusion for write paths that must be linearizable per key.
"""

import threading
from collections import defaultdict
from contextlib import contextmanager
from typing import Hashable, Iterator


class KeyedLock:
    """
    Hands out one lock per key.

    Locks are reference counted and dropped once no caller holds or waits
    on them, so the table does not grow with every key ever seen.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[Hashable, threading.Lock] = {}
        self._waiters: dict[Hashable, int] = defaultdict(int)

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
            self._waiters[key] += 1
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                self._waiters[key] -= 1
                if self._waiters[key] == 0:
                    del self._waiters[key]
                    del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
