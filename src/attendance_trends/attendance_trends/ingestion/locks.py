from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class TermLockRegistry:
    """One lock per (year, term) so ingestions into the same term run one at a time.

    Note: Locks are process-local; they do not coordinate separate workers.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[tuple[int, int], threading.Lock] = {}

    def _lock_for(self, year: int, term: int) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault((int(year), int(term)), threading.Lock())

    @contextmanager
    def hold(self, *, year: int, term: int) -> Iterator[None]:
        lock = self._lock_for(year, term)
        with lock:
            yield
