"""
Per-key locking with bounded memory.

Keys hash onto a fixed pool of locks, so the pool never grows with the number
of users seen. Two keys may share a lock; callers must not nest acquisitions.
"""

from __future__ import annotations

import threading
from typing import Hashable

DEFAULT_STRIPES = 64


class StripedLock:

    def __init__(self, stripes: int = DEFAULT_STRIPES):
        if stripes < 1:
            raise ValueError("stripes must be >= 1")
        self._locks = tuple(threading.Lock() for _ in range(stripes))

    def __len__(self) -> int:
        return len(self._locks)

    def for_key(self, key: Hashable) -> threading.Lock:
        return self._locks[hash(key) % len(self._locks)]
