from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class NamedLocks:
    """
    One mutex per key, created on demand and dropped once nobody holds
    or waits for it.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: dict[str, list] = {}  # key -> [lock, users]

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            entry = self._entries.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._entries[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)


# partagé par toutes les requêtes du process
hospital_locks = NamedLocks()
