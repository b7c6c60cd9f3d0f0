"""Simple memory-backed key-value substrate

This substrate keeps string values in a plain dict `{<key>: <value>}`.
Nothing survives the process; use it for tests and as the ambient default.
"""
from threading import RLock
from typing import Dict, Any, Optional, Iterable

from .base import KeyValueSubstrate


class MemorySubstrate(KeyValueSubstrate):
    def __init__(self, quota: Optional[int] = None):
        super().__init__(quota)
        self._lock = RLock()
        self._store: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._store.get(key)

    def set(self, key: str, value: Any) -> None:
        value = value if isinstance(value, str) else str(value)
        with self._lock:
            self._check_quota(self._store, key, value)
            self._store[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def keys(self) -> Iterable[str]:
        with self._lock:
            return list(self._store.keys())

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
