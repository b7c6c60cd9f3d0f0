"""Key-value substrate interface definitions.

Defines the KeyValueSubstrate abstract class the collection store writes
through. A substrate is a flat, persistent mapping of string keys to
string values, modelled after browser local storage.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

from localstore_lib.errors import QuotaExceededError


class KeyValueSubstrate(ABC):
    """Abstract key-value substrate.

    Implementations must be thread-safe if used concurrently. Values are
    always stored as strings; `set` coerces anything else with `str()`.
    An optional `quota` bounds the total number of characters held in
    keys plus values.
    """

    def __init__(self, quota: Optional[int] = None) -> None:
        self.quota = quota

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value stored at `key`, or None if absent."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store `value` at `key`, replacing any previous value.

        Should raise `QuotaExceededError` and leave the substrate unchanged
        when the write would exceed the quota.
        """

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove `key`. Removing an absent key is not an error."""

    @abstractmethod
    def keys(self) -> Iterable[str]:
        """Return a snapshot of all keys currently stored."""

    @abstractmethod
    def __len__(self) -> int:
        """Return the total number of keys stored."""

    @property
    def length(self) -> int:
        return len(self)

    def clear(self) -> None:
        for key in list(self.keys()):
            self.remove(key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def _check_quota(self, data: dict, key: str, value: str) -> None:
        """Raise QuotaExceededError if storing `value` at `key` would overflow.

        `data` is the implementation's current key/value mapping.
        """
        if self.quota is None:
            return
        used = sum(len(k) + len(v) for k, v in data.items() if k != key)
        if used + len(key) + len(value) > self.quota:
            raise QuotaExceededError(
                f"Storing {key!r} would exceed the quota of {self.quota} characters"
            )
