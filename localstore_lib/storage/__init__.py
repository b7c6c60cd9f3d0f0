"""Storage package for localstore: substrates, serializer, index and store."""
from __future__ import annotations
from pathlib import Path
from threading import Lock
from typing import Optional

from .base import KeyValueSubstrate
from .memory_backend import MemorySubstrate
from .file_backend import FileSubstrate
from .collection_store import CollectionStore, guid

_default_lock = Lock()
_default: list[KeyValueSubstrate] = []


def create_substrate(
    backend: str = "memory",
    file_path: str | Path | None = None,
    quota: Optional[int] = None,
) -> KeyValueSubstrate:
    """Build a substrate by backend name ("memory" or "file")."""
    if backend == "memory":
        return MemorySubstrate(quota=quota)
    if backend == "file":
        if file_path is None:
            raise ValueError("file backend requires file_path")
        return FileSubstrate(file_path, quota=quota)
    raise ValueError(f"unknown substrate backend: {backend!r}")


def default_substrate() -> KeyValueSubstrate:
    """Return the process-wide substrate used when none is injected."""
    with _default_lock:
        if not _default:
            _default.append(MemorySubstrate())
        return _default[0]


__all__ = [
    "KeyValueSubstrate",
    "MemorySubstrate",
    "FileSubstrate",
    "CollectionStore",
    "guid",
    "create_substrate",
    "default_substrate",
]
