"""File-backed key-value substrate.

The whole substrate lives in a single JSON document mapping keys to string
values. The document is loaded once at construction and rewritten after
every mutation, writing to a temporary file first and then renaming it
over the target so a crash never leaves a half-written document behind.
"""
from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from threading import RLock
from typing import Any, Dict, Iterable, Optional

from .base import KeyValueSubstrate
from localstore_lib.errors import SubstrateUnavailableError

logger = logging.getLogger(__name__)


class FileSubstrate(KeyValueSubstrate):
    """Substrate persisted to one JSON file.

    Parameters
    - file_path: path to the JSON document. A missing file is treated as
      an empty substrate and created on the first write.
    - quota: optional character budget, see `KeyValueSubstrate`.
    """

    def __init__(self, file_path: str | Path, quota: Optional[int] = None) -> None:
        super().__init__(quota)
        self.file_path = Path(file_path)
        if not self.file_path.parent.exists():
            os.makedirs(self.file_path.parent, exist_ok=True)
        self._lock = RLock()
        self._store: Dict[str, str] = self._read()

    def _read(self) -> Dict[str, str]:
        if not self.file_path.exists():
            return {}
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                raw = f.read()
            data: Any = json.loads(raw) if raw.strip() else {}
        except (OSError, ValueError) as e:
            raise SubstrateUnavailableError(f"Cannot read substrate file {self.file_path}: {e}") from e
        if not isinstance(data, dict):
            raise SubstrateUnavailableError(f"Substrate file {self.file_path} does not hold a JSON object")
        logger.debug("FileSubstrate loaded %s (%d keys)", self.file_path, len(data))
        return {str(k): v if isinstance(v, str) else str(v) for k, v in data.items()}

    def _flush(self) -> None:
        tmp = self.file_path.with_suffix(self.file_path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(self._store, f)
            f.flush()
            os.fsync(f.fileno())
        tmp.replace(self.file_path)

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._store.get(key)

    def set(self, key: str, value: Any) -> None:
        value = value if isinstance(value, str) else str(value)
        with self._lock:
            self._check_quota(self._store, key, value)
            self._store[key] = value
            self._flush()

    def remove(self, key: str) -> None:
        with self._lock:
            if self._store.pop(key, None) is not None:
                self._flush()

    def keys(self) -> Iterable[str]:
        with self._lock:
            return list(self._store.keys())

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
            self._flush()
