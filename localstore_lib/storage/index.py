"""Collection index: the ordered membership list of one named collection.

The index is persisted in the substrate under the collection's own name
as a comma-joined string of identifiers (empty string when empty). Order
is creation order and an identifier appears at most once.
"""
from __future__ import annotations
import logging
from contextlib import contextmanager
from typing import Iterator, List

from .interfaces import SubstrateProtocol

logger = logging.getLogger(__name__)

SEPARATOR = ","


def parse_records(stored: str | None) -> List[str]:
    """Parse a stored index value. Absent or empty means no members."""
    if not stored:
        return []
    return stored.split(SEPARATOR)


class CollectionIndex:
    def __init__(self, name: str, substrate: SubstrateProtocol) -> None:
        self.name = name
        self._substrate = substrate
        self.records: List[str] = parse_records(substrate.get(name))

    def save(self) -> None:
        """Persist the index under the collection key."""
        self._substrate.set(self.name, SEPARATOR.join(self.records))
        logger.debug("Saved index %s (%d records)", self.name, len(self.records))

    def add(self, record_id: str) -> bool:
        """Append `record_id` unless already present. Returns True if appended."""
        if record_id in self.records:
            return False
        self.records.append(record_id)
        return True

    def discard(self, record_id: str) -> int:
        """Remove every occurrence of `record_id`; return how many were removed."""
        before = len(self.records)
        self.records[:] = [r for r in self.records if r != record_id]
        return before - len(self.records)

    @contextmanager
    def staged(self):
        """Roll the in-memory records back if the block raises.

        Keeps `records` equal to what the substrate holds when a `save`
        inside the block fails, e.g. on a quota error.
        """
        snapshot = list(self.records)
        try:
            yield self
        except Exception:
            self.records[:] = snapshot
            raise

    def reset(self) -> None:
        self.records.clear()

    def __contains__(self, record_id: object) -> bool:
        return record_id in self.records

    def __iter__(self) -> Iterator[str]:
        return iter(list(self.records))

    def __len__(self) -> int:
        return len(self.records)
