"""Collection store: CRUD for one named collection over a key-value substrate.

Each record is stored under `<name>-<id>` as serialized JSON and the
collection's membership is tracked by a `CollectionIndex` kept under
`<name>`. Records without an identifier get a generated pseudo-GUID on
create.

The substrate offers no transactions: two stores sharing one substrate and
collection name can interleave index read-modify-write cycles and lose
updates. Callers needing concurrent access must serialize it themselves.
"""
from __future__ import annotations
import logging
import random
from typing import Any, List, Optional

from .index import CollectionIndex, SEPARATOR
from .interfaces import SubstrateProtocol, SyncRecord
from .serializer import RecordSerializer, Serializer
from localstore_lib.errors import CorruptRecordError, SubstrateUnavailableError

logger = logging.getLogger(__name__)


def s4(rng: Any = random) -> str:
    """Return four random hex digits."""
    return format(int((1 + rng.random()) * 0x10000), "x")[1:]


def guid(rng: Any = random) -> str:
    """Return a pseudo-GUID shaped like 8-4-4-4-12 hex digits.

    Not guaranteed unique; collisions are improbable but possible.
    """
    return (s4(rng) + s4(rng) + "-" + s4(rng) + "-" + s4(rng) + "-"
            + s4(rng) + "-" + s4(rng) + s4(rng) + s4(rng))


def is_blank_id(record_id: Any) -> bool:
    return record_id is None or record_id == ""


class CollectionStore:
    """Storage engine for one named collection.

    Parameters
    - name: collection key; also the prefix of every record key.
    - substrate: the key-value substrate written through.
    - serializer: payload serializer, defaults to `RecordSerializer`.
    - rng: random source used for id generation.
    """

    def __init__(
        self,
        name: str,
        substrate: Optional[SubstrateProtocol],
        serializer: Optional[Serializer] = None,
        rng: Any = random,
    ) -> None:
        if substrate is None or not isinstance(substrate, SubstrateProtocol):
            raise SubstrateUnavailableError("Environment does not support a key-value substrate")
        if not name:
            raise ValueError("collection name must not be empty")
        self.name = name
        self._substrate = substrate
        self.serializer = serializer or RecordSerializer()
        self._rng = rng
        self.index = CollectionIndex(name, substrate)

    @property
    def substrate(self) -> SubstrateProtocol:
        return self._substrate

    @property
    def records(self) -> List[str]:
        return self.index.records

    def item_key(self, record_id: Any) -> str:
        return f"{self.name}-{record_id}"

    def _index_id(self, record_id: Any) -> str:
        rid = str(record_id)
        if SEPARATOR in rid:
            raise ValueError(f"record id {rid!r} must not contain {SEPARATOR!r}")
        return rid

    def _write(self, record: SyncRecord, record_id: str) -> str:
        key = self.item_key(record_id)
        payload = self.serializer.serialize(record.to_json())
        self._substrate.set(key, payload)
        return payload

    def _confirm(self, record: SyncRecord, record_id: str, payload: Any) -> Any:
        """Re-read a record just written; return it only if it matches the write."""
        stored = self._substrate.get(self.item_key(record_id))
        if stored != (payload if isinstance(payload, str) else str(payload)):
            logger.warning("Re-read of %s did not match the written payload", self.item_key(record_id))
            return None
        return self.find(record)

    def create(self, record: SyncRecord) -> Any:
        """Store a new record, assigning a generated id when it has none.

        Returns the stored payload, or None when the write could not be
        confirmed by reading it back.
        """
        record_id = record.get_id()
        if is_blank_id(record_id):
            record_id = guid(self._rng)
            setattr(record, record.id_attribute, record_id)
        rid = self._index_id(record_id)
        payload = self._write(record, rid)
        with self.index.staged():
            self.index.add(rid)
            self.index.save()
        logger.debug("Created %s", self.item_key(rid))
        return self._confirm(record, rid, payload)

    def update(self, record: SyncRecord) -> Any:
        """Overwrite a record's entry; index it if it was not yet a member."""
        record_id = record.get_id()
        if is_blank_id(record_id):
            raise ValueError("cannot update a record without an identifier")
        rid = self._index_id(record_id)
        payload = self._write(record, rid)
        with self.index.staged():
            if self.index.add(rid):
                self.index.save()
        logger.debug("Updated %s", self.item_key(rid))
        return self._confirm(record, rid, payload)

    def load(self, record_id: Any) -> Any:
        """Return the stored payload for `record_id`, or None if absent."""
        key = self.item_key(record_id)
        try:
            return self.serializer.deserialize(self._substrate.get(key))
        except ValueError as e:
            raise CorruptRecordError(key, str(e)) from e

    def find(self, record: SyncRecord) -> Any:
        """Return the stored payload for `record`, or None if absent."""
        record_id = record.get_id()
        if is_blank_id(record_id):
            return None
        return self.load(record_id)

    def find_all(self) -> List[Any]:
        """Return the payload of every indexed record, in index order.

        Entries that are missing or cannot be parsed are skipped.
        """
        result = []
        for record_id in self.index:
            try:
                data = self.load(record_id)
            except CorruptRecordError as e:
                logger.warning("Skipping %s: %s", self.item_key(record_id), e)
                continue
            if data is not None:
                result.append(data)
        return result

    def destroy(self, record: SyncRecord) -> SyncRecord:
        """Remove a record's entry and every index occurrence of its id.

        Destroying a record that was never stored is not an error; the
        record is returned either way.
        """
        record_id = record.get_id()
        if is_blank_id(record_id):
            logger.debug("Destroy of unsaved record in %s ignored", self.name)
            return record
        rid = str(record_id)
        self._substrate.remove(self.item_key(rid))
        with self.index.staged():
            removed = self.index.discard(rid)
            self.index.save()
        logger.debug("Destroyed %s (%d index entries)", self.item_key(rid), removed)
        return record

    def clear(self, sweep_orphans: bool = False) -> None:
        """Remove the collection's index and entries from the substrate.

        Entries are located through the index. With `sweep_orphans` every
        substrate key starting with `<name>-` is removed as well, which also
        catches entries a partial failure left out of the index. The sweep
        matches by prefix only, so it also hits collections whose name
        starts with `<name>-`.
        """
        for record_id in self.index:
            self._substrate.remove(self.item_key(record_id))
        self._substrate.remove(self.name)
        swept = 0
        if sweep_orphans:
            prefix = f"{self.name}-"
            for key in list(self._substrate.keys()):
                if key.startswith(prefix):
                    self._substrate.remove(key)
                    swept += 1
        self.index.reset()
        logger.info("Cleared collection %s (%d orphaned keys swept)", self.name, swept)

    def size(self) -> int:
        """Total key count of the substrate, not scoped to this collection."""
        return len(self._substrate)
