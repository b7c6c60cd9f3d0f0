from typing import Protocol, Any, Iterable, Optional, runtime_checkable


@runtime_checkable
class SubstrateProtocol(Protocol):
    """Substrate protocol mirroring `localstore_lib.storage.KeyValueSubstrate`.

    Implementations should follow the semantics documented on the abstract
    base class in `localstore_lib.storage.base` (None for missing keys,
    silent removal of absent keys, string values).
    """

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: Any) -> None: ...

    def remove(self, key: str) -> None: ...

    def keys(self) -> Iterable[str]: ...

    def __len__(self) -> int: ...


@runtime_checkable
class SyncRecord(Protocol):
    """Capability interface the sync dispatcher needs from a record.

    `id_attribute` names the attribute holding the identifier; the
    collection store assigns a generated id to it on create.
    """

    id_attribute: str

    def get_id(self) -> Any: ...

    def to_json(self) -> Any: ...

    def resolve_store(self) -> Any: ...
