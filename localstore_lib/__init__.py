"""localstore: persist model records in a key-value substrate."""

from .errors import (
    LocalStoreError,
    SubstrateUnavailableError,
    QuotaExceededError,
    CorruptRecordError,
    StoreResolutionError,
    ErrorKind,
)
from .storage import CollectionStore, MemorySubstrate, FileSubstrate, create_substrate, default_substrate
from .sync import attach, local_sync, SyncOptions
from .model import Model, Collection

__all__ = [
    "LocalStoreError",
    "SubstrateUnavailableError",
    "QuotaExceededError",
    "CorruptRecordError",
    "StoreResolutionError",
    "ErrorKind",
    "CollectionStore",
    "MemorySubstrate",
    "FileSubstrate",
    "create_substrate",
    "default_substrate",
    "attach",
    "local_sync",
    "SyncOptions",
    "Model",
    "Collection",
]
