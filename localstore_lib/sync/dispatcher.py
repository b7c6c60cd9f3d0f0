"""Sync dispatcher: route framework verbs to a collection store.

`local_sync(method, record, options)` replaces a model's persistence hook.
It resolves the record's store, runs the store operation matching the verb
and reports the outcome through the `success`/`error`/`complete` callbacks.
Store failures never propagate to the caller; they are classified and
handed to the error callback instead.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Tuple, Union

from localstore_lib.errors import (
    QUOTA_EXCEEDED_ERR,
    PRIVATE_BROWSING_MESSAGE,
    RECORD_NOT_FOUND_MESSAGE,
    ErrorKind,
    LocalStoreError,
)
from localstore_lib.storage.collection_store import CollectionStore, is_blank_id
from localstore_lib.storage.interfaces import SyncRecord

logger = logging.getLogger(__name__)


@dataclass
class SyncOptions:
    success: Optional[Callable[[Any], Any]] = None
    error: Optional[Callable[[str], Any]] = None
    complete: Optional[Callable[[Any], Any]] = None

    @classmethod
    def coerce(cls, options: Union["SyncOptions", Mapping[str, Any], None]) -> "SyncOptions":
        if options is None:
            return cls()
        if isinstance(options, SyncOptions):
            return options
        return cls(
            success=options.get("success"),
            error=options.get("error"),
            complete=options.get("complete"),
        )


@dataclass
class SyncResult:
    """Outcome of one store operation: a value, or an error kind and message."""

    value: Any = None
    kind: Optional[ErrorKind] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return produced(self.value)


def produced(value: Any) -> bool:
    """True when a store operation yielded a result.

    Containers count even when empty, so reading an empty collection is a
    success with `[]`; None, False and empty scalars count as no result.
    """
    if isinstance(value, (list, tuple, dict)):
        return True
    return bool(value)


def classify_error(exc: BaseException, storage_size: Callable[[], int]) -> Tuple[ErrorKind, Optional[str]]:
    """Map a failure raised by a store operation to an error kind and message.

    A quota error on a substrate holding no keys at all is what browsers
    report in private mode, so it gets its own message. `storage_size` is
    only consulted for quota errors.
    """
    if getattr(exc, "code", None) == QUOTA_EXCEEDED_ERR and storage_size() == 0:
        return ErrorKind.QUOTA_EXCEEDED_PRIVATE_MODE, PRIVATE_BROWSING_MESSAGE
    return ErrorKind.GENERIC_STORAGE_ERROR, str(exc) or None


def execute(store: CollectionStore, method: str, record: Any) -> SyncResult:
    """Run the store operation for `method` and capture its outcome."""
    try:
        if method == "read":
            if is_blank_id(record.get_id()):
                value = store.find_all()
            else:
                value = store.find(record)
        elif method == "create":
            value = store.create(record)
        elif method == "update":
            value = store.update(record)
        elif method == "delete":
            value = store.destroy(record)
        else:
            logger.warning("Ignoring unknown sync method %r for %s", method, store.name)
            value = None
    except Exception as e:
        if isinstance(e, LocalStoreError):
            logger.warning("Sync %s on %s failed: %s", method, store.name, e)
        else:
            logger.exception("Unexpected failure during sync %s on %s", method, store.name)
        kind, message = classify_error(e, store.size)
        return SyncResult(kind=kind, message=message or RECORD_NOT_FOUND_MESSAGE)

    if not produced(value):
        return SyncResult(value=value, kind=ErrorKind.RECORD_NOT_FOUND, message=RECORD_NOT_FOUND_MESSAGE)
    return SyncResult(value=value)


def local_sync(
    method: str,
    record: SyncRecord,
    options: Union[SyncOptions, Mapping[str, Any], None] = None,
) -> None:
    """Persistence hook installed by `attach`.

    Exactly one of `success` and `error` is called when either is given;
    `complete` is always called last with the raw result. Raises
    `StoreResolutionError` when the record has no store attached.
    """
    store = record.resolve_store()
    result = execute(store, method, record)
    opts = SyncOptions.coerce(options)

    if result.ok and opts.success:
        opts.success(result.value)
    elif opts.error:
        opts.error(result.message or RECORD_NOT_FOUND_MESSAGE)

    if opts.complete:
        opts.complete(result.value)
    return None
