"""Error taxonomy for the localstore adapter.

Substrates and the collection store raise the exceptions defined here. The
sync dispatcher is the only place they are caught; it turns them into an
`ErrorKind` plus a user-facing message for the error callback.
"""
from __future__ import annotations
from enum import Enum
from typing import Optional

# Code browsers attach to DOMException when local storage is full.
QUOTA_EXCEEDED_ERR = 22

PRIVATE_BROWSING_MESSAGE = "Private browsing is unsupported"
RECORD_NOT_FOUND_MESSAGE = "Record Not Found"


class ErrorKind(str, Enum):
    SUBSTRATE_UNAVAILABLE = "substrate_unavailable"
    QUOTA_EXCEEDED_PRIVATE_MODE = "quota_exceeded_private_mode"
    RECORD_NOT_FOUND = "record_not_found"
    GENERIC_STORAGE_ERROR = "generic_storage_error"


class LocalStoreError(Exception):
    """Base class for all errors raised by localstore."""


class SubstrateUnavailableError(LocalStoreError):
    """The key-value substrate is missing or unusable."""


class QuotaExceededError(LocalStoreError):
    """A write would exceed the substrate's configured quota."""

    def __init__(self, message: str = "Storage quota exceeded", code: int = QUOTA_EXCEEDED_ERR) -> None:
        super().__init__(message)
        self.code = code


class CorruptRecordError(LocalStoreError):
    """A stored entry could not be deserialized."""

    def __init__(self, key: str, reason: Optional[str] = None) -> None:
        msg = f"Stored entry {key!r} is not valid JSON"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)
        self.key = key


class StoreResolutionError(LocalStoreError):
    """Neither the record nor its collection has a store attached."""
