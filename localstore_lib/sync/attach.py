"""Install local persistence on a model or collection type."""
from __future__ import annotations
import logging
from typing import Any, Optional

from localstore_lib.storage import CollectionStore, default_substrate
from localstore_lib.storage.interfaces import SubstrateProtocol
from .dispatcher import local_sync

logger = logging.getLogger(__name__)


def attach(target_type: Any, name: str, substrate: Optional[SubstrateProtocol] = None) -> CollectionStore:
    """Attach a `CollectionStore` named `name` to `target_type`.

    Sets `target_type.local_storage` to the new store and replaces
    `target_type.sync` with the local sync dispatcher. Records are kept in
    `substrate`, or in the process-wide default substrate when omitted.
    """
    store = CollectionStore(name, substrate if substrate is not None else default_substrate())
    target_type.local_storage = store
    target_type.sync = staticmethod(local_sync)
    logger.info("Attached local storage %r to %s", name, getattr(target_type, "__name__", target_type))
    return store
