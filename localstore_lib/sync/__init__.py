from .dispatcher import local_sync, execute, classify_error, SyncOptions, SyncResult
from .attach import attach

__all__ = ["local_sync", "execute", "classify_error", "SyncOptions", "SyncResult", "attach"]
