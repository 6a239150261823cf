"""Documentation sync package."""

from docsync.sync.domain.models import SourceConfig, SyncAllReport, SyncResult
from docsync.sync.run import (
    resolve_source,
    sync_all,
    sync_all_async,
    sync_key,
    sync_key_async,
    sync_source,
    sync_source_async,
)

__all__ = [
    "resolve_source",
    "SourceConfig",
    "sync_all",
    "sync_all_async",
    "sync_key",
    "sync_key_async",
    "sync_source",
    "sync_source_async",
    "SyncAllReport",
    "SyncResult",
]
