"""Domain models and deterministic rules for documentation sync."""

from docsync.sync.domain.models import (
    RemoteDirectory,
    RemoteEntry,
    RemoteFile,
    SourceConfig,
    SyncAllReport,
    SyncFailure,
    SyncResult,
)
from docsync.sync.domain.rules import matches, output_file_name, relative_remote_path, should_include_file
from docsync.sync.domain.transform import transform_content
from docsync.sync.domain.validation import validate_source_config

__all__ = [
    "matches",
    "output_file_name",
    "relative_remote_path",
    "RemoteDirectory",
    "RemoteEntry",
    "RemoteFile",
    "should_include_file",
    "SourceConfig",
    "SyncAllReport",
    "SyncFailure",
    "SyncResult",
    "transform_content",
    "validate_source_config",
]
