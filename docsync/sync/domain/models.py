from dataclasses import dataclass, field
from typing import Any

from docsync.config.settings import GITHUB_WEB_BASE

PLAIN_MARKUP_EXTENSION = ".md"
RICH_MARKUP_EXTENSION = ".mdx"
DEFAULT_FILE_EXTENSIONS = (PLAIN_MARKUP_EXTENSION, RICH_MARKUP_EXTENSION)
DEFAULT_SOURCE_TYPE = "documentation"


@dataclass(frozen=True)
class SourceConfig:
    key: str
    name: str
    repository_id: str
    source_path: str
    target_path: str
    convert_format: bool = False
    file_extensions: tuple[str, ...] = DEFAULT_FILE_EXTENSIONS
    exclude_patterns: tuple[str, ...] = field(default_factory=tuple)
    include_patterns: tuple[str, ...] = field(default_factory=tuple)
    type: str = DEFAULT_SOURCE_TYPE

    @property
    def owner(self) -> str:
        return self.repository_id.split("/")[0]

    @property
    def repo(self) -> str:
        return self.repository_id.split("/")[1]

    @property
    def repository_url(self) -> str:
        return f"{GITHUB_WEB_BASE}/{self.repository_id}"


@dataclass(frozen=True)
class RemoteFile:
    path: str
    name: str
    download_url: str


@dataclass(frozen=True)
class RemoteDirectory:
    path: str
    name: str


RemoteEntry = RemoteFile | RemoteDirectory


@dataclass(frozen=True)
class SyncResult:
    source_key: str
    name: str
    repository_id: str
    files_processed: int
    target_path: str
    duration_seconds: float
    timestamp: str
    files: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "source_key": self.source_key,
            "name": self.name,
            "repository_id": self.repository_id,
            "files_processed": self.files_processed,
            "target_path": self.target_path,
            "duration_seconds": self.duration_seconds,
            "timestamp": self.timestamp,
            "files": list(self.files),
        }


@dataclass(frozen=True)
class SyncFailure:
    source_key: str
    error: str


@dataclass(frozen=True)
class SyncAllReport:
    results: tuple[SyncResult, ...]
    failures: tuple[SyncFailure, ...]

    @property
    def total(self) -> int:
        return len(self.results) + len(self.failures)

    @property
    def ok(self) -> bool:
        return not self.failures
