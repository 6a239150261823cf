import posixpath
import re
from pathlib import PurePosixPath

from pathvalidate import sanitize_filename as lib_sanitize

from docsync.sync.domain.models import (
    PLAIN_MARKUP_EXTENSION,
    RICH_MARKUP_EXTENSION,
    RemoteFile,
    SourceConfig,
)


def _compile_pattern(pattern: str) -> re.Pattern[str]:
    parts = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


def matches(name: str, pattern: str) -> bool:
    """Whole-string, case-insensitive glob match supporting only `*` and `?`."""
    return _compile_pattern(pattern).fullmatch(name) is not None


def _matches_any(entry: RemoteFile, patterns: tuple[str, ...]) -> bool:
    return any(matches(entry.name, p) or matches(entry.path, p) for p in patterns)


def should_include_file(entry: RemoteFile, source: SourceConfig) -> bool:
    if PurePosixPath(entry.name).suffix not in source.file_extensions:
        return False
    if _matches_any(entry, source.exclude_patterns):
        return False
    if source.include_patterns:
        return _matches_any(entry, source.include_patterns)
    return True


def is_rich_markup(file_name: str) -> bool:
    return PurePosixPath(file_name).suffix == RICH_MARKUP_EXTENSION


def sanitize_segment(segment: str) -> str:
    safe_name = lib_sanitize(segment, replacement_text="_", platform="universal")
    if not safe_name:
        return "untitled"
    return safe_name


def relative_remote_path(remote_path: str, root: str) -> PurePosixPath:
    """Path of `remote_path` below `root`, with every segment made safe for the local filesystem."""
    root = root.strip("/")
    remote_path = remote_path.strip("/")
    relative = PurePosixPath(posixpath.relpath(remote_path, root) if root else remote_path)
    if not relative.parts or relative.parts[0] in (".", ".."):
        raise ValueError(f"Remote path '{remote_path}' is not below '{root}'")
    return PurePosixPath(*(sanitize_segment(part) for part in relative.parts))


def output_file_name(file_name: str, converted: bool) -> str:
    if converted and is_rich_markup(file_name):
        return str(PurePosixPath(file_name).with_suffix(PLAIN_MARKUP_EXTENSION))
    return file_name
