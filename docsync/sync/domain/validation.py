from typing import Any, Mapping

from docsync.sync.domain.errors import (
    InvalidFieldTypeError,
    InvalidRepositoryFormatError,
    MissingFieldsError,
)
from docsync.sync.domain.models import DEFAULT_FILE_EXTENSIONS, DEFAULT_SOURCE_TYPE, SourceConfig

REQUIRED_FIELDS = ("name", "repositoryId", "sourcePath", "targetPath")

# Keys used by older config files.
LEGACY_ALIASES = {
    "repository": "repositoryId",
    "convertMdx": "convertFormat",
}


def _normalize_keys(raw: Mapping[str, Any]) -> dict[str, Any]:
    data = dict(raw)
    for legacy, current in LEGACY_ALIASES.items():
        if legacy in data and current not in data:
            data[current] = data[legacy]
    return data


def _string_tuple(data: dict[str, Any], key: str, field: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = data.get(field)
    if value is None:
        return default
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        raise InvalidFieldTypeError(key, field, "a list of strings")
    return tuple(value)


def validate_source_config(raw: Mapping[str, Any], key: str) -> SourceConfig:
    """
    Check a raw source entry and return a normalized `SourceConfig`.

    `raw` is left untouched. Every missing required field is reported at once.
    """
    if not isinstance(raw, Mapping):
        raise InvalidFieldTypeError(key, "<source>", "an object")
    data = _normalize_keys(raw)

    missing = [field for field in REQUIRED_FIELDS if not data.get(field)]
    if missing:
        raise MissingFieldsError(key, missing)

    repository_id = str(data["repositoryId"]).strip()
    segments = repository_id.split("/")
    if len(segments) != 2 or not all(segments):
        raise InvalidRepositoryFormatError(key, repository_id)

    convert_format = data.get("convertFormat", False)
    if not isinstance(convert_format, bool):
        raise InvalidFieldTypeError(key, "convertFormat", "a boolean")

    return SourceConfig(
        key=key,
        name=str(data["name"]),
        repository_id=repository_id,
        source_path=str(data["sourcePath"]).strip("/"),
        target_path=str(data["targetPath"]),
        convert_format=convert_format,
        file_extensions=_string_tuple(data, key, "fileExtensions", DEFAULT_FILE_EXTENSIONS),
        exclude_patterns=_string_tuple(data, key, "excludePatterns", ()),
        include_patterns=_string_tuple(data, key, "includePatterns", ()),
        type=str(data.get("type") or DEFAULT_SOURCE_TYPE),
    )
