from typing import Sequence


class DocSyncError(Exception):
    """Base class for every error raised by the sync engine."""


class FetchError(DocSyncError):
    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class NotFoundError(FetchError):
    pass


class RateLimitedError(FetchError):
    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(
            f"{message}. Set GITHUB_TOKEN (or PAT_TOKEN) or wait for the rate limit window to reset.",
            url,
        )


class UnexpectedStatusError(FetchError):
    def __init__(self, status: int, reason: str | None, url: str | None = None) -> None:
        super().__init__(f"HTTP {status}: {reason or 'unexpected status'}", url)
        self.status = status


class TransportExhaustedError(FetchError):
    def __init__(self, url: str, attempts: int, last_error: BaseException | None) -> None:
        super().__init__(f"Request failed after {attempts} attempts: {url} ({last_error!r})", url)
        self.attempts = attempts
        self.last_error = last_error


class TooManyRedirectsError(FetchError):
    pass


class RemoteApiError(DocSyncError):
    pass


class MalformedResponseError(DocSyncError):
    pass


class UnexpectedShapeError(DocSyncError):
    pass


class ConfigError(DocSyncError):
    pass


class ConfigFileNotFoundError(ConfigError):
    pass


class UnknownSourceError(ConfigError):
    def __init__(self, key: str, available: Sequence[str]) -> None:
        super().__init__(
            f"Source '{key}' not found in configuration. Available sources: {', '.join(available) or 'none'}"
        )
        self.key = key
        self.available = tuple(available)


class MissingFieldsError(ConfigError):
    def __init__(self, key: str, fields: Sequence[str]) -> None:
        super().__init__(f"Source '{key}' is missing required fields: {', '.join(fields)}")
        self.key = key
        self.fields = list(fields)


class InvalidRepositoryFormatError(ConfigError):
    def __init__(self, key: str, repository_id: str) -> None:
        super().__init__(
            f"Source '{key}' has invalid repository format '{repository_id}'. Expected: 'owner/repo'"
        )
        self.key = key
        self.repository_id = repository_id


class InvalidFieldTypeError(ConfigError):
    def __init__(self, key: str, field: str, expected: str) -> None:
        super().__init__(f"Source '{key}' field '{field}' must be {expected}")
        self.key = key
        self.field = field


class SyncFailedError(DocSyncError):
    """Wraps the first unrecovered error of a sync run."""

    def __init__(self, source_key: str, remote_path: str | None, cause: BaseException) -> None:
        where = f" at '{remote_path}'" if remote_path is not None else ""
        super().__init__(f"Sync of '{source_key}' failed{where}: {type(cause).__name__}: {cause}")
        self.source_key = source_key
        self.remote_path = remote_path
        self.cause = cause
