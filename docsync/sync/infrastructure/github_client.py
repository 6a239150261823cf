import json
from typing import Any
from urllib.parse import quote

from docsync.config.logger_config import logger
from docsync.config.settings import GITHUB_API_BASE
from docsync.sync.domain.errors import (
    MalformedResponseError,
    NotFoundError,
    RateLimitedError,
    RemoteApiError,
    UnexpectedShapeError,
)
from docsync.sync.domain.models import RemoteDirectory, RemoteEntry, RemoteFile
from docsync.sync.infrastructure.http_fetcher import LISTING_RETRY_POLICY, RetryingFetcher, RetryPolicy

GITHUB_JSON_MEDIA_TYPE = "application/vnd.github+json"


class GitHubContentsClient:
    def __init__(
        self,
        fetcher: RetryingFetcher,
        api_base: str = GITHUB_API_BASE,
        policy: RetryPolicy = LISTING_RETRY_POLICY,
    ) -> None:
        self.fetcher = fetcher
        self.api_base = api_base.rstrip("/")
        self.policy = policy

    def build_contents_url(self, repository_id: str, remote_path: str) -> str:
        owner, repo = repository_id.split("/")
        path = quote(remote_path.strip("/"), safe="/")
        return f"{self.api_base}/repos/{quote(owner)}/{quote(repo)}/contents/{path}"

    async def list_directory(self, repository_id: str, remote_path: str) -> list[RemoteEntry]:
        url = self.build_contents_url(repository_id, remote_path)
        logger.debug("Fetching repository contents: {}", url)
        text = await self.fetcher.fetch_text(url, accept=GITHUB_JSON_MEDIA_TYPE, policy=self.policy)
        entries = self._parse_listing(text, repository_id, remote_path)
        logger.info("Found {} items in {}", len(entries), remote_path or "/")
        return entries

    def _parse_listing(self, text: str, repository_id: str, remote_path: str) -> list[RemoteEntry]:
        if not text or not text.strip():
            raise MalformedResponseError(f"Empty response from GitHub API for path: {remote_path}")
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as exc:
            logger.error("Raw response (first 500 chars): {}", text[:500])
            raise MalformedResponseError(f"JSON parse error for path {remote_path}: {exc}") from exc

        if isinstance(parsed, dict) and parsed.get("message"):
            message = str(parsed["message"])
            if "rate limit" in message.lower():
                raise RateLimitedError(f"GitHub API rate limit exceeded: {message}")
            if "not found" in message.lower():
                raise NotFoundError(f"Repository or path not found: {repository_id}/{remote_path}")
            raise RemoteApiError(f"GitHub API error: {message}")

        if not isinstance(parsed, list):
            raise UnexpectedShapeError(
                f"Expected array response from GitHub API, got: {type(parsed).__name__}"
            )

        entries: list[RemoteEntry] = []
        for item in parsed:
            entry = self._to_entry(item)
            if entry is not None:
                entries.append(entry)
        return entries

    @staticmethod
    def _to_entry(item: Any) -> RemoteEntry | None:
        if not isinstance(item, dict) or not item.get("path") or not item.get("name"):
            raise UnexpectedShapeError(f"Unexpected listing entry: {item!r}")
        path = str(item["path"])
        name = str(item["name"])
        if item.get("type") == "dir":
            return RemoteDirectory(path=path, name=name)
        download_url = item.get("download_url")
        if not download_url:
            logger.warning("Skipping {}: no downloadable content ({})", path, item.get("type"))
            return None
        return RemoteFile(path=path, name=name, download_url=str(download_url))
