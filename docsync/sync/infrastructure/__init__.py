"""Infrastructure adapters for documentation sync."""

from docsync.sync.infrastructure.config_file import load_docs_config
from docsync.sync.infrastructure.fs_sink import DocsTreeSink
from docsync.sync.infrastructure.github_client import GitHubContentsClient
from docsync.sync.infrastructure.http_fetcher import RetryingFetcher, RetryPolicy

__all__ = ["DocsTreeSink", "GitHubContentsClient", "load_docs_config", "RetryingFetcher", "RetryPolicy"]
