from __future__ import annotations
import asyncio
from dataclasses import replace
from typing import Any, Mapping

import aiohttp

from docsync.config.logger_config import logger
from docsync.config.settings import GITHUB_API_BASE, get_auth_token
from docsync.sync.application.workflows.sync_source import SyncSourceWorkflow, SyncWorkflowConfig
from docsync.sync.domain.errors import DocSyncError, UnknownSourceError
from docsync.sync.domain.models import SourceConfig, SyncAllReport, SyncFailure, SyncResult
from docsync.sync.domain.validation import validate_source_config
from docsync.sync.infrastructure.fs_sink import DocsTreeSink
from docsync.sync.infrastructure.github_client import GitHubContentsClient
from docsync.sync.infrastructure.http_fetcher import RetryingFetcher

_UNSET: Any = object()


def _build_connector() -> aiohttp.TCPConnector:
    return aiohttp.TCPConnector(limit=0, limit_per_host=10, ttl_dns_cache=300)


async def sync_source_async(
    source: SourceConfig,
    *,
    auth_token: str | None = _UNSET,
    api_base: str = GITHUB_API_BASE,
    workflow_config: SyncWorkflowConfig | None = None,
    show_progress: bool | None = None,
    session: aiohttp.ClientSession | None = None,
) -> SyncResult:
    if auth_token is _UNSET:
        auth_token = get_auth_token()
    if auth_token:
        logger.info("Using GitHub token for authentication")
    else:
        logger.warning("No GitHub token found; unauthenticated requests are heavily rate limited")

    config = workflow_config or SyncWorkflowConfig()
    if show_progress is not None:
        config = replace(config, show_progress=show_progress)

    async def _run(client_session: aiohttp.ClientSession) -> SyncResult:
        fetcher = RetryingFetcher(client_session, auth_token=auth_token)
        workflow = SyncSourceWorkflow(
            source=source,
            contents_client=GitHubContentsClient(fetcher, api_base=api_base),
            fetcher=fetcher,
            sink=DocsTreeSink(source.target_path),
            config=config,
        )
        return await workflow.run()

    if session is not None:
        return await _run(session)
    async with aiohttp.ClientSession(connector=_build_connector()) as owned_session:
        return await _run(owned_session)


def sync_source(source: SourceConfig, **kwargs: Any) -> SyncResult:
    return asyncio.run(sync_source_async(source, **kwargs))


def resolve_source(docs_config: Mapping[str, Mapping[str, Any]], key: str) -> SourceConfig:
    if key not in docs_config:
        raise UnknownSourceError(key, list(docs_config))
    return validate_source_config(docs_config[key], key)


async def sync_key_async(docs_config: Mapping[str, Mapping[str, Any]], key: str, **kwargs: Any) -> SyncResult:
    # Validate before any network activity.
    source = resolve_source(docs_config, key)
    return await sync_source_async(source, **kwargs)


def sync_key(docs_config: Mapping[str, Mapping[str, Any]], key: str, **kwargs: Any) -> SyncResult:
    return asyncio.run(sync_key_async(docs_config, key, **kwargs))


async def sync_all_async(docs_config: Mapping[str, Mapping[str, Any]], **kwargs: Any) -> SyncAllReport:
    """Sync every configured source one after another; a failing source does not stop the others."""
    results: list[SyncResult] = []
    failures: list[SyncFailure] = []
    logger.info("Syncing documentation for all {} sources...", len(docs_config))
    for key in docs_config:
        try:
            results.append(await sync_key_async(docs_config, key, **kwargs))
        except DocSyncError as exc:
            logger.error("Failed to sync {}: {}", key, exc)
            failures.append(SyncFailure(source_key=key, error=str(exc)))
    logger.info("Sync completed: {}/{} succeeded", len(results), len(docs_config))
    return SyncAllReport(results=tuple(results), failures=tuple(failures))


def sync_all(docs_config: Mapping[str, Mapping[str, Any]], **kwargs: Any) -> SyncAllReport:
    return asyncio.run(sync_all_async(docs_config, **kwargs))
