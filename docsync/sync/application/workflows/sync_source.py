import asyncio
import time
from contextlib import nullcontext
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Any, AsyncContextManager, Awaitable, Callable, Iterable, TypeVar

from tqdm import tqdm

from docsync.config.logger_config import logger
from docsync.sync.domain.errors import DocSyncError, SyncFailedError
from docsync.sync.domain.models import RemoteDirectory, RemoteFile, SourceConfig, SyncResult
from docsync.sync.domain.rules import (
    is_rich_markup,
    output_file_name,
    relative_remote_path,
    should_include_file,
)
from docsync.sync.domain.transform import transform_content
from docsync.sync.infrastructure.fs_sink import DocsTreeSink
from docsync.sync.infrastructure.github_client import GitHubContentsClient
from docsync.sync.infrastructure.http_fetcher import DOWNLOAD_RETRY_POLICY, RetryingFetcher, RetryPolicy

T = TypeVar("T")


@dataclass(frozen=True)
class SyncWorkflowConfig:
    max_concurrency: int | None = 8
    download_policy: RetryPolicy = DOWNLOAD_RETRY_POLICY
    show_progress: bool = True


async def _gather_or_cancel(coros: Iterable[Awaitable[Any]]) -> None:
    """Wait for every branch; on the first failure cancel the rest, wait for them, then re-raise."""
    tasks = [asyncio.ensure_future(coro) for coro in coros]
    if not tasks:
        return
    try:
        await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class SyncSourceWorkflow:
    def __init__(
        self,
        source: SourceConfig,
        contents_client: GitHubContentsClient,
        fetcher: RetryingFetcher,
        sink: DocsTreeSink,
        config: SyncWorkflowConfig | None = None,
    ) -> None:
        self.source = source
        self.contents_client = contents_client
        self.fetcher = fetcher
        self.sink = sink
        self.config = config or SyncWorkflowConfig()
        self._semaphore = (
            asyncio.Semaphore(self.config.max_concurrency) if self.config.max_concurrency else None
        )
        self._written: set[str] = set()

    def _request_slot(self) -> AsyncContextManager[Any]:
        return self._semaphore if self._semaphore is not None else nullcontext()

    async def run(self) -> SyncResult:
        source = self.source
        logger.info(
            "Syncing {} documentation: {} {} -> {} (convert={})",
            source.name,
            source.repository_id,
            source.source_path or "/",
            source.target_path,
            source.convert_format,
        )
        started = time.perf_counter()
        synced_at = datetime.now(timezone.utc).isoformat()
        self._written = set()

        await self._local_io(asyncio.to_thread(self.sink.reset), None)
        await self._local_io(asyncio.to_thread(self.sink.write_sync_info, source, synced_at), None)

        with tqdm(
            total=None,
            desc=f"Sync {source.key}",
            unit=" file",
            leave=True,
            disable=not self.config.show_progress,
        ) as progress:
            await self._sync_directory(source.source_path, progress)

        result = SyncResult(
            source_key=source.key,
            name=source.name,
            repository_id=source.repository_id,
            files_processed=len(self._written),
            target_path=source.target_path,
            duration_seconds=round(time.perf_counter() - started, 3),
            timestamp=datetime.now(timezone.utc).isoformat(),
            files=tuple(sorted(self._written)),
        )
        await self._local_io(asyncio.to_thread(self.sink.write_summary, result), None)
        logger.success(
            "Synced {}: {} files in {}s -> {}",
            source.name,
            result.files_processed,
            result.duration_seconds,
            source.target_path,
        )
        return result

    async def _local_io(self, awaitable: Awaitable[T], remote_path: str | None) -> T:
        try:
            return await awaitable
        except OSError as exc:
            raise SyncFailedError(self.source.key, remote_path, exc) from exc

    async def _remote(self, remote_path: str, call: Callable[[], Awaitable[T]]) -> T:
        try:
            async with self._request_slot():
                return await call()
        except SyncFailedError:
            raise
        except DocSyncError as exc:
            logger.error("Failed at {}: {}", remote_path, exc)
            raise SyncFailedError(self.source.key, remote_path, exc) from exc

    async def _sync_directory(self, remote_path: str, progress: tqdm) -> None:
        logger.debug("Processing directory: {}", remote_path or "/")
        entries = await self._remote(
            remote_path,
            lambda: self.contents_client.list_directory(self.source.repository_id, remote_path),
        )
        directories = [entry for entry in entries if isinstance(entry, RemoteDirectory)]
        files = [
            entry
            for entry in entries
            if isinstance(entry, RemoteFile) and should_include_file(entry, self.source)
        ]
        skipped = len(entries) - len(directories) - len(files)
        if skipped:
            logger.debug("Skipped {} filtered files in {}", skipped, remote_path or "/")

        await _gather_or_cancel(
            [self._sync_file(entry, progress) for entry in files]
            + [self._sync_subdirectory(entry, progress) for entry in directories]
        )
        logger.debug("Completed directory: {}", remote_path or "/")

    async def _sync_subdirectory(self, entry: RemoteDirectory, progress: tqdm) -> None:
        relative = self._relative(entry.path)
        await self._local_io(asyncio.to_thread(self.sink.ensure_directory, relative), entry.path)
        await self._sync_directory(entry.path, progress)

    async def _sync_file(self, entry: RemoteFile, progress: tqdm) -> None:
        content = await self._remote(
            entry.path,
            lambda: self.fetcher.fetch_text(entry.download_url, policy=self.config.download_policy),
        )
        convert = self.source.convert_format and is_rich_markup(entry.name)
        if convert:
            logger.debug("Converting MDX to Markdown: {}", entry.path)
            content = transform_content(content, True)

        relative = self._relative(entry.path)
        relative = relative.with_name(output_file_name(relative.name, convert))
        output_path = relative.as_posix()
        # Claimed before the write so concurrent siblings see it.
        if output_path in self._written:
            logger.warning(
                "{} maps to {}, which another file already wrote; the later write wins",
                entry.path,
                output_path,
            )
        self._written.add(output_path)
        await self._local_io(asyncio.to_thread(self.sink.write_document, relative, content), entry.path)

        progress.update(1)
        logger.info("Processed: {} -> {}", entry.path, relative.as_posix())

    def _relative(self, remote_path: str) -> PurePosixPath:
        try:
            return relative_remote_path(remote_path, self.source.source_path)
        except ValueError as exc:
            raise SyncFailedError(self.source.key, remote_path, exc) from exc
