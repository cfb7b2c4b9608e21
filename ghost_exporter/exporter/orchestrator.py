"""
Main sync orchestrator.

Drives one export run: fetches content, loads the sync watermark, resolves
every referenced image, writes or restores every document and finally
advances the watermark.
"""

import asyncio
import os
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple

from .cache import CacheStore, DirectoryCacheStore, SyncState, format_timestamp
from .client import GhostContentClient
from .content import ContentItem, ContentKind
from .downloader import AssetDownloader
from .lexer import get_lexer
from .renderer import ContentRenderer, OutputDocument
from .rewrite import PathRewriter
from .scanner import AssetScanner
from .staleness import StalenessOracle
from ..errors import (
    AssetDownloadError,
    BuildFailure,
    ContentFetchError,
    OutputWriteError,
    SyncFailedError,
)
from ..utils.log import get_logger, print_info, print_success
from ..utils.paths import ensure_parent_dir, normalize_key, resolve_path

if TYPE_CHECKING:
    from ..config import ExportConfig


class SyncPhase(str, Enum):
    """Stages of a sync run, in order."""

    IDLE = "idle"
    FETCHING = "fetching"
    TIMESTAMP_LOADED = "timestamp_loaded"
    ASSETS_RESOLVED = "assets_resolved"
    WRITING = "writing"
    FINALIZED = "finalized"


DOWNLOADED = "downloaded"
RESTORED = "restored"
GENERATED = "generated"


@dataclass
class SyncReport:
    """Results of a sync run."""

    items: Dict[str, int] = field(default_factory=dict)
    assets_downloaded: int = 0
    assets_restored: int = 0
    documents_written: int = 0
    documents_restored: int = 0
    outputs: List[str] = field(default_factory=list)
    previous_sync: str = ""
    synced_at: str = ""
    duration_seconds: float = 0.0


class SyncOrchestrator:
    """
    Incremental Ghost-to-markdown exporter.

    Collaborators (content client, cache store, downloader, clock) can be
    injected; defaults are built from the configuration.
    """

    def __init__(
        self,
        config: "ExportConfig",
        client: Optional[GhostContentClient] = None,
        cache: Optional[CacheStore] = None,
        downloader: Optional[AssetDownloader] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Validated export configuration
            client: Content API client
            cache: Build cache store
            downloader: Image downloader
            clock: Returns the current instant, used for the new watermark
        """
        self.config = config
        self.base_dir = os.path.abspath(config.base_dir)
        self.logger = get_logger("exporter")

        self.client = client or GhostContentClient(
            config.ghost_url,
            config.ghost_key,
            version=config.api_version,
            timeout=config.timeout
        )
        self.cache = cache or DirectoryCacheStore(self.base_dir, config.cache_dir)
        self.downloader = downloader or AssetDownloader(
            timeout=config.timeout,
            concurrency=config.concurrency
        )
        self.clock = clock or (lambda: datetime.now(timezone.utc))

        self.rewriter = PathRewriter(config.remote_base, config.local_assets_dir)
        self.scanner = AssetScanner(config.remote_base, get_lexer(config.asset_lexer))
        self.renderer = ContentRenderer(config, self.rewriter)
        self.sync_state = SyncState(self.cache, self.base_dir, config.state_file)

        self.phase = SyncPhase.IDLE

    async def run(self) -> SyncReport:
        """
        Run one full sync.

        Returns:
            SyncReport with statistics

        Raises:
            BuildFailure: If fetching fails, or any asset or document task
                fails; the sync watermark is not advanced in either case
        """
        start_time = time.time()
        report = SyncReport()

        print_info(f"Exporting {self.config.ghost_url} into {self.base_dir}")

        try:
            self.phase = SyncPhase.FETCHING
            content = await self._fetch_all()
            report.items = {kind.value: len(items) for kind, items in content.items()}

            self.phase = SyncPhase.TIMESTAMP_LOADED
            last_sync = await self.sync_state.load()
            report.previous_sync = format_timestamp(last_sync)
            oracle = StalenessOracle(self.cache, last_sync)

            items = [item for kind_items in content.values() for item in kind_items]
            catalog = content.get(ContentKind.POST, []) + content.get(ContentKind.PAGE, [])

            self.phase = SyncPhase.ASSETS_RESOLVED
            assets = self._plan_assets(self.scanner.scan(items))
            paths = self._plan_outputs(items)

            self.phase = SyncPhase.WRITING
            results = await asyncio.gather(
                *(self._sync_asset(url, dest) for url, dest in assets),
                *(self._sync_document(item, path, oracle, catalog) for item, path in paths),
                return_exceptions=True
            )
            self._collect(report, results[:len(assets)], results[len(assets):])
            report.outputs = [path for _, path in paths]

            synced_at = self.clock()
            report.synced_at = await self.sync_state.save(synced_at)
            self.phase = SyncPhase.FINALIZED

        finally:
            await self.client.stop()
            await self.downloader.stop()

        report.duration_seconds = time.time() - start_time

        print_success(
            f"Export complete! {report.documents_written} generated, "
            f"{report.documents_restored} restored, "
            f"{report.assets_downloaded} images downloaded in "
            f"{report.duration_seconds:.1f}s"
        )
        return report

    async def _fetch_all(self) -> Dict[ContentKind, List[ContentItem]]:
        """Fetch every enabled kind concurrently; any failure is fatal."""
        kinds = self.config.enabled_kinds()
        results = await asyncio.gather(
            *(self.client.fetch_kind(kind) for kind in kinds),
            return_exceptions=True
        )

        content: Dict[ContentKind, List[ContentItem]] = {}
        for kind, result in zip(kinds, results):
            if isinstance(result, BuildFailure):
                raise result
            if isinstance(result, Exception):
                raise ContentFetchError(kind.value, result) from result
            content[kind] = result
        return content

    def _plan_outputs(self, items: List[ContentItem]) -> List[Tuple[ContentItem, str]]:
        """Pair every item with its output path; two items may not share a path."""
        planned: Dict[str, ContentItem] = {}
        for item in items:
            path = self.renderer.output_path(item)
            if path in planned:
                raise BuildFailure(
                    "Duplicate output path",
                    {"path": path, "first": planned[path].slug, "second": item.slug}
                )
            planned[path] = item
        return [(item, path) for path, item in planned.items()]

    def _plan_assets(self, urls: List[str]) -> List[Tuple[str, str]]:
        """Pair every asset URL with its destination; each destination is fetched once."""
        planned: Dict[str, str] = {}
        for url in urls:
            dest = self.rewriter.asset_destination(url)
            if dest in planned:
                self.logger.debug(f"Skipping {url}: {dest} already comes from {planned[dest]}")
                continue
            planned[dest] = url
        return [(url, dest) for dest, url in planned.items()]

    async def _sync_asset(self, url: str, dest: str) -> str:
        """Restore one image from the cache, or download and cache it."""
        try:
            normalize_key(dest)
        except ValueError as e:
            raise AssetDownloadError(url, dest, str(e)) from e

        try:
            if await self.cache.has(dest) and await self.cache.restore(dest):
                self.logger.info(f"Restored from cache: {dest}")
                return RESTORED
        except OSError as e:
            raise OutputWriteError(dest, e) from e

        await self.downloader.download(url, resolve_path(self.base_dir, dest))

        try:
            await self.cache.save(dest)
        except OSError as e:
            raise OutputWriteError(dest, e) from e

        self.logger.info(f"Downloading and caching: {dest}")
        return DOWNLOADED

    async def _sync_document(
        self,
        item: ContentItem,
        path: str,
        oracle: StalenessOracle,
        catalog: List[ContentItem]
    ) -> str:
        """Restore one document from the cache, or render, write and cache it."""
        try:
            if await oracle.can_reuse(item, path) and await self.cache.restore(path):
                self.logger.info(f"Restored from cache: {path}")
                return RESTORED

            document = self.renderer.render(item, catalog)
            self._write(document)
            await self.cache.save(path)
        except OSError as e:
            raise OutputWriteError(path, e) from e

        self.logger.info(f"Generated {item.kind.value}: {item.display_title}")
        return GENERATED

    def _write(self, document: OutputDocument) -> None:
        file_path = resolve_path(self.base_dir, document.path)
        ensure_parent_dir(file_path)
        with open(file_path, 'w', encoding='utf-8') as f:
            f.write(document.text)

    def _collect(self, report: SyncReport, asset_results: list, document_results: list) -> None:
        """Tally task outcomes; raise once every task has settled if any failed."""
        failures: List[BuildFailure] = []

        for result in list(asset_results) + list(document_results):
            if isinstance(result, BuildFailure):
                self.logger.error(str(result))
                failures.append(result)
            elif isinstance(result, BaseException):
                raise result

        report.assets_downloaded = asset_results.count(DOWNLOADED)
        report.assets_restored = asset_results.count(RESTORED)
        report.documents_written = document_results.count(GENERATED)
        report.documents_restored = document_results.count(RESTORED)

        if failures:
            raise SyncFailedError(failures)
