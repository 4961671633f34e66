"""
Sync engine for Artifact Sync.

Brings a destination tree in line with a manifest: entries whose local file
already has the right digest are skipped, everything else is downloaded by a
bounded pool of concurrent tasks. A failing entry never stops the others.
"""

import asyncio
import logging
import ssl
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, TextIO

import aiohttp
import certifi

from ..config import SyncConfig
from ..core.hashing import file_matches_hash
from ..core.paths import resolve_destination, delete_if_exists
from ..errors import UnsafePathError
from ..manifest import Manifest, FileEntry
from ..ui.progress_display import StatusLine
from .downloader import ArtifactDownloader

logger = logging.getLogger(__name__)


class SyncOutcome(Enum):
    """What happened to one manifest entry. Values double as progress labels."""
    SKIPPED = "Skipped (up-to-date)"
    DOWNLOADED = "Downloaded"
    FAILED = "Failed"
    INVALID = "Skipped (invalid entry)"


@dataclass
class SyncResult:
    """Aggregate counts for a sync run. Invalid entries are also counted as skipped."""
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    invalid: int = 0

    @property
    def total(self) -> int:
        return self.updated + self.skipped + self.failed

    @property
    def success(self) -> bool:
        return self.failed == 0

    @classmethod
    def from_outcomes(cls, outcomes: List[SyncOutcome]) -> "SyncResult":
        counts = Counter(outcomes)
        return cls(
            updated=counts[SyncOutcome.DOWNLOADED],
            skipped=counts[SyncOutcome.SKIPPED] + counts[SyncOutcome.INVALID],
            failed=counts[SyncOutcome.FAILED],
            invalid=counts[SyncOutcome.INVALID],
        )


class ArtifactSync:
    """
    Synchronizes a destination directory with a manifest.

    Args:
        config: Sync configuration (store URL, parallelism, retries)
        show_progress: Draw the in-place status line
        log_handler: Logging handler to route through the status line while syncing
        progress_stream: Where the status line is drawn (default stdout)
    """

    def __init__(
        self,
        config: SyncConfig,
        show_progress: bool = True,
        log_handler=None,
        progress_stream: Optional[TextIO] = None,
    ):
        self.config = config
        self.show_progress = show_progress
        self.log_handler = log_handler
        self.progress_stream = progress_stream
        self.downloader = ArtifactDownloader(
            config.base_url,
            max_attempts=config.max_attempts,
            retry_base_delay=config.retry_base_delay,
            chunk_size=config.chunk_size,
        )

    def sync(self, manifest: Manifest, destination_root: Path) -> SyncResult:
        """
        Download every missing or stale file in the manifest.

        Returns:
            SyncResult with updated/skipped/failed counts
        """
        if not manifest.files:
            logger.warning("Manifest does not contain any files to download.")
            return SyncResult()

        total = len(manifest.files)
        progress = StatusLine(total, stream=self.progress_stream, enabled=self.show_progress)
        progress.report(0, total, "Starting downloads...")
        if self.log_handler is not None:
            self.log_handler.status_line = progress

        try:
            outcomes = asyncio.run(self._sync_async(manifest.files, Path(destination_root), progress))
        finally:
            progress.close()
            if self.log_handler is not None:
                self.log_handler.status_line = None

        return SyncResult.from_outcomes(outcomes)

    async def _sync_async(
        self,
        entries: List[FileEntry],
        root: Path,
        progress: StatusLine,
    ) -> List[SyncOutcome]:
        semaphore = asyncio.Semaphore(self.config.max_parallel)
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(limit=self.config.max_parallel, ssl=ssl_context)
        timeout = aiohttp.ClientTimeout(total=self.config.timeout)

        async with aiohttp.ClientSession(timeout=timeout, connector=connector) as session:
            return await asyncio.gather(*(
                self._sync_entry(session, semaphore, entry, root, progress)
                for entry in entries
            ))

    async def _sync_entry(
        self,
        session: aiohttp.ClientSession,
        semaphore: asyncio.Semaphore,
        entry: FileEntry,
        root: Path,
        progress: StatusLine,
    ) -> SyncOutcome:
        async with semaphore:
            try:
                outcome = await self._process_entry(session, entry, root)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Artifact download failed for {entry.display_name}: {e}")
                outcome = SyncOutcome.FAILED

        progress.file_completed(outcome.value, entry.display_name)
        return outcome

    async def _process_entry(
        self,
        session: aiohttp.ClientSession,
        entry: FileEntry,
        root: Path,
    ) -> SyncOutcome:
        if not entry.is_valid:
            logger.warning(
                f"Skipping manifest entry with missing path or hash: '{entry.path or '<empty>'}'."
            )
            return SyncOutcome.INVALID

        try:
            destination = resolve_destination(root, entry.path)
        except UnsafePathError as e:
            logger.error(str(e))
            return SyncOutcome.FAILED

        loop = asyncio.get_running_loop()
        if await loop.run_in_executor(None, file_matches_hash, destination, entry.digest):
            return SyncOutcome.SKIPPED

        destination.parent.mkdir(parents=True, exist_ok=True)

        result = await self.downloader.download(session, entry, destination)
        if result.success:
            return SyncOutcome.DOWNLOADED

        logger.debug(result.message)
        self._remove_partial(destination)
        return SyncOutcome.FAILED

    def _remove_partial(self, destination: Path):
        try:
            delete_if_exists(destination)
        except OSError as e:
            logger.warning(f"Failed to delete '{destination}' after failed download: {e}")
