"""
Artifact downloader for Artifact Sync.

Fetches one blob from the content-addressed store into its destination,
verifies size and digest, and retries with linear backoff.
"""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

import aiohttp

from ..core.constants import MAX_DOWNLOAD_ATTEMPTS, RETRY_BASE_DELAY, DOWNLOAD_CHUNK_SIZE
from ..core.hashing import sha256_file, digests_equal
from ..core.paths import delete_if_exists
from ..manifest import FileEntry

logger = logging.getLogger(__name__)


class DownloadAttemptError(Exception):
    """One download attempt failed; the caller may retry."""


@dataclass
class DownloadResult:
    """Result of downloading a single artifact."""
    success: bool
    file_path: Path
    message: str
    bytes_downloaded: int = 0
    attempts: int = 0


class ArtifactDownloader:
    """
    Downloads artifacts by digest.

    Blobs live at {base_url}/artifacts/{sha256}; the manifest path only
    decides where the bytes end up locally.
    """

    def __init__(
        self,
        base_url: str,
        max_attempts: int = MAX_DOWNLOAD_ATTEMPTS,
        retry_base_delay: float = RETRY_BASE_DELAY,
        chunk_size: int = DOWNLOAD_CHUNK_SIZE,
    ):
        self.base_url = base_url.rstrip("/")
        self.max_attempts = max_attempts
        self.retry_base_delay = retry_base_delay
        self.chunk_size = chunk_size

    def artifact_url(self, digest: str) -> str:
        return f"{self.base_url}/artifacts/{digest}"

    async def download(
        self,
        session: aiohttp.ClientSession,
        entry: FileEntry,
        destination: Path,
    ) -> DownloadResult:
        """
        Download one artifact with retries.

        Never raises for download problems: after the last failed attempt
        the destination is removed and an unsuccessful result is returned.
        """
        name = entry.display_name
        last_error = ""

        for attempt in range(1, self.max_attempts + 1):
            try:
                written = await self._download_once(session, entry, destination)
                return DownloadResult(
                    success=True,
                    file_path=destination,
                    message=f"OK: {name}",
                    bytes_downloaded=written,
                    attempts=attempt,
                )
            except asyncio.CancelledError:
                raise
            except Exception as e:
                last_error = str(e) or type(e).__name__
                logger.warning(f"Download attempt {attempt} for {name} failed: {last_error}")
                self._discard(destination)

            if attempt < self.max_attempts:
                await self._backoff(attempt)

        self._discard(destination)
        return DownloadResult(
            success=False,
            file_path=destination,
            message=f"ERR: {name} - failed after {self.max_attempts} attempts: {last_error}",
            attempts=self.max_attempts,
        )

    async def _backoff(self, attempt: int):
        await asyncio.sleep(self.retry_base_delay * attempt)

    async def _download_once(
        self,
        session: aiohttp.ClientSession,
        entry: FileEntry,
        destination: Path,
    ) -> int:
        """Single attempt. Returns bytes written, raises on any failure."""
        digest = entry.digest
        url = self.artifact_url(digest)

        async with session.get(url) as response:
            if response.status == 404:
                logger.error(f"Artifact blob {digest} not found.")
                raise DownloadAttemptError(f"Artifact blob {digest} not found.")
            if not 200 <= response.status < 300:
                raise DownloadAttemptError(
                    f"Failed to download artifact {digest} (HTTP {response.status})."
                )

            written = 0
            with open(destination, "wb") as f:
                async for chunk in response.content.iter_chunked(self.chunk_size):
                    f.write(chunk)
                    written += len(chunk)

        if entry.size > 0:
            actual_size = destination.stat().st_size
            if actual_size != entry.size:
                destination.unlink()
                raise DownloadAttemptError(
                    f"Downloaded artifact {digest} has size {actual_size}, expected {entry.size}."
                )

        loop = asyncio.get_running_loop()
        actual_digest = await loop.run_in_executor(None, sha256_file, destination)
        if not digests_equal(actual_digest, digest):
            destination.unlink()
            raise DownloadAttemptError(f"Hash mismatch for downloaded artifact {digest}.")

        return written

    def _discard(self, destination: Path):
        try:
            delete_if_exists(destination)
        except OSError as e:
            logger.warning(f"Failed to delete '{destination}' during retry cleanup: {e}")
