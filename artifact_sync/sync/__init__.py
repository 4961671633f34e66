"""
Sync operations module.

Handles skip/fetch decisions, artifact downloads and result aggregation.
"""

from .downloader import ArtifactDownloader, DownloadResult, DownloadAttemptError
from .engine import ArtifactSync, SyncOutcome, SyncResult

__all__ = [
    # Downloader
    "ArtifactDownloader",
    "DownloadResult",
    "DownloadAttemptError",
    # Engine
    "ArtifactSync",
    "SyncOutcome",
    "SyncResult",
]
