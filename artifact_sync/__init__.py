"""
Artifact Sync - reproduce a revision's binary artifacts from a content-addressed store.

This package downloads the files listed in a per-revision manifest, skipping
files whose local content already matches and verifying everything it fetches.

Import from submodules directly:
    from artifact_sync.config import SyncConfig
    from artifact_sync.manifest import Manifest, fetch_manifest
    from artifact_sync.sync import ArtifactSync
    from artifact_sync.ui import StatusLine
"""

__version__ = "0.1.0"
