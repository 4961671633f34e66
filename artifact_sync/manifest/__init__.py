"""
Manifest management for Artifact Sync.

The manifest is a JSON document listing every file for one commit, with
SHA-256 digests and sizes.
"""

from .manifest import Manifest, FileEntry
from .fetch import fetch_manifest, check_manifest_revision, manifest_url

__all__ = [
    "Manifest",
    "FileEntry",
    "fetch_manifest",
    "check_manifest_revision",
    "manifest_url",
]
