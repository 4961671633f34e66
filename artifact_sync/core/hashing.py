"""
File hashing for Artifact Sync.

Local files are identified by the SHA-256 of their content, the same digest
that addresses them in the remote store.
"""

import hashlib
import logging
from pathlib import Path

from .constants import HASH_CHUNK_SIZE

logger = logging.getLogger(__name__)


def sha256_file(path: Path, chunk_size: int = HASH_CHUNK_SIZE) -> str:
    """Return the lowercase hex SHA-256 of a file's content."""
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            digest.update(chunk)
    return digest.hexdigest()


def digests_equal(a: str, b: str) -> bool:
    """Compare two hex digests, ignoring case."""
    return a.strip().lower() == b.strip().lower()


def file_matches_hash(path: Path, expected_digest: str) -> bool:
    """
    Check whether a local file already has the expected content.

    Never raises: a file that can't be read is treated as not matching,
    which forces it to be downloaded again.
    """
    if not path.is_file():
        return False
    try:
        return digests_equal(sha256_file(path), expected_digest)
    except OSError as e:
        logger.warning(f"Failed to compute hash for {path}: {e}")
        return False
