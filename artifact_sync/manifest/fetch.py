"""
Remote manifest fetching for Artifact Sync.
"""

import logging
from typing import Optional

import requests

from ..core.constants import REQUEST_TIMEOUT
from ..errors import (
    ManifestNotFoundError,
    ManifestTransportError,
    RevisionMismatchError,
)
from .manifest import Manifest

logger = logging.getLogger(__name__)


def manifest_url(base_url: str, revision: str) -> str:
    return f"{base_url.rstrip('/')}/manifests/{revision}.json"


def fetch_manifest(
    base_url: str,
    revision: str,
    timeout: float = REQUEST_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> Manifest:
    """
    Fetch the manifest published for a revision.

    Args:
        base_url: Artifact store root URL
        revision: Commit hash to fetch the manifest for
        timeout: Request timeout in seconds
        session: Optional requests session to reuse

    Returns:
        Parsed Manifest (revision not yet checked, see check_manifest_revision)

    Raises:
        ManifestNotFoundError: server answered 404
        ManifestTransportError: any other failure, including unparseable JSON
    """
    url = manifest_url(base_url, revision)
    logger.info(f"Fetching manifest: {url}")

    http = session or requests
    try:
        response = http.get(url, timeout=timeout)
    except requests.Timeout as e:
        raise ManifestTransportError(f"Timed out downloading manifest: {e}") from e
    except requests.RequestException as e:
        raise ManifestTransportError(f"Failed to download manifest: {e}") from e

    if response.status_code == 404:
        raise ManifestNotFoundError(revision)
    if not response.ok:
        raise ManifestTransportError(
            f"Failed to download manifest (HTTP {response.status_code}).",
            status=response.status_code,
        )

    try:
        return Manifest.from_dict(response.json())
    except ValueError as e:
        raise ManifestTransportError(f"Failed to deserialize manifest JSON: {e}") from e


def check_manifest_revision(manifest: Manifest, revision: str):
    """
    Make sure a manifest belongs to the requested revision.

    A mismatch means the server is serving inconsistent data; it is never
    retried.

    Raises:
        RevisionMismatchError
    """
    if manifest.revision.strip().lower() != revision.strip().lower():
        raise RevisionMismatchError(manifest.revision, revision)
