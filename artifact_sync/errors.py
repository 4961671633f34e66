"""
Exceptions raised by Artifact Sync.

Precondition errors abort a run before any file is touched. Everything that
goes wrong with a single file is handled at the entry level and only shows
up in the final counts.
"""

from typing import Optional


class ArtifactSyncError(Exception):
    """Base class for Artifact Sync errors."""


class PreconditionError(ArtifactSyncError):
    """A run can't start: no usable revision or manifest."""


class RevisionResolutionError(PreconditionError):
    """The revision to sync could not be determined."""


class ManifestNotFoundError(PreconditionError):
    """The server has no manifest for the requested revision."""

    def __init__(self, revision: str):
        super().__init__(f"Manifest not found for commit {revision}.")
        self.revision = revision


class ManifestTransportError(PreconditionError):
    """The manifest could not be downloaded or parsed."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class RevisionMismatchError(PreconditionError):
    """The manifest describes a different revision than the one requested."""

    def __init__(self, declared: str, requested: str):
        super().__init__(
            f"Manifest commit {declared} does not match requested commit {requested}."
        )
        self.declared = declared
        self.requested = requested


class UnsafePathError(ArtifactSyncError):
    """A manifest path points outside the destination root."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Refusing unsafe manifest path '{path}': {reason}")
        self.path = path
        self.reason = reason
