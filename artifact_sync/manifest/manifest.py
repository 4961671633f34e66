"""
Manifest classes for Artifact Sync.

A manifest lists every file that should exist for one commit:

    {
      "commit": "abc123...",
      "files": [
        {"path": "game/addons/base/x.vpk", "sha256": "deadbeef...", "size": 1024}
      ]
    }

Keys are matched case-insensitively.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path


def _lower_keys(data: dict) -> dict:
    return {str(k).lower(): v for k, v in data.items()}


@dataclass
class FileEntry:
    """A single file in the manifest."""
    path: str
    digest: str
    size: int = 0  # 0 = unknown, not checked

    @property
    def is_valid(self) -> bool:
        """Entries need both a path and a digest to be synced."""
        return bool(self.path.strip()) and bool(self.digest.strip())

    @property
    def display_name(self) -> str:
        return self.path or self.digest

    @classmethod
    def from_dict(cls, data: dict) -> "FileEntry":
        if not isinstance(data, dict):
            raise ValueError(f"File entry must be an object, got {type(data).__name__}")
        data = _lower_keys(data)
        for key in ("path", "sha256"):
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"File entry '{key}' must be a string, got {value!r}")
        size = data.get("size") or 0
        if isinstance(size, bool) or not isinstance(size, int) or size < 0:
            raise ValueError(f"Invalid size for '{data.get('path')}': {size!r}")
        return cls(
            path=data.get("path") or "",
            digest=data.get("sha256") or "",
            size=size,
        )


@dataclass
class Manifest:
    """
    The set of files published for one revision.

    Immutable once fetched; the sync engine only reads it.
    """
    revision: str
    files: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "Manifest":
        """
        Parse a manifest document.

        Raises:
            ValueError: if the document doesn't have the manifest shape
        """
        if not isinstance(data, dict):
            raise ValueError(f"Manifest must be a JSON object, got {type(data).__name__}")
        data = _lower_keys(data)

        revision = data.get("commit") or ""
        if not isinstance(revision, str):
            raise ValueError(f"Manifest commit must be a string, got {revision!r}")

        files = data.get("files") or []
        if not isinstance(files, list):
            raise ValueError("Manifest 'files' must be a list")

        return cls(revision=revision, files=[FileEntry.from_dict(f) for f in files])

    @classmethod
    def load(cls, path: Path) -> "Manifest":
        """
        Load a manifest from a local JSON file.

        Raises:
            OSError: if the file can't be read
            ValueError: if it isn't a valid manifest (json errors included)
        """
        with open(path, encoding="utf-8") as f:
            return cls.from_dict(json.load(f))
