"""
Destination path handling for Artifact Sync.
"""

import re
from pathlib import Path, PureWindowsPath

from ..errors import UnsafePathError

_SEPARATORS = re.compile(r"[\\/]")


def resolve_destination(root: Path, rel_path: str) -> Path:
    """
    Join a manifest path onto the destination root.

    Manifest paths use "/" separators and must stay inside the root:
    absolute paths, drive letters and ".." segments are rejected.

    Raises:
        UnsafePathError: if the path would land outside root
    """
    if rel_path.startswith(("/", "\\")) or PureWindowsPath(rel_path).drive:
        raise UnsafePathError(rel_path, "absolute path")

    parts = [p for p in _SEPARATORS.split(rel_path) if p not in ("", ".")]
    if ".." in parts:
        raise UnsafePathError(rel_path, "parent directory reference")
    if not parts:
        raise UnsafePathError(rel_path, "empty path")

    return root.joinpath(*parts)


def delete_if_exists(path: Path) -> bool:
    """
    Remove a file if present.

    Returns:
        True if a file was removed
    """
    if not path.is_file():
        return False
    path.unlink()
    return True
