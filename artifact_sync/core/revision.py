"""
Revision lookup for Artifact Sync.

Artifacts are published per commit; the commit to sync is the tip of a branch
in the local git checkout.
"""

import subprocess
from pathlib import Path
from typing import Optional

from ..errors import RevisionResolutionError
from .constants import DEFAULT_BRANCH


def resolve_revision(branch: str = DEFAULT_BRANCH, cwd: Optional[Path] = None) -> str:
    """
    Resolve a branch name to a commit hash with `git rev-parse`.

    Args:
        branch: Branch (or any rev) to resolve
        cwd: Repository directory (defaults to the current directory)

    Returns:
        The commit hash, stripped

    Raises:
        RevisionResolutionError: git is missing, fails, or prints nothing
    """
    try:
        proc = subprocess.run(
            ["git", "rev-parse", branch],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        raise RevisionResolutionError(
            f"Failed to execute git to resolve commit hash for branch '{branch}': {e}"
        ) from e

    if proc.returncode != 0:
        detail = proc.stderr.strip()
        raise RevisionResolutionError(
            f"Failed to execute git to resolve commit hash for branch '{branch}'"
            + (f": {detail}" if detail else ".")
        )

    for line in proc.stdout.splitlines():
        if line.strip():
            return line.strip()

    raise RevisionResolutionError(f"git returned an empty commit hash for branch '{branch}'.")
