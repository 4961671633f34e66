#!/usr/bin/env python3
"""
Artifact Sync - download the public artifacts that belong to the current commit.

Resolves the tip of a branch with git, fetches that commit's manifest from the
artifact store and brings the destination tree in line with it. Files that
already match their digest are left alone.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Optional

from artifact_sync import __version__
from artifact_sync.config import SyncConfig
from artifact_sync.core.log import setup_logging
from artifact_sync.core.revision import resolve_revision
from artifact_sync.errors import PreconditionError, ManifestTransportError
from artifact_sync.manifest import Manifest, fetch_manifest, check_manifest_revision
from artifact_sync.sync import ArtifactSync, SyncResult

logger = logging.getLogger("artifact_sync.app")

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_CANCELLED = 130


class ArtifactSyncApp:
    """Main application controller."""

    def __init__(
        self,
        config: SyncConfig,
        destination: Path,
        revision: Optional[str] = None,
        manifest_path: Optional[Path] = None,
        repo: Optional[Path] = None,
        show_progress: bool = True,
        log_handler=None,
        revision_resolver: Callable[..., str] = resolve_revision,
    ):
        self.config = config
        self.destination = Path(destination)
        self.revision = revision
        self.manifest_path = manifest_path
        self.repo = repo
        self.revision_resolver = revision_resolver
        self.sync = ArtifactSync(config, show_progress=show_progress, log_handler=log_handler)
        self.result: Optional[SyncResult] = None

    def resolve_revision(self) -> str:
        """
        Use the explicit revision if given, otherwise ask git.

        git runs in `repo`, or in the current directory when it is unset.
        """
        if self.revision:
            return self.revision.strip()
        return self.revision_resolver(self.config.branch, cwd=self.repo)

    def load_manifest(self, revision: str) -> Manifest:
        """Fetch the manifest for a revision, or read the local one if configured."""
        if self.manifest_path is None:
            return fetch_manifest(self.config.base_url, revision, timeout=self.config.timeout)

        logger.info(f"Loading local manifest: {self.manifest_path}")
        try:
            return Manifest.load(self.manifest_path)
        except (OSError, ValueError) as e:
            raise ManifestTransportError(f"Failed to read manifest {self.manifest_path}: {e}") from e

    def run(self) -> int:
        """Run one sync. Returns the process exit code."""
        try:
            revision = self.resolve_revision()
            logger.info(
                f"Downloading public artifacts for commit {revision} from {self.config.base_url}"
            )
            manifest = self.load_manifest(revision)
            check_manifest_revision(manifest, revision)
        except PreconditionError as e:
            logger.error(str(e))
            return EXIT_FAILURE

        self.result = self.sync.sync(manifest, self.destination)

        if not self.result.success:
            logger.error(f"Artifact download failed for {self.result.failed} file(s).")
            return EXIT_FAILURE

        logger.info(
            f"Artifact download completed successfully. "
            f"Updated {self.result.updated} file(s), skipped {self.result.skipped}."
        )
        return EXIT_SUCCESS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Artifact Sync - download the artifacts published for a commit"
    )
    parser.add_argument("--base-url", help="Artifact store URL")
    parser.add_argument("--branch", help="Branch whose tip commit is synced (default: master)")
    parser.add_argument("--revision", help="Commit hash to sync (skips git lookup)")
    parser.add_argument(
        "--repo",
        type=Path,
        help="Git checkout to resolve the branch in (default: current directory)",
    )
    parser.add_argument(
        "--manifest",
        type=Path,
        help="Use a local manifest file instead of fetching it from the store",
    )
    parser.add_argument(
        "--dest",
        type=Path,
        default=Path.cwd(),
        help="Destination root (default: current directory)",
    )
    parser.add_argument("-j", "--jobs", type=int, help="Maximum concurrent downloads")
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Don't draw the progress line",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv=None) -> int:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = SyncConfig.from_env().with_overrides(
            base_url=args.base_url,
            branch=args.branch,
            max_parallel=args.jobs,
        )
    except ValueError as e:
        parser.error(str(e))

    handler = setup_logging(verbose=args.verbose)
    app = ArtifactSyncApp(
        config,
        destination=args.dest.resolve(),
        revision=args.revision,
        manifest_path=args.manifest,
        repo=args.repo,
        show_progress=not args.no_progress,
        log_handler=handler,
    )

    try:
        return app.run()
    except KeyboardInterrupt:
        print("\n\nCancelled by user.")
        return EXIT_CANCELLED


if __name__ == "__main__":
    sys.exit(main())
