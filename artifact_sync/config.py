"""
Configuration for Artifact Sync.

Defaults can be overridden from the environment:
- ARTIFACT_SYNC_BASE_URL: artifact store root URL
- ARTIFACT_SYNC_BRANCH: branch whose tip is synced
- ARTIFACT_SYNC_MAX_PARALLEL: concurrent downloads
"""

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from .core.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_BRANCH,
    MAX_PARALLEL_DOWNLOADS,
    MAX_DOWNLOAD_ATTEMPTS,
    RETRY_BASE_DELAY,
    REQUEST_TIMEOUT,
    DOWNLOAD_CHUNK_SIZE,
)

ENV_BASE_URL = "ARTIFACT_SYNC_BASE_URL"
ENV_BRANCH = "ARTIFACT_SYNC_BRANCH"
ENV_MAX_PARALLEL = "ARTIFACT_SYNC_MAX_PARALLEL"


@dataclass
class SyncConfig:
    """Configuration for an artifact sync run."""
    base_url: str = DEFAULT_BASE_URL
    branch: str = DEFAULT_BRANCH
    max_parallel: int = MAX_PARALLEL_DOWNLOADS
    max_attempts: int = MAX_DOWNLOAD_ATTEMPTS
    retry_base_delay: float = RETRY_BASE_DELAY
    timeout: float = REQUEST_TIMEOUT
    chunk_size: int = DOWNLOAD_CHUNK_SIZE

    def __post_init__(self):
        self.base_url = self.base_url.rstrip("/")
        if self.max_parallel < 1:
            raise ValueError(f"max_parallel must be at least 1, got {self.max_parallel}")
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SyncConfig":
        """Build a config from defaults plus any ARTIFACT_SYNC_* variables."""
        env = os.environ if environ is None else environ
        kwargs = {}

        if env.get(ENV_BASE_URL):
            kwargs["base_url"] = env[ENV_BASE_URL]
        if env.get(ENV_BRANCH):
            kwargs["branch"] = env[ENV_BRANCH]
        if env.get(ENV_MAX_PARALLEL):
            try:
                kwargs["max_parallel"] = int(env[ENV_MAX_PARALLEL])
            except ValueError:
                raise ValueError(
                    f"{ENV_MAX_PARALLEL} must be an integer, got {env[ENV_MAX_PARALLEL]!r}"
                ) from None

        return cls(**kwargs)

    def with_overrides(self, **overrides) -> "SyncConfig":
        """Copy with the given fields replaced; None values are ignored."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)
