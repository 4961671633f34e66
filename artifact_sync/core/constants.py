"""
Shared constants for Artifact Sync.
"""

# Content-addressed artifact store
DEFAULT_BASE_URL = "https://artifacts.sbox.game"

# Branch whose tip decides which manifest to fetch
DEFAULT_BRANCH = "master"

MAX_PARALLEL_DOWNLOADS = 32
MAX_DOWNLOAD_ATTEMPTS = 3

# Linear backoff: attempt N waits RETRY_BASE_DELAY * N seconds
RETRY_BASE_DELAY = 0.2

# Per-request timeout (seconds)
REQUEST_TIMEOUT = 300

DOWNLOAD_CHUNK_SIZE = 32768
HASH_CHUNK_SIZE = 1024 * 1024

# Terminal width used when output is redirected
FALLBACK_TERMINAL_WIDTH = 120
