"""Pytest configuration and fixtures."""

import hashlib
import json
import logging
import tempfile
import threading
import time
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Optional

import pytest


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: tests that wait on real retry backoff"
    )


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


@dataclass
class Reply:
    """A scripted HTTP reply. content_length larger than body simulates a dropped connection."""
    status: int = 200
    body: bytes = b""
    content_length: Optional[int] = None


class ArtifactServer:
    """
    Local HTTP server standing in for the artifact store.

    Each path has a list of replies served in order; the last one repeats.
    Unknown paths answer 404.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []
        self.delay = 0.0
        self.in_flight = 0
        self.peak_in_flight = 0
        self._lock = threading.Lock()
        self._httpd = None
        self._thread = None

    @property
    def url(self) -> str:
        host, port = self._httpd.server_address[:2]
        return f"http://{host}:{port}"

    def script(self, path: str, *replies: Reply):
        self.routes[path] = list(replies)

    def add_blob(self, data: bytes) -> str:
        """Serve data under its digest. Returns the digest."""
        digest = sha256_hex(data)
        self.script(f"/artifacts/{digest}", Reply(200, data))
        return digest

    def add_manifest(self, revision: str, files: list):
        body = json.dumps({"commit": revision, "files": files}).encode()
        self.script(f"/manifests/{revision}.json", Reply(200, body))

    def requests_for(self, path: str) -> int:
        with self._lock:
            return self.requests.count(path)

    def blob_requests(self) -> list:
        with self._lock:
            return [p for p in self.requests if p.startswith("/artifacts/")]

    def next_reply(self, path: str) -> Reply:
        with self._lock:
            self.requests.append(path)
            self.in_flight += 1
            self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
            replies = self.routes.get(path)
            if not replies:
                return Reply(404, b"not found")
            if len(replies) > 1:
                return replies.pop(0)
            return replies[0]

    def finish_request(self):
        with self._lock:
            self.in_flight -= 1

    def start(self):
        server = self

        class Handler(BaseHTTPRequestHandler):
            def do_GET(self):
                reply = server.next_reply(self.path)
                try:
                    if server.delay:
                        time.sleep(server.delay)
                    self._send(reply)
                finally:
                    server.finish_request()

            def _send(self, reply):
                length = reply.content_length if reply.content_length is not None else len(reply.body)
                self.send_response(reply.status)
                self.send_header("Content-Type", "application/octet-stream")
                self.send_header("Content-Length", str(length))
                self.end_headers()
                self.wfile.write(reply.body)
                self.close_connection = True

            def log_message(self, format, *args):
                pass

        self._httpd = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
        self._httpd.daemon_threads = True
        self._thread = threading.Thread(target=self._httpd.serve_forever, daemon=True)
        self._thread.start()

    def stop(self):
        self._httpd.shutdown()
        self._httpd.server_close()
        self._thread.join(timeout=5)


@pytest.fixture
def artifact_server():
    server = ArtifactServer()
    server.start()
    yield server
    server.stop()


@pytest.fixture
def temp_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by setup_logging so they don't outlive captured streams."""
    logger = logging.getLogger("artifact_sync")
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
