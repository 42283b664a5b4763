"""Shared test fixtures for httpcg tests.

Fixtures keep the process environment and logging configuration isolated so
proxy resolution and settings loading never depend on the machine running the
suite.
"""

import logging
import threading
import time
from collections.abc import Generator
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from httpcg import HTTPClientBuilder, new_builder, no_proxy


PROXY_ENV_VARS = [
    "HTTP_PROXY",
    "HTTPS_PROXY",
    "NO_PROXY",
    "ALL_PROXY",
    "http_proxy",
    "https_proxy",
    "no_proxy",
    "all_proxy",
    "REQUEST_METHOD",
]


@pytest.fixture(autouse=True)
def clean_proxy_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove proxy variables inherited from the test runner."""
    for name in PROXY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def direct_builder() -> HTTPClientBuilder:
    """Default builder that never routes through a proxy."""
    return new_builder().with_proxy(no_proxy)


@pytest.fixture
def restore_logging() -> Generator[None, None, None]:
    """Restore root and library logger state changed by setup_logging."""
    names = ["httpcg", "httpx", "httpcore", "h2", "hpack"]
    root = logging.getLogger()
    saved_root = (root.level, list(root.handlers))
    saved = {
        name: (logging.getLogger(name).level, logging.getLogger(name).propagate)
        for name in names
    }
    yield
    root.setLevel(saved_root[0])
    root.handlers = saved_root[1]
    for name, (level, propagate) in saved.items():
        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.propagate = propagate


class _SlowHandler(BaseHTTPRequestHandler):
    """Serves a 4 byte body, stalling before headers or body on request."""

    def do_GET(self) -> None:
        if self.path == "/slow-headers":
            time.sleep(1.0)
        self.send_response(200)
        self.send_header("Content-Length", "4")
        self.end_headers()
        self.wfile.flush()
        if self.path == "/slow-body":
            time.sleep(1.0)
        self.wfile.write(b"done")

    def log_message(self, format: str, *args: object) -> None:
        pass


class _QuietServer(ThreadingHTTPServer):
    daemon_threads = True

    def handle_error(self, request: object, client_address: object) -> None:
        # Clients that time out close the socket under the handler
        pass


@pytest.fixture
def slow_server() -> Generator[str, None, None]:
    """Local HTTP server whose responses can stall, yields its base URL."""
    server = _QuietServer(("127.0.0.1", 0), _SlowHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}"
    server.shutdown()
    server.server_close()
    thread.join()
