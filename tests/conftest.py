"""
pytest configuration and fixtures.
"""

import socket
import threading
import uuid
from datetime import datetime, timezone
from typing import Generator
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tinyhttpd import HTTPServer, ServerConfig
from tinyhttpd.core import Connection
from tinyhttpd.handlers import TemplateContext


FIXED_NOW = datetime(2026, 10, 19, 11, 44, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request as a browser would send it."""
    return (
        b"GET /index.html HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: text/html\r\n"
        b"\r\n"
    )


@pytest.fixture
def missing_path() -> str:
    """A request path that does not exist at the filesystem root."""
    return f"/tinyhttpd-missing-{uuid.uuid4().hex}.html"


@pytest.fixture
def document_root(tmp_path: Path) -> Path:
    """An empty document root."""
    root = tmp_path / "www"
    root.mkdir()
    return root


@pytest.fixture
def template_context() -> TemplateContext:
    """Template values pinned to a known instant."""
    return TemplateContext(timestamp=FIXED_NOW, server_name="TestServer/0.1")


@pytest.fixture
def config(document_root: Path) -> ServerConfig:
    """Default test server configuration."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        document_root=str(document_root),
        server_name="TestServer/0.1",
        template_timezone="UTC",
        linger_timeout=0.0,
        log_level="WARNING",
    )


def exchange(handler, request: bytes, close_client_write: bool = False) -> bytes:
    """
    Run one request through a handler over a socketpair.

    Returns everything the server wrote before closing.
    """
    server_sock, client_sock = socket.socketpair()
    try:
        conn = Connection(socket=server_sock, address=("127.0.0.1", 50000), linger_timeout=0.0)
        client_sock.sendall(request)
        if close_client_write:
            client_sock.shutdown(socket.SHUT_WR)

        handler.handle(conn)

        chunks = []
        while True:
            chunk = client_sock.recv(65536)
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks)
    finally:
        client_sock.close()


def split_response(raw: bytes) -> tuple:
    """Split a raw response into (head lines, body)."""
    head, _, body = raw.partition(b"\r\n\r\n")
    return head.decode("latin-1").split("\r\n"), body


class RunningServer:
    """Test server helper that runs in a background thread."""

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        """Start server in background thread and wait until it listens."""
        self._thread = threading.Thread(
            target=self.server.run,
            kwargs={"configure_logging": False},
            daemon=True
        )
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def request(self, raw: bytes) -> bytes:
        """Send raw request bytes and read the response until close."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=5.0) as s:
            s.sendall(raw)
            chunks = []
            while True:
                chunk = s.recv(65536)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks)

    def stop(self):
        """Stop the server."""
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)


@pytest.fixture
def running_server(config: ServerConfig) -> Generator[RunningServer, None, None]:
    """A real listener on an OS-assigned port."""
    srv = RunningServer(HTTPServer(config))
    srv.start()

    yield srv

    srv.stop()
