"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Generator

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from simplewebserver import WebServer, ServerConfig, ConnectionHandler
from simplewebserver.core import Connection


INDEX_HTML = "<h1>Hi</h1>\n"

TAGGED_HTML = (
    "<html>\n"
    "<p>Served by <cs371server> on <cs371date></p>\n"
    "<p>plain line</p>\n"
    "</html>\n"
)

NOT_FOUND_HTML = (
    "<html>\n"
    "<h1>Not here: <cs371date></h1>\n"
    "</html>\n"
)

# Not a valid PNG, but every byte value appears, including \r and \n
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + bytes(range(256)) * 4


@pytest.fixture
def web_root(tmp_path: Path) -> Path:
    """Document root with a few pages and images."""
    root = tmp_path / "www"
    root.mkdir()
    (root / "index.html").write_text(INDEX_HTML)
    (root / "tagged.html").write_text(TAGGED_HTML)
    (root / "photo.png").write_bytes(PNG_BYTES)
    (root / "anim.gif").write_bytes(b"GIF89a\x01\x00\x01\x00")
    (root / "cat.jpg").write_bytes(b"\xff\xd8\xff\xe0jpeg")
    (root / "favicon.ico").write_bytes(b"\x00\x00\x01\x00icon")
    (root / "notes.txt").write_text("just text\n")
    (root / "sub").mkdir()
    (root / "sub" / "page.html").write_text("<p>nested</p>\n")
    return root


@pytest.fixture
def not_found_doc(tmp_path: Path) -> Path:
    """Not-found page, kept outside the document root."""
    path = tmp_path / "404.html"
    path.write_text(NOT_FOUND_HTML)
    return path


@pytest.fixture
def config(web_root: Path, not_found_doc: Path) -> ServerConfig:
    """Configuration pointing at the test document root."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        root_dir=str(web_root),
        not_found_document=str(not_found_doc),
        poll_interval=0.01,
        server_name="TestServer",
        server_version="TestServer 9.9",
    )


@pytest.fixture
def handler(config: ServerConfig) -> ConnectionHandler:
    return ConnectionHandler(config)


@pytest.fixture
def socket_pair() -> Generator[tuple[Connection, socket.socket], None, None]:
    """A server-side Connection and the client socket talking to it."""
    server_sock, client_sock = socket.socketpair()
    conn = Connection(
        socket=server_sock,
        address=("127.0.0.1", 50000),
        poll_interval=0.01,
    )
    yield conn, client_sock
    client_sock.close()
    conn.close()


def read_all(sock: socket.socket) -> bytes:
    """Read from a socket until the peer closes it."""
    chunks = []
    while True:
        chunk = sock.recv(65536)
        if not chunk:
            return b"".join(chunks)
        chunks.append(chunk)


@pytest.fixture
def exchange(handler: ConnectionHandler, socket_pair):
    """
    Send raw request bytes through the handler and return the raw response.

    The client half-closes after sending, the way a one-shot client does.
    """
    conn, client = socket_pair

    def _exchange(request: bytes) -> bytes:
        client.sendall(request)
        client.shutdown(socket.SHUT_WR)
        handler.handle(conn)
        return read_all(client)

    return _exchange


def split_response(raw: bytes) -> tuple[list[str], bytes]:
    """Split a response into header lines and body."""
    head, _, body = raw.partition(b"\n\n")
    return head.decode("ascii").split("\n"), body


class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False  # not a test class

    def __init__(self, server: WebServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(
            target=self.server.run,
            kwargs={"configure_logging": False, "show_banner": False},
            daemon=True,
        )
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def request(self, raw: bytes) -> bytes:
        """Send raw bytes on a fresh connection and read until close."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=5.0) as sock:
            sock.sendall(raw)
            return read_all(sock)

    def stop(self):
        """Stop the server."""
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=10.0)


@pytest.fixture
def test_server(config: ServerConfig) -> Generator[TestServer, None, None]:
    """A running server on a free port."""
    test_srv = TestServer(WebServer(config))
    test_srv.start()

    yield test_srv

    test_srv.stop()
