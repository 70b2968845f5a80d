"""
=============================================================================
CONNECTION HANDLER
=============================================================================

Everything that happens to one client connection, start to finish.

=============================================================================
PIPELINE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   Connection                                                         │
    │       │                                                              │
    │       ▼                                                              │
    │   read_request_path()      "GET /cat.png HTTP/1.1"  →  "/cat.png"   │
    │       │                                                              │
    │       ▼                                                              │
    │   resolve_path()           "/"  →  "/index.html"                    │
    │       │                    root + path exists?  →  OK / NOT_FOUND   │
    │       ▼                                                              │
    │   classify_content_type()  "/cat.png"  →  image/png                 │
    │       │                                                              │
    │       ▼                                                              │
    │   RequestContext           frozen from here on                       │
    │       │                                                              │
    │       ├──► write_header()                                            │
    │       └──► write_body()                                              │
    │               ├── text/html  →  lines, tags substituted              │
    │               ├── image/*    →  raw bytes                            │
    │               └── otherwise  →  404 page                             │
    │                                                                      │
    │   close                                                              │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Each stage takes what it needs as arguments and returns a value, so
every stage can be tested on its own.

=============================================================================
TAG SUBSTITUTION
=============================================================================

HTML pages may contain two literal markers:

    <cs371date>     →  current timestamp, e.g. "Oct 19, 2026, 4:36:12 AM MST"
    <cs371server>   →  ServerConfig.server_version

Only exact matches are replaced, every occurrence on the line. Images
and the 404 page are never rewritten.

=============================================================================
FAILURE MODES
=============================================================================

    ┌────────────────────────────────┬──────────────────────────────────┐
    │ What went wrong                │ What the client gets             │
    ├────────────────────────────────┼──────────────────────────────────┤
    │ file does not exist            │ 404 header + 404 page            │
    │ HTML file vanished after check │ header + 404 page                │
    │ image vanished after check     │ header only                      │
    │ 404 page itself is missing     │ header + token, then socket drop │
    │ socket write fails             │ whatever made it out             │
    └────────────────────────────────┴──────────────────────────────────┘

The last two raise out of ConnectionHandler.handle(); the connection is
closed on the way out and the caller logs the error.

=============================================================================
"""

import os
import time
import logging
from dataclasses import dataclass
from typing import Callable, NamedTuple, Optional

from ..config import ServerConfig
from ..core.connection import Connection
from ..http.request import read_request_path
from ..http.response import EOL, format_timestamp, write_header
from ..http.status_codes import Status
from ..http.mime_types import (
    TEXT_HTML, classify_content_type, is_image_type, is_text_type,
)
from ..access_log import RequestLog, log_request, now_clf


logger = logging.getLogger(__name__)


DATE_TAG = "<cs371date>"
SERVER_TAG = "<cs371server>"

NOT_FOUND_BANNER = b"HTTP/1.1 404: Not Found"

# Text files are passed through byte-for-byte, whatever their encoding
TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"


class NotFoundDocumentError(OSError):
    """The configured not-found page could not be opened."""


# =============================================================================
# REQUEST CONTEXT
# =============================================================================

class Resolution(NamedTuple):
    """Outcome of mapping a request path onto the filesystem."""

    path: str
    file_path: str
    status: Status


@dataclass(frozen=True)
class RequestContext:
    """
    Per-connection request data.

    Built once, after the request has been read, and never modified.

    Attributes:
        path: Request path, with "/" already replaced by the default document.
        file_path: Filesystem path the request maps to.
        status: OK if file_path was an existing file when checked.
        content_type: MIME type sent in the header.
        is_favicon: True for ".ico" requests.
    """

    path: str
    file_path: str
    status: Status
    content_type: str = TEXT_HTML
    is_favicon: bool = False

    @classmethod
    def from_request_path(cls, raw_path: str, config: ServerConfig) -> "RequestContext":
        """Resolve and classify a raw request path."""
        resolution = resolve_path(raw_path, config.root_dir, config.default_document)
        content_type = classify_content_type(resolution.path, resolution.status)
        return cls(
            path=resolution.path,
            file_path=resolution.file_path,
            status=resolution.status,
            content_type=content_type.mime_type,
            is_favicon=content_type.is_favicon,
        )


# =============================================================================
# PATH RESOLUTION
# =============================================================================

def resolve_path(raw_path: str, root_dir: str, default_document: str) -> Resolution:
    """
    Map a request path to a file under root_dir.

    The request path is appended to root_dir as-is. The result is OK only
    if it names an existing regular file inside root_dir; directories,
    the empty path and anything that climbs out with ".." are NOT_FOUND.

    The existence check is advisory. The file can still disappear before
    it is opened, and write_body() copes with that.

    Example:
        >>> resolve_path("/", "/srv/www", "index.html").path
        '/index.html'
    """
    path = raw_path
    if path == "/":
        path = "/" + default_document

    file_path = root_dir.rstrip(os.sep) + path

    if path and _is_within(root_dir, file_path) and os.path.isfile(file_path):
        status = Status.OK
    else:
        status = Status.NOT_FOUND

    return Resolution(path, file_path, status)


def _is_within(root_dir: str, file_path: str) -> bool:
    try:
        root = os.path.realpath(root_dir)
        target = os.path.realpath(file_path)
        return os.path.commonpath([root, target]) == root
    except ValueError:
        # Embedded NUL in the request path, or different drives on Windows
        return False


# =============================================================================
# BODY
# =============================================================================

def substitute_tags(
    line: str,
    server_version: str,
    timestamp: Callable[[], str] = format_timestamp,
) -> str:
    """
    Replace the date and server markers in one line of HTML.

    Args:
        line: A line of the page, without terminator.
        server_version: Text that replaces <cs371server>.
        timestamp: Called for the <cs371date> replacement, only if needed.

    Example:
        >>> substitute_tags("by <cs371server>", "Srv 2.0")
        'by Srv 2.0'
    """
    if DATE_TAG in line:
        line = line.replace(DATE_TAG, timestamp())
    if SERVER_TAG in line:
        line = line.replace(SERVER_TAG, server_version)
    return line


def _encode_line(line: str) -> bytes:
    return (line + EOL).encode(TEXT_ENCODING, errors=TEXT_ERRORS)


def _open_text(path: str):
    # newline=None accepts \n, \r\n and \r endings alike
    return open(path, "r", encoding=TEXT_ENCODING, errors=TEXT_ERRORS, newline=None)


def write_text_file(conn: Connection, context: RequestContext, config: ServerConfig) -> None:
    """
    Stream an HTML file line by line, substituting tags.

    Falls back to the 404 page if the file cannot be opened.
    """
    try:
        source = _open_text(context.file_path)
    except OSError as e:
        logger.warning(f"[{conn.id}] Cannot open {context.file_path}: {e}")
        write_not_found(conn, config)
        return

    with source:
        for line in source:
            line = substitute_tags(line.rstrip("\n"), config.server_version)
            conn.write(_encode_line(line))


def write_binary_file(conn: Connection, context: RequestContext) -> None:
    """
    Copy a file to the client unchanged.

    The whole file is read in one pass, sized to its length at open time.
    If it cannot be opened nothing is written; the header has already
    gone out and no fallback body follows.
    """
    try:
        with open(context.file_path, "rb") as source:
            size = os.fstat(source.fileno()).st_size
            data = source.read(size)
    except OSError as e:
        logger.error(f"[{conn.id}] Image not found at {context.file_path}: {e}")
        return

    conn.write(data)


def write_not_found(conn: Connection, config: ServerConfig) -> None:
    """
    Write the 404 body: the literal banner, then the not-found page.

    The page is copied line by line without tag substitution.

    Raises:
        NotFoundDocumentError: If the not-found page cannot be opened.
    """
    conn.write(NOT_FOUND_BANNER)

    document = config.not_found_path()
    try:
        source = _open_text(document)
    except OSError as e:
        raise NotFoundDocumentError(e.errno, f"Not-found document unavailable: {e.strerror}", document) from e

    with source:
        for line in source:
            conn.write(_encode_line(line.rstrip("\n")))


def write_body(conn: Connection, context: RequestContext, config: ServerConfig) -> None:
    """Write the response body for a resolved request."""
    if context.status.is_success and is_text_type(context.content_type):
        write_text_file(conn, context, config)
    elif context.status.is_success and is_image_type(context.content_type):
        write_binary_file(conn, context)
    else:
        write_not_found(conn, config)


# =============================================================================
# HANDLER
# =============================================================================

class ConnectionHandler:
    """
    Serves exactly one request on one connection.

    The handler keeps no per-request state of its own, so a single
    instance can be shared by every worker thread.

    Usage:
        handler = ConnectionHandler(config)
        handler.handle(conn)      # reads, responds, closes

    Raises from handle():
        NotFoundDocumentError: The 404 page is missing.
        OSError: The socket failed while writing.
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        self.config = config or ServerConfig()

    def handle(self, conn: Connection) -> RequestContext:
        """
        Read one request from conn, write the response, close conn.

        The connection is closed on every path, including errors.

        Returns:
            The RequestContext that was served.
        """
        start_time = time.time()
        logger.debug(f"[{conn.id}] Handling connection from {conn.client_ip}")

        with conn:
            raw_path = read_request_path(conn)
            context = RequestContext.from_request_path(raw_path, self.config)

            if context.is_favicon:
                logger.debug(f"[{conn.id}] Favicon request")

            write_header(conn, context.status, context.content_type, self.config.server_name)
            write_body(conn, context, self.config)

        log_request(
            RequestLog(
                connection_id=conn.id,
                path=context.path,
                client_ip=conn.client_ip,
                status_code=int(context.status),
                content_type=context.content_type,
                bytes_sent=conn.bytes_sent,
                duration_ms=(time.time() - start_time) * 1000,
                timestamp=now_clf(),
            ),
            log_format=self.config.log_format,
        )
        logger.debug(f"[{conn.id}] Done handling connection")
        return context
