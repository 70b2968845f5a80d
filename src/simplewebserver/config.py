"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the static file server.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m simplewebserver --port 3000                     │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── SWS_PORT=3000 python -m simplewebserver                   │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
FILESYSTEM LAYOUT
=============================================================================

Two directories matter and they are NOT the same thing:

    root_dir            Where request paths are resolved.
                        GET /cat.png  →  <root_dir>/cat.png

    process cwd         Where the not-found document is read from.
                        not_found_document = "404.html"
                        →  <cwd>/404.html

By default root_dir IS the process working directory, so both collapse
into one folder. Point --root somewhere else and the 404 page still
comes from wherever the server was started.

=============================================================================
"""

import os
from dataclasses import dataclass, field
from typing import Optional


LOG_FORMATS = ("text", "json")


@dataclass
class ServerConfig:
    """
    Configuration for the static file server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog

    REQUEST READING
    - poll_interval, buffer_size, max_request_size

    DOCUMENTS
    - root_dir, default_document, not_found_document

    SERVER IDENTITY
    - server_name, server_version

    LOGGING
    - log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """
    The IP address to bind to.
    - "127.0.0.1" - Localhost only (development)
    - "0.0.0.0" - All network interfaces
    """

    port: int = 8080
    """The port number to listen on."""

    backlog: int = 128
    """Maximum number of queued connections before new ones are refused."""

    # ─────────────────────────────────────────────────────────────────────
    # REQUEST READING
    # ─────────────────────────────────────────────────────────────────────

    poll_interval: float = 0.05
    """
    Seconds to wait for the client socket to become readable before
    yielding and checking again. Bounds each individual wait; there is
    no overall read deadline.
    """

    buffer_size: int = 4096
    """Bytes requested from the socket per recv() call."""

    max_request_size: int = 1024 * 1024  # 1 MB
    """
    Longest request line buffered while waiting for its terminator.
    Past this the request is parsed as if the client had stopped sending.
    """

    # ─────────────────────────────────────────────────────────────────────
    # DOCUMENTS
    # ─────────────────────────────────────────────────────────────────────

    root_dir: str = field(default_factory=os.getcwd)
    """
    Directory that request paths are appended to.
    Defaults to the working directory of the process.
    """

    default_document: str = "index.html"
    """File served when the request path is exactly "/"."""

    not_found_document: str = "404.html"
    """
    Page streamed after a 404 header. Relative paths are resolved
    against the process working directory, not root_dir.
    """

    # ─────────────────────────────────────────────────────────────────────
    # SERVER IDENTITY
    # ─────────────────────────────────────────────────────────────────────

    server_name: str = "SimpleWebServer"
    """Product string sent in the Server header."""

    server_version: str = "SimpleWebServer 2.0"
    """Replacement text for the <cs371server> tag in HTML pages."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    log_format: str = "text"
    """
    Access log format: 'text' or 'json'.
    JSON is better for log aggregators, text for humans.
    """

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        SWS_HOST        Server host (default: 127.0.0.1)
        SWS_PORT        Server port (default: 8080)
        SWS_ROOT        Document root (default: current directory)
        SWS_INDEX       Default document (default: index.html)
        SWS_NOT_FOUND   Not-found document (default: 404.html)
        SWS_LOG_LEVEL   Logging level (default: INFO)
        SWS_LOG_FORMAT  Access log format (default: text)

        =====================================================================
        """
        return cls(
            host=os.getenv("SWS_HOST", "127.0.0.1"),
            port=int(os.getenv("SWS_PORT", "8080")),
            root_dir=os.getenv("SWS_ROOT") or os.getcwd(),
            default_document=os.getenv("SWS_INDEX", "index.html"),
            not_found_document=os.getenv("SWS_NOT_FOUND", "404.html"),
            log_level=os.getenv("SWS_LOG_LEVEL", "INFO"),
            log_format=os.getenv("SWS_LOG_FORMAT", "text"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Fail fast at startup rather than on the first request.
        """
        # Port 0 asks the OS for a free port
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.poll_interval <= 0:
            raise ValueError("poll_interval must be > 0")

        if self.buffer_size < 1:
            raise ValueError("buffer_size must be >= 1")

        if self.max_request_size < 1:
            raise ValueError("max_request_size must be >= 1")

        if not self.default_document:
            raise ValueError("default_document must not be empty")

        if not self.not_found_document:
            raise ValueError("not_found_document must not be empty")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(
                f"Invalid log_format: {self.log_format!r}. "
                f"Must be one of {', '.join(LOG_FORMATS)}."
            )

    def not_found_path(self, cwd: Optional[str] = None) -> str:
        """Absolute path of the not-found document."""
        return os.path.join(cwd or os.getcwd(), self.not_found_document)
