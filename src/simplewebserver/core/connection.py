"""
=============================================================================
CONNECTION
=============================================================================

Wraps one accepted client socket with the small API the request handler
needs: read a line, write bytes, close.

=============================================================================
TCP IS A BYTE STREAM, NOT A LINE PROTOCOL
=============================================================================

A request line can arrive split across any number of recv() calls:

    Client sends:   "GET /index.html HTTP/1.1\r\nHost: x\r\n\r\n"

    recv() → "GET /ind"
    recv() → "ex.html HTTP/1.1\r\nHo"
    recv() → "st: x\r\n\r\n"

So we keep a buffer and only hand out a line once its terminator has
arrived. Both "\r\n" and a bare "\n" end a line.

=============================================================================
WAITING FOR DATA
=============================================================================

A connected client may not have sent anything yet. Instead of one
unbounded recv(), read_line() waits for readability in short slices:

    ┌─────────────────────────────────────────────────────────────────┐
    │   while no complete line in buffer:                             │
    │       select([sock], timeout=poll_interval)                     │
    │           ├── not readable → yield, try again                   │
    │           └── readable     → recv() → append to buffer          │
    └─────────────────────────────────────────────────────────────────┘

"Not readable yet" is never an error. There is no overall
deadline: a client that never sends anything keeps its own handler
thread waiting, and nobody else.

A client that keeps sending without ever ending a line is a different
matter. Once the buffered partial line exceeds max_request_size,
read_line() raises RequestTooLargeError instead of buffering more.

=============================================================================
"""

import select
import socket
import time
import logging
import uuid
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional


logger = logging.getLogger(__name__)


class RequestTooLargeError(OSError):
    """A request line grew past max_request_size without a terminator."""


class ConnectionState(Enum):
    """Connection lifecycle states, used in logs."""
    NEW = "new"              # Just accepted, nothing read yet
    READING = "reading"      # Reading request lines
    WRITING = "writing"      # Sending response bytes
    CLOSED = "closed"        # Socket released


@dataclass
class Connection:
    """
    Represents a single client connection.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    Connection Responsibilities                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  1. LINE READING                                                     │
    │     └── Buffer partial data between recv() calls                     │
    │     └── Bounded readiness waits (poll_interval)                      │
    │                                                                      │
    │  2. WRITING                                                          │
    │     └── sendall() so short writes never truncate a response          │
    │     └── Count bytes sent for the access log                          │
    │                                                                      │
    │  3. CLOSING                                                          │
    │     └── FIN, drain unread request bytes, release the descriptor      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short identifier used to prefix log lines.
        state: Current connection state.
        bytes_sent: Total bytes written so far.
    """

    socket: socket.socket
    address: tuple = ("-", 0)

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)
    bytes_sent: int = 0

    poll_interval: float = 0.05
    buffer_size: int = 4096
    max_request_size: int = 1024 * 1024  # 1 MB max line

    _buffer: bytes = field(default=b"", repr=False)
    _eof: bool = field(default=False, repr=False)

    def __post_init__(self):
        # Blocking mode; waits are bounded by select() in read_line()
        self.socket.settimeout(None)

    @property
    def client_ip(self) -> str:
        """Get the client IP address."""
        return self.address[0] if self.address else "-"

    @property
    def age(self) -> float:
        """Get connection age in seconds."""
        return time.time() - self.created_at

    @property
    def closed(self) -> bool:
        return self.state == ConnectionState.CLOSED

    # =========================================================================
    # READING
    # =========================================================================

    def read_line(self) -> Optional[str]:
        """
        Read one line from the client.

        The line terminator ("\\n" or "\\r\\n") is stripped. Bytes are
        decoded as ASCII; anything else is replaced rather than rejected.

        Returns:
            The line, "" for an empty line, or None once the client has
            closed its side and the buffer is exhausted. A final line
            without a terminator is returned before None.

        Raises:
            RequestTooLargeError: If a line exceeds max_request_size.
            OSError: If the socket fails while reading.
        """
        self.state = ConnectionState.READING

        while b"\n" not in self._buffer:
            if self._eof:
                if not self._buffer:
                    return None
                # Unterminated trailing line
                line, self._buffer = self._buffer, b""
                return self._decode(line)

            # Don't let a line with no end grow the buffer forever
            if len(self._buffer) > self.max_request_size:
                raise RequestTooLargeError(
                    f"Request line too large: {len(self._buffer)} bytes"
                )

            if not self._wait_readable():
                continue

            chunk = self.socket.recv(self.buffer_size)
            if not chunk:
                self._eof = True
            self._buffer += chunk

        line, _, self._buffer = self._buffer.partition(b"\n")
        return self._decode(line.rstrip(b"\r"))

    def _wait_readable(self) -> bool:
        """
        Wait at most poll_interval for the socket to become readable.

        Returns:
            True if a recv() would not block.
        """
        readable, _, _ = select.select([self.socket], [], [], self.poll_interval)
        if not readable:
            # Nothing yet; give other threads the CPU before polling again
            time.sleep(0)
            return False
        return True

    @staticmethod
    def _decode(line: bytes) -> str:
        return line.decode("ascii", errors="replace")

    # =========================================================================
    # WRITING
    # =========================================================================

    def write(self, data: bytes) -> None:
        """
        Send bytes to the client.

        Raises:
            OSError: If the client went away. Fatal for this connection.
        """
        self.state = ConnectionState.WRITING
        self.socket.sendall(data)
        self.bytes_sent += len(data)

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection.

        Closing a socket with unread bytes in its receive queue makes the
        kernel send RST, and the client can lose the tail of the response.
        So: send FIN first, drain whatever the client still had queued
        (the header lines after the blank line we stopped at, for
        instance), then release the descriptor.

        Safe to call more than once.
        """
        if self.state == ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        try:
            self.socket.settimeout(0.5)
            drained = 0
            while drained <= self.max_request_size:
                chunk = self.socket.recv(self.buffer_size)
                if not chunk:
                    break
                drained += len(chunk)
        except OSError:
            pass  # socket.timeout is an OSError too

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Always close; never suppress the exception."""
        self.close()
        return False
