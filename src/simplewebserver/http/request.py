"""
=============================================================================
REQUEST LINE PARSING
=============================================================================

Pulls the requested path out of an incoming HTTP request.

=============================================================================
WHAT WE READ
=============================================================================

    ┌─────────────────────────────────────────────────────────────────┐
    │  GET /images/cat.png HTTP/1.1\r\n   ← the only line we use      │
    │      └─────────────┘                                            │
    │      requested path                                             │
    │  Host: localhost:8080\r\n           ← read and ignored          │
    │  User-Agent: curl/8.0\r\n           ← read and ignored          │
    │  \r\n                               ← empty line: stop          │
    └─────────────────────────────────────────────────────────────────┘

Rules:

1. Lines are read until the empty line that ends the header block, or
   until the client closes / the socket fails.
2. A line starting with exactly "GET " (case-sensitive, with the space)
   carries the path: everything after "GET " up to the next space, or
   to the end of the line if there is no further space.
3. Any other method, or no request line at all, leaves the path empty.
   The caller turns that into a 404.

Nothing here raises. A broken stream just ends the parse early with
whatever path was found so far.

=============================================================================
"""

import logging

from ..core.connection import Connection


logger = logging.getLogger(__name__)


GET_PREFIX = "GET "


def extract_get_path(line: str) -> str | None:
    """
    Extract the path from a single request line.

    Args:
        line: One request line, without terminator.

    Returns:
        The path, or None if the line is not a GET request line.

    Example:
        >>> extract_get_path("GET /a.html HTTP/1.1")
        '/a.html'
        >>> extract_get_path("POST /a.html HTTP/1.1") is None
        True
    """
    if not line.startswith(GET_PREFIX):
        return None
    target = line[len(GET_PREFIX):]
    return target.split(" ", 1)[0]


def read_request_path(conn: Connection) -> str:
    """
    Read the request header block from a connection and return the path.

    Consumes lines up to and including the terminating empty line. If
    several lines start with "GET ", the last one wins.

    Args:
        conn: The client connection to read from.

    Returns:
        The raw requested path, or "" if no GET line was seen.
    """
    path = ""

    while True:
        try:
            line = conn.read_line()
        except OSError as e:
            logger.debug(f"[{conn.id}] Request read error: {e}")
            break

        if line is None:
            logger.debug(f"[{conn.id}] Client closed before end of headers")
            break

        logger.debug(f"[{conn.id}] Request line: ({line})")

        found = extract_get_path(line)
        if found is not None:
            path = found

        if not line:
            break

    return path
