"""
=============================================================================
RESPONSE HEADER
=============================================================================

Writes the header block that starts every response.

=============================================================================
HEADER SHAPE
=============================================================================

Always these six lines, in this order, each ending in "\n":

    ┌─────────────────────────────────────────────────────────────────┐
    │  HTTP/1.1 200 OK                    ← or "HTTP/1.1 404 ERROR"   │
    │  Date: Oct 19, 2026, 4:36:12 AM MST                             │
    │  Server: SimpleWebServer                                        │
    │  Connection: close                  ← one request per socket    │
    │  Content-Type: text/html                                        │
    │                                     ← blank line ends headers   │
    └─────────────────────────────────────────────────────────────────┘

There is no Content-Length. The body ends when we close the socket,
which HTTP/1.1 allows for responses sent with "Connection: close".

=============================================================================
TIMESTAMPS
=============================================================================

The Date header and the <cs371date> tag share one human-readable format,
rendered in Mountain Standard Time (a fixed UTC-07:00, no daylight
saving), regardless of the host's own time zone. The format is built by
hand so it does not change with the process locale.

=============================================================================
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from .status_codes import Status
from ..core.connection import Connection


EOL = "\n"

SERVER_TIMEZONE = timezone(timedelta(hours=-7), "MST")

_MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def format_timestamp(moment: Optional[datetime] = None) -> str:
    """
    Format a moment as a human-readable timestamp in MST.

    Args:
        moment: Aware or naive (treated as UTC) datetime. Defaults to now.

    Returns:
        e.g. "Oct 19, 2026, 4:36:12 AM MST"
    """
    if moment is None:
        moment = datetime.now(timezone.utc)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)

    local = moment.astimezone(SERVER_TIMEZONE)
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"

    return (
        f"{_MONTHS[local.month - 1]} {local.day}, {local.year}, "
        f"{hour}:{local.minute:02d}:{local.second:02d} {meridiem} "
        f"{local.tzname()}"
    )


def build_header(
    status: Status,
    content_type: str,
    server_name: str,
    timestamp: Optional[str] = None,
) -> bytes:
    """
    Build the response header block.

    Args:
        status: Resolved request status.
        content_type: MIME type for the Content-Type line.
        server_name: Product string for the Server line.
        timestamp: Date line value. Defaults to the current moment.

    Returns:
        Header bytes, including the terminating blank line.
    """
    lines = [
        status.status_line,
        f"Date: {timestamp or format_timestamp()}",
        f"Server: {server_name}",
        "Connection: close",
        f"Content-Type: {content_type}",
        "",
    ]
    return (EOL.join(lines) + EOL).encode("ascii", errors="replace")


def write_header(
    conn: Connection,
    status: Status,
    content_type: str,
    server_name: str,
) -> None:
    """
    Write the header block to the client.

    Raises:
        OSError: If the socket write fails.
    """
    conn.write(build_header(status, content_type, server_name))
