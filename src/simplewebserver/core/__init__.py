"""
=============================================================================
CORE MODULE
=============================================================================

Socket-level building blocks:

    SocketServer   Listening socket and accept loop
    Connection     One client socket: read_line(), write(), close()

Nothing in here knows about HTTP.

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState, RequestTooLargeError

__all__ = [
    "SocketServer",
    "Connection",
    "ConnectionState",
    "RequestTooLargeError",
]
