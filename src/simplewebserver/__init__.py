"""
=============================================================================
SIMPLEWEBSERVER - Minimal Static File Web Server
=============================================================================

Serves HTML pages and a handful of image types from a local directory,
one request per connection, over raw Python sockets.

=============================================================================
WHAT A CONNECTION LOOKS LIKE
=============================================================================

    Client                                   Server
    ──────                                   ──────
    GET /index.html HTTP/1.1      ───────►
    Host: localhost:8080
    (blank line)
                                  ◄───────   HTTP/1.1 200 OK
                                             Date: Oct 19, 2026, 4:36:12 AM MST
                                             Server: SimpleWebServer
                                             Connection: close
                                             Content-Type: text/html
                                             (blank line)
                                             <html>... page lines ...
                                  ◄───────   (socket closed)

HTML pages get two tags rewritten on the way out:

    <cs371date>     →  the current date and time
    <cs371server>   →  the server version string

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    simplewebserver/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m simplewebserver)
    ├── server.py            # WebServer: accept loop + thread per connection
    ├── config.py            # ServerConfig dataclass
    ├── access_log.py        # Structured access log records
    ├── core/
    │   ├── socket_server.py # Listening socket, accept loop, signals
    │   └── connection.py    # Client socket wrapper (lines in, bytes out)
    ├── http/
    │   ├── request.py       # Request line parsing
    │   ├── response.py      # Response header + timestamps
    │   ├── status_codes.py  # OK / NOT_FOUND
    │   └── mime_types.py    # Content-Type classification
    └── handlers/
        └── worker.py        # ConnectionHandler: the per-connection pipeline

=============================================================================
QUICK START
=============================================================================

    from simplewebserver import WebServer, ServerConfig

    server = WebServer(ServerConfig(port=8080, root_dir="./www"))
    server.run()

or from a shell:

    python -m simplewebserver --root ./www --port 8080

=============================================================================
"""

__version__ = "2.0.0"

from .config import ServerConfig
from .handlers import ConnectionHandler
from .server import WebServer

__all__ = ["WebServer", "ServerConfig", "ConnectionHandler", "__version__"]
