"""
=============================================================================
WEB SERVER
=============================================================================

Ties the pieces together: a SocketServer accepts connections and every
accepted connection gets its own thread running a ConnectionHandler.

=============================================================================
ARCHITECTURE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │                        ┌─────────────────┐                          │
    │                        │    WebServer    │                          │
    │                        └────────┬────────┘                          │
    │                                 │                                    │
    │              ┌──────────────────┴──────────────────┐                │
    │              ▼                                     ▼                │
    │     ┌──────────────────┐              ┌────────────────────────┐    │
    │     │   SocketServer   │  accept() ─► │ Thread per connection  │    │
    │     │  (listen socket) │              │  ConnectionHandler     │    │
    │     └──────────────────┘              │   .handle(conn)        │    │
    │                                       └────────────────────────┘    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Handler threads share nothing but the read-only ServerConfig. A slow or
silent client ties up its own thread only.

=============================================================================
REQUEST LIFECYCLE
=============================================================================

    1. SocketServer accepts the TCP connection
    2. WebServer starts a daemon thread for it
    3. The thread reads the request headers
    4. Path is resolved, header and body are written
    5. The connection is closed and the thread exits

Any exception escaping the handler is logged here. It ends that one
connection and nothing else.

=============================================================================
"""

import logging
import threading
from typing import Optional

from . import __version__
from .config import ServerConfig
from .core import SocketServer, Connection
from .handlers import ConnectionHandler


logger = logging.getLogger(__name__)


class WebServer:
    """
    Static file web server.

    Usage:
        server = WebServer(ServerConfig(port=8080, root_dir="./www"))
        server.run()   # blocks until Ctrl+C / SIGTERM / shutdown()
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Args:
            config: Server configuration. Uses defaults if not provided.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._handler = ConnectionHandler(self.config)

        self._workers: set[threading.Thread] = set()
        self._workers_lock = threading.Lock()

    @property
    def address(self):
        """The bound (host, port) once running."""
        return self._socket_server.address

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self, configure_logging: bool = True, show_banner: bool = True):
        """
        Start the server (blocking).

        Args:
            configure_logging: Install a basic logging configuration
                               from config.log_level first.
            show_banner: Print the startup banner to stdout.
        """
        if configure_logging:
            self._setup_logging()
        if show_banner:
            self.print_banner()

        logger.info(
            f"Serving {self.config.root_dir} on {self.config.host}:{self.config.port}"
        )

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the listening socket is accepting connections."""
        return self._socket_server.wait_until_ready(timeout)

    def shutdown(self):
        """Stop accepting connections. run() returns shortly after."""
        self._socket_server.shutdown()

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("simplewebserver").setLevel(level)

    def _shutdown(self, timeout: float = 5.0):
        """
        Wait a bounded time for in-flight handlers, then return.

        Handler threads are daemons, so a client that never sends its
        request cannot keep the process alive past this point.
        """
        logger.info("Shutting down server...")

        with self._workers_lock:
            workers = list(self._workers)

        for worker in workers:
            worker.join(timeout)
            if worker.is_alive():
                logger.warning(f"{worker.name} still running at shutdown")

        logger.info("Server stopped")

    def print_banner(self):
        """Print server startup information."""
        print()
        print("╔══════════════════════════════════════════════════════════════╗")
        print(f"  SimpleWebServer {__version__}")
        print(f"  http://{self.config.host}:{self.config.port}")
        print(f"  Root:      {self.config.root_dir}")
        print(f"  Index:     {self.config.default_document}")
        print(f"  Not found: {self.config.not_found_path()}")
        print("  Press Ctrl+C to stop")
        print("╚══════════════════════════════════════════════════════════════╝")
        print()

    # =========================================================================
    # CONNECTION DISPATCH
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """
        Start a worker thread for one accepted connection.

        Called from the accept loop, so it must not block.
        """
        worker = threading.Thread(
            target=self._process_connection,
            args=(conn,),
            name=f"worker-{conn.id}",
            daemon=True,
        )
        with self._workers_lock:
            self._workers.add(worker)
        worker.start()

    def _process_connection(self, conn: Connection):
        """Run the handler for one connection (worker thread)."""
        try:
            self._handler.handle(conn)
        except Exception as e:
            logger.exception(f"[{conn.id}] Connection error: {e}")
        finally:
            # handle() closes on its own; this covers failures before it got that far
            conn.close()
            with self._workers_lock:
                self._workers.discard(threading.current_thread())
