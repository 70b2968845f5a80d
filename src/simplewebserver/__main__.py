"""
=============================================================================
CLI ENTRY POINT
=============================================================================

    # Serve the current directory on localhost:8080
    python -m simplewebserver

    # Serve ./www on all interfaces, port 3000
    python -m simplewebserver --root ./www --host 0.0.0.0 --port 3000

    # Different index and 404 pages
    python -m simplewebserver --index home.html --not-found missing.html

    # JSON access log, verbose
    python -m simplewebserver --log-format json --log-level DEBUG

Environment variables (SWS_*) are read first; flags override them.
See ServerConfig.from_env().

=============================================================================
"""

import argparse
import os
import sys

from . import __version__
from .config import ServerConfig, LOG_FORMATS
from .server import WebServer


def build_parser() -> argparse.ArgumentParser:
    """Command-line parser. Defaults come from the environment."""
    defaults = ServerConfig.from_env()

    parser = argparse.ArgumentParser(
        prog="simplewebserver",
        description="Minimal static file web server (HTML, GIF, JPEG, PNG, ICO)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m simplewebserver                         # Serve current directory
  python -m simplewebserver --root ./www            # Serve ./www
  python -m simplewebserver --host 0.0.0.0 -p 3000  # All interfaces, port 3000
        """,
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})",
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})",
    )

    # ─────────────────────────────────────────────────────────────────────
    # DOCUMENT ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--root", "-r",
        default=defaults.root_dir,
        help="Directory request paths are resolved against (default: current directory)",
    )

    parser.add_argument(
        "--index",
        default=defaults.default_document,
        help=f"Document served for '/' (default: {defaults.default_document})",
    )

    parser.add_argument(
        "--not-found",
        default=defaults.not_found_document,
        help=(
            "Page sent with 404 responses, relative to the current directory "
            f"(default: {defaults.not_found_document})"
        ),
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=defaults.log_level.upper(),
        help="Logging level (default: INFO)",
    )

    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=defaults.log_format,
        help="Access log format (default: text)",
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"SimpleWebServer {__version__}",
    )

    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Translate parsed CLI arguments to a ServerConfig."""
    return ServerConfig(
        host=args.host,
        port=args.port,
        root_dir=os.path.abspath(args.root),
        default_document=args.index,
        not_found_document=args.not_found,
        log_level=args.log_level,
        log_format=args.log_format,
    )


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    config = config_from_args(args)

    if not os.path.isdir(config.root_dir):
        print(f"Error: root directory does not exist: {config.root_dir}", file=sys.stderr)
        sys.exit(2)

    try:
        server = WebServer(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    if not os.path.isfile(config.not_found_path()):
        print(
            f"Warning: not-found document {config.not_found_path()} is missing; "
            "404 responses will be cut short",
            file=sys.stderr,
        )

    try:
        server.run()
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
