"""
=============================================================================
TINYHTTPD CLI ENTRY POINT
=============================================================================

    # Serve the current directory on localhost:8080
    python -m tinyhttpd

    # Custom port and document root
    python -m tinyhttpd --port 3000 --root ./www

    # Listen on all interfaces (for containers)
    python -m tinyhttpd --host 0.0.0.0

Environment variables (HTTP_PORT, HTTP_DOCUMENT_ROOT, ...) provide the
defaults; command-line flags override them.

=============================================================================
"""

import argparse
import sys

from . import __version__
from .config import ServerConfig, LOG_LEVELS
from .server import HTTPServer


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    """Build the argument parser, seeded with environment defaults."""
    parser = argparse.ArgumentParser(
        prog="tinyhttpd",
        description="Minimal single-request-per-connection HTTP file server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m tinyhttpd                       # Serve ./ on 127.0.0.1:8080
  python -m tinyhttpd --port 3000           # Custom port
  python -m tinyhttpd --root ./www          # Custom document root
  python -m tinyhttpd --host 0.0.0.0        # Listen on all interfaces
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})"
    )

    parser.add_argument(
        "--timeout", "-t",
        type=float,
        default=defaults.timeout,
        help="Per-connection socket timeout in seconds (default: none, block forever)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--root", "-r",
        default=defaults.document_root,
        help="Document root that request paths are appended to (default: working directory)"
    )

    parser.add_argument(
        "--server-name",
        default=defaults.server_name,
        help=f"Server identity for the Server header and templates (default: {defaults.server_name})"
    )

    parser.add_argument(
        "--timezone",
        default=defaults.template_timezone,
        help=f"Time zone for the template date token (default: {defaults.template_timezone})"
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        type=str.upper,
        default=defaults.log_level.upper(),
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"tinyhttpd {__version__}"
    )

    return parser


def main(argv=None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit status: 0 on clean shutdown, 1 on configuration or
        bind errors.
    """
    try:
        defaults = ServerConfig.from_env()
    except ValueError as e:
        print(f"Error: invalid environment setting: {e}", file=sys.stderr)
        return 1

    args = build_parser(defaults).parse_args(argv)

    config = ServerConfig(
        host=args.host,
        port=args.port,
        timeout=args.timeout,
        document_root=args.root,
        server_name=args.server_name,
        template_timezone=args.timezone,
        log_level=args.log_level,
    )

    try:
        server = HTTPServer(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        server.run()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
