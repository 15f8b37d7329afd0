"""
=============================================================================
ASSET SERVER CLI ENTRY POINT
=============================================================================

    # Serve two source directories at http://127.0.0.1:8080/assets/
    python -m assetserver serve app/assets/javascripts app/assets/stylesheets

    # Custom port and mount point
    python -m assetserver serve --port 3000 --prefix /static app/assets

    # Show the response the handler would produce, without a server
    python -m assetserver render /application.js --path app/assets
    python -m assetserver render /application.js --path app/assets \\
        --header 'If-None-Match: "0aa2105d29558f3eb790d411d7d8fb66"'

Settings not given on the command line come from ASSETS_* environment
variables (see config.py).

=============================================================================
"""

import argparse
import sys

from . import __version__
from .config import AssetServerConfig
from .http.request import AssetRequest
from .server import build_handler, serve, setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="assetserver",
        description="Serve an asset pipeline over HTTP with caching and in-asset error reporting",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m assetserver serve app/assets                 # Serve at :8080/assets/
  python -m assetserver serve -p 3000 --prefix / public  # Mount at the root
  python -m assetserver render /application.js --path app/assets --body
        """,
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"assetserver {__version__}",
    )
    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: $ASSETS_LOG_LEVEL or INFO)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    # ─────────────────────────────────────────────────────────────────────
    # serve
    # ─────────────────────────────────────────────────────────────────────

    serve_parser = commands.add_parser("serve", help="Run the HTTP server")
    serve_parser.add_argument(
        "paths",
        nargs="*",
        help="Asset source directories (default: $ASSETS_PATHS)",
    )
    serve_parser.add_argument("--host", "-H", default=None, help="Host to bind to")
    serve_parser.add_argument("--port", "-p", type=int, default=None, help="Port to listen on")
    serve_parser.add_argument("--prefix", default=None, help="URL prefix (default: /assets)")
    serve_parser.add_argument(
        "--no-gzip",
        action="store_true",
        help="Never serve gzip variants",
    )

    # ─────────────────────────────────────────────────────────────────────
    # render
    # ─────────────────────────────────────────────────────────────────────

    render_parser = commands.add_parser(
        "render",
        help="Print the response for a request path",
    )
    render_parser.add_argument("target", help="Request path, e.g. /application.js?body=1")
    render_parser.add_argument(
        "--path", "-P",
        dest="paths",
        action="append",
        default=[],
        help="Asset source directory (repeatable)",
    )
    render_parser.add_argument(
        "--header",
        action="append",
        default=[],
        metavar="NAME:VALUE",
        help="Request header (repeatable)",
    )
    render_parser.add_argument(
        "--body",
        action="store_true",
        help="Also print the response body",
    )

    return parser


def config_from_args(args: argparse.Namespace) -> AssetServerConfig:
    """Environment defaults, overridden by whatever was given on the CLI."""
    config = AssetServerConfig.from_env()

    if args.paths:
        config.paths = list(args.paths)
    if args.log_level:
        config.log_level = args.log_level

    if args.command == "serve":
        if args.host is not None:
            config.host = args.host
        if args.port is not None:
            config.port = args.port
        if args.prefix is not None:
            config.url_prefix = args.prefix
        if args.no_gzip:
            config.gzip = False

    return config


def parse_header(raw: str) -> "tuple[str, str]":
    name, sep, value = raw.partition(":")
    if not sep or not name.strip():
        raise ValueError(f"Invalid header {raw!r}, expected NAME:VALUE")
    return name.strip(), value.strip()


def render(args: argparse.Namespace, config: AssetServerConfig) -> int:
    """Run one request through the handler and print the result."""
    headers = dict(parse_header(raw) for raw in args.header)

    response = build_handler(config).handle(AssetRequest.from_target(args.target, headers))

    print(response.status_line)
    for name, value in response.headers.items():
        print(f"{name}: {value}")

    if args.body and response.body:
        print()
        sys.stdout.flush()
        sys.stdout.buffer.write(response.body)
        sys.stdout.buffer.flush()

    return 0 if not response.status.is_error else 1


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = config_from_args(args)

        if args.command == "serve":
            serve(config)
            return 0

        config.validate()
        setup_logging(config.log_level)
        return render(args, config)

    except ValueError as e:  # ConfigError, malformed --header or ASSETS_PORT
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
