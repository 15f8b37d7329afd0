"""
=============================================================================
ASSET SERVER
=============================================================================

Mounts an AssetHandler on the standard library's threading HTTP server.

=============================================================================
ARCHITECTURE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   ThreadingHTTPServer          one thread per connection            │
    │          │                                                           │
    │          ▼                                                           │
    │   AssetRequestHandler          HTTP adapter:                        │
    │          │                     - mount prefix ("/assets")           │
    │          │                     - GET / HEAD only                    │
    │          │                     - the process boundary: anything     │
    │          │                       the handler raises becomes a 500   │
    │          ▼                                                           │
    │   AssetHandler                 caching, fingerprints, error assets  │
    │          │                                                           │
    │          ▼                                                           │
    │   FileSystemResolver           compiles from source directories     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The handler and resolver keep no per-request state, so the worker threads
share a single instance of each without locking.

=============================================================================
"""

import logging
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Optional

from .assets.filesystem import FileSystemResolver
from .config import AssetServerConfig
from .handlers.assets import AssetHandler
from .http.request import AssetRequest
from .http.response import HTTPResponse, internal_error, method_not_allowed, not_found


logger = logging.getLogger(__name__)

ALLOWED_METHODS = ["GET", "HEAD"]


class AssetRequestHandler(BaseHTTPRequestHandler):
    """
    Per-connection request handler.

    Translates between http.server's view of a request and AssetRequest,
    and writes HTTPResponse objects back with HTTPResponse.to_bytes().
    """

    server: "AssetServer"
    protocol_version = "HTTP/1.1"

    def do_GET(self):
        self._serve(include_body=True)

    def do_HEAD(self):
        self._serve(include_body=False)

    def _reject(self):
        self._write(method_not_allowed(ALLOWED_METHODS), include_body=True)

    do_POST = do_PUT = do_PATCH = do_DELETE = _reject

    def _serve(self, include_body: bool) -> None:
        request = self._asset_request()

        if request is None:
            # Outside our mount point: let an outer router try elsewhere
            response = not_found()
        else:
            try:
                response = self.server.asset_handler.handle(request)
            except Exception:
                logger.exception(f"Unhandled error serving {self.path}")
                response = internal_error()

        self._write(response, include_body)

    def _asset_request(self) -> Optional[AssetRequest]:
        """
        AssetRequest relative to the mount prefix, or None if the request
        path is not under it.
        """
        path, _, query = self.path.partition("?")
        prefix = self.server.config.mount_prefix

        if prefix:
            if path != prefix and not path.startswith(prefix + "/"):
                return None
            path = path[len(prefix):] or "/"

        headers = {name.lower(): value for name, value in self.headers.items()}
        return AssetRequest(path=path, query_string=query, headers=headers)

    def _write(self, response: HTTPResponse, include_body: bool) -> None:
        self.wfile.write(response.to_bytes(self.server.config.server_name, include_body))
        self.log_request(int(response.status), len(response.body))

    def log_message(self, format, *args):
        # http.server writes to stderr by default; route it through logging
        logger.debug(f"{self.address_string()} - {format % args}")


class AssetServer(ThreadingHTTPServer):
    """
    Threading HTTP server bound to an AssetHandler.

    Usage:
        server = AssetServer(AssetServerConfig(paths=["app/assets"]))
        server.serve_forever()
    """

    daemon_threads = True

    def __init__(self, config: AssetServerConfig, asset_handler: Optional[AssetHandler] = None):
        self.config = config
        self.asset_handler = asset_handler or build_handler(config)
        super().__init__((config.host, config.port), AssetRequestHandler)

    @property
    def url(self) -> str:
        host, port = self.server_address[:2]
        return f"http://{host}:{port}{self.config.mount_prefix}/"


def build_handler(config: AssetServerConfig) -> AssetHandler:
    """AssetHandler over a FileSystemResolver configured from `config`."""
    return AssetHandler(
        FileSystemResolver(
            config.paths,
            gzip_enabled=config.gzip,
            gzip_level=config.gzip_level,
            gzip_min_size=config.gzip_min_size,
            default_charset=config.default_charset,
        )
    )


def setup_logging(log_level: str = "INFO") -> None:
    """Configure logging for the process."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logging.getLogger("assetserver").setLevel(level)


def serve(config: AssetServerConfig) -> None:
    """
    Validate `config` and serve until interrupted.

    Raises:
        ConfigError: if the configuration is unusable.
    """
    config.validate()
    setup_logging(config.log_level)

    server = AssetServer(config)
    logger.info(f"Serving {', '.join(config.paths)} at {server.url}")

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        server.server_close()
