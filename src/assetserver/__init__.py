"""
=============================================================================
ASSETSERVER - Serve a Compiled Asset Pipeline over HTTP
=============================================================================

Serves scripts and stylesheets from an asset pipeline with correct HTTP
caching, and reports compile failures inside the served asset itself.

=============================================================================
PROJECT OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   1. FINGERPRINTED URLS                                             │
    │      application-0aa2105d29558f3eb790d411d7d8fb66.js                │
    │      → cached for a year, validated against the content digest     │
    │                                                                      │
    │   2. CONDITIONAL REQUESTS                                           │
    │      If-None-Match: "<digest>" → 304 Not Modified                  │
    │                                                                      │
    │   3. ENCODING NEGOTIATION                                           │
    │      Accept-Encoding: gzip → gzip variant, Vary: Accept-Encoding   │
    │                                                                      │
    │   4. ERRORS YOU CAN SEE                                             │
    │      broken .js  → throw Error("...") in the browser console       │
    │      broken .css → the page is replaced by the error message       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    assetserver/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m assetserver)
    ├── config.py            # AssetServerConfig dataclass
    ├── server.py            # http.server adapter, logging setup
    ├── http/                # HTTP value types
    │   ├── request.py       # AssetRequest
    │   ├── response.py      # HTTPResponse, ResponseBuilder
    │   ├── status_codes.py  # HTTPStatus enum
    │   └── mime_types.py    # Content types and charsets
    ├── assets/              # The pipeline side
    │   ├── asset.py         # Asset, LookupOptions
    │   ├── resolver.py      # AssetResolver interface
    │   ├── errors.py        # AssetError hierarchy
    │   └── filesystem.py    # FileSystemResolver
    └── handlers/            # The serving contract
        ├── assets.py        # AssetHandler
        ├── paths.py         # Fingerprints, traversal check
        └── exceptions.py    # Failures rendered as .js/.css

=============================================================================
QUICK START
=============================================================================

    from assetserver import AssetHandler, AssetRequest, FileSystemResolver

    handler = AssetHandler(FileSystemResolver(["app/assets/javascripts"]))
    response = handler.handle(AssetRequest.from_target("/application.js"))

    response.status                   # HTTPStatus.OK
    response.headers["ETag"]          # '"0aa2105d29558f3eb790d411d7d8fb66"'
    response.headers["Cache-Control"] # 'public, must-revalidate'

Or from the shell:

    python -m assetserver serve app/assets/javascripts

=============================================================================
"""

__version__ = "1.0.0"

from .assets import Asset, AssetError, AssetResolver, CompileError, FileSystemResolver, LookupOptions
from .config import AssetServerConfig, ConfigError
from .handlers import AssetHandler, serve_asset
from .http import AssetRequest, HTTPResponse, HTTPStatus

__all__ = [
    "Asset",
    "AssetError",
    "AssetHandler",
    "AssetRequest",
    "AssetResolver",
    "AssetServerConfig",
    "CompileError",
    "ConfigError",
    "FileSystemResolver",
    "HTTPResponse",
    "HTTPStatus",
    "LookupOptions",
    "serve_asset",
    "__version__",
]
