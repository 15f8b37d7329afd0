"""
=============================================================================
HANDLERS MODULE
=============================================================================

The asset request handler and its helpers.

    assets.py      AssetHandler / serve_asset - the request state machine
    paths.py       Path decoding, traversal check, fingerprints, ?body=1
    exceptions.py  Compile failures rendered as .js / .css content

=============================================================================
USAGE
=============================================================================

    from assetserver.assets import FileSystemResolver
    from assetserver.handlers import AssetHandler
    from assetserver.http import AssetRequest

    handler = AssetHandler(FileSystemResolver(["app/assets"]))
    response = handler.handle(AssetRequest.from_target("/application.js"))

=============================================================================
"""

from .assets import AssetHandler, serve_asset, ABSORBED_ERRORS
from .exceptions import AssetKind
from .paths import path_fingerprint, strip_fingerprint

__all__ = [
    "AssetHandler",
    "serve_asset",
    "ABSORBED_ERRORS",
    "AssetKind",
    "path_fingerprint",
    "strip_fingerprint",
]
