"""
=============================================================================
ASSET HANDLER
=============================================================================

Serves assets from a resolver with HTTP caching semantics.

=============================================================================
REQUEST FLOW
=============================================================================

    GET /application-0aa2105d29558f3eb790d411d7d8fb66.js
        │
        ▼
    extract path ────────── "application-0aa2105d29558f3eb790d411d7d8fb66.js"
        │
        ▼
    contains ".."? ──yes──▶ 403 Forbidden
        │ no
        ▼
    strip fingerprint ───── "application.js", fingerprint "0aa2105d..."
        │
        ▼
    resolver.resolve(path, LookupOptions(bundle, if_match | accept_encoding))
        │
        ├── None ────────────────────────▶ 404 Not found (X-Cascade: pass)
        ├── If-None-Match == ETag ───────▶ 304 Not Modified
        └── otherwise ───────────────────▶ 200 OK + body
        │
        └── raises
              ├── .js  ──────────────────▶ 200, throw Error("...")
              ├── .css ──────────────────▶ 200, error overlay stylesheet
              └── other ─────────────────▶ re-raised

=============================================================================
CACHE POLICY
=============================================================================

    ┌─────────────────────────────┬──────────────────────────────────────┐
    │ URL                         │ Cache-Control                        │
    ├─────────────────────────────┼──────────────────────────────────────┤
    │ /app-0aa2105d...fb66.js     │ public, max-age=31536000             │
    │   (fingerprinted)           │   content change ⇒ new URL, so the  │
    │                             │   response never goes stale         │
    ├─────────────────────────────┼──────────────────────────────────────┤
    │ /app.js                     │ public, must-revalidate              │
    │   (plain)                   │   + Vary: Accept-Encoding            │
    │                             │   client revalidates with its ETag  │
    └─────────────────────────────┴──────────────────────────────────────┘

Encoding negotiation is only done for plain URLs. With a fingerprint the
gzip and identity variants would share one URL and one validator, and
some proxies mix them up (the Apache "ETag gzip" bug).

=============================================================================
"""

import logging
import time
from typing import Dict, Optional, Tuple, Type

from ..assets.asset import Asset, LookupOptions
from ..assets.resolver import AssetResolver
from ..http.request import AssetRequest
from ..http.response import (
    HTTPResponse,
    ResponseBuilder,
    format_http_date,
    forbidden,
    not_found,
)
from ..http.status_codes import HTTPStatus
from .exceptions import (
    AssetKind,
    css_exception_response,
    error_category,
    javascript_exception_response,
)
from .paths import (
    extract_path,
    is_forbidden,
    path_fingerprint,
    strip_fingerprint,
    wants_body_only,
)


logger = logging.getLogger(__name__)


# Failures reported inside .js/.css responses. KeyboardInterrupt,
# SystemExit and other BaseExceptions always propagate.
ABSORBED_ERRORS: Tuple[Type[BaseException], ...] = (Exception,)

# One year, the longest max-age RFC 2616 recommends
FINGERPRINTED_MAX_AGE = 31536000


class AssetHandler:
    """
    Handler serving assets found by an AssetResolver.

    The handler keeps nothing between calls except the resolver reference,
    so one instance can be shared by every worker thread.

    =========================================================================
    USAGE
    =========================================================================

        resolver = FileSystemResolver(["app/assets/javascripts"])
        handler = AssetHandler(resolver)

        response = handler.handle(AssetRequest.from_target("/application.js"))

    =========================================================================
    """

    def __init__(self, resolver: AssetResolver):
        self.resolver = resolver

    def handle(self, request: AssetRequest) -> HTTPResponse:
        """
        Serve one asset request.

        Raises only failures that cannot be reported inside the asset:
        those for paths that are neither scripts nor stylesheets, and
        BaseExceptions outside ABSORBED_ERRORS.
        """
        start_time = time.time()
        msg = f"Served asset {request.path} -"
        path = request.path

        try:
            path = extract_path(request.path)

            # ─────────────────────────────────────────────────────────────
            # SECURITY: PATH TRAVERSAL
            # ─────────────────────────────────────────────────────────────
            if is_forbidden(path):
                logger.info(f"{msg} 403 Forbidden ({_elapsed_ms(start_time)}ms)")
                return forbidden()

            fingerprint = path_fingerprint(path)
            if fingerprint:
                path = strip_fingerprint(path)

            options = self.lookup_options(request, fingerprint)
            asset = self.resolver.resolve(path, options)

            if asset is None:
                logger.info(f"{msg} 404 Not Found ({_elapsed_ms(start_time)}ms)")
                return not_found()

            if self.etag_match(asset, request):
                logger.info(f"{msg} 304 Not Modified ({_elapsed_ms(start_time)}ms)")
                return self.not_modified_response(asset, request)

            response = self.ok_response(asset, request)
            logger.info(f"{msg} 200 OK ({_elapsed_ms(start_time)}ms)")
            return response

        except ABSORBED_ERRORS as error:
            response = self.exception_response(error, path)
            if response is None:
                # Unclassified path: the caller logs it
                raise

            logger.error(f"Error compiling asset {path}:")
            logger.error(f"{error_category(error)}: {error}")

            logger.info(f"{msg} 200 OK, error reported in asset ({_elapsed_ms(start_time)}ms)")
            return response

    # =========================================================================
    # LOOKUP
    # =========================================================================

    def lookup_options(self, request: AssetRequest, fingerprint: Optional[str]) -> LookupOptions:
        """
        Options for the resolver.

        A fingerprint constrains the digest; without one, the client's
        Accept-Encoding is passed on. Never both.
        """
        bundle = not wants_body_only(request.query_string)

        if fingerprint:
            return LookupOptions(bundle=bundle, if_match=fingerprint)

        if request.accept_encoding is not None:
            return LookupOptions(bundle=bundle, accept_encoding=request.accept_encoding)

        return LookupOptions(bundle=bundle)

    @staticmethod
    def etag_match(asset: Asset, request: AssetRequest) -> bool:
        """Compare the client's If-None-Match with the asset's ETag."""
        return request.if_none_match == asset.etag

    # =========================================================================
    # RESPONSES
    # =========================================================================

    def not_modified_response(self, asset: Asset, request: AssetRequest) -> HTTPResponse:
        """304 with cache headers only."""
        return (ResponseBuilder()
            .status(HTTPStatus.NOT_MODIFIED)
            .headers(self.cache_headers(asset, request))
            .build())

    def ok_response(self, asset: Asset, request: AssetRequest) -> HTTPResponse:
        """200 with the asset's bytes."""
        return HTTPResponse(
            status=HTTPStatus.OK,
            headers=self.headers(asset, request, asset.length),
            body=asset.content,
        )

    def cache_headers(self, asset: Asset, request: AssetRequest) -> Dict[str, str]:
        """
        Cache-Control, Last-Modified, ETag and, for plain URLs, Vary.

        The fingerprint test looks at the path as requested, before it was
        decoded or stripped.
        """
        headers = {
            "Cache-Control": "public",
            "Last-Modified": format_http_date(asset.mtime),
            "ETag": asset.etag,
        }

        if path_fingerprint(request.path):
            headers["Cache-Control"] += f", max-age={FINGERPRINTED_MAX_AGE}"
        else:
            headers["Cache-Control"] += ", must-revalidate"
            headers["Vary"] = "Accept-Encoding"

        return headers

    def headers(self, asset: Asset, request: AssetRequest, length: int) -> Dict[str, str]:
        """Full 200 headers: entity headers first, then cache headers."""
        headers = {}

        if asset.encoding:
            headers["Content-Encoding"] = asset.encoding

        headers["Content-Length"] = str(length)

        content_type = asset.content_type
        if content_type:
            # charset only applies to text/* types
            if content_type.startswith("text/") and asset.charset:
                content_type += f"; charset={asset.charset}"
            headers["Content-Type"] = content_type

        headers.update(self.cache_headers(asset, request))
        return headers

    def exception_response(self, error: BaseException, path: str) -> Optional[HTTPResponse]:
        """
        Translate an absorbed failure by asset kind.

        Returns None for unclassified paths; the caller re-raises.
        """
        kind = AssetKind.from_path(path)

        if kind is AssetKind.SCRIPT:
            return javascript_exception_response(error)
        if kind is AssetKind.STYLESHEET:
            return css_exception_response(error)
        return None


def _elapsed_ms(start_time: float) -> int:
    return int((time.time() - start_time) * 1000)


def serve_asset(request: AssetRequest, resolver: AssetResolver) -> HTTPResponse:
    """
    Serve a single request against `resolver`.

    Convenience wrapper for one-off calls:

        response = serve_asset(AssetRequest.from_target("/app.js"), resolver)
    """
    return AssetHandler(resolver).handle(request)
