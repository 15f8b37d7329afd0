"""
=============================================================================
ASSET REQUEST DESCRIPTOR
=============================================================================

The normalized view of an incoming request that the asset handler works on.

=============================================================================
WHAT THE HANDLER NEEDS
=============================================================================

An asset request only needs three things out of the full HTTP message:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │    GET /assets/application-0aa2105d29558f3e.js?body=1 HTTP/1.1      │
    │            └──────────────┬──────────────────┘ └─┬──┘               │
    │                         path               query_string             │
    │                                                                      │
    │    If-None-Match: "0aa2105d29558f3eb790d411d7d8fb66"   ─┐           │
    │    Accept-Encoding: gzip, deflate                       ─┴ headers  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The path is kept exactly as received (still percent-encoded). The handler
decodes it itself, so that the security check and the fingerprint check
each look at the form they need.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional


@dataclass(frozen=True)
class AssetRequest:
    """
    Represents one asset request.

    Immutable: the handler derives everything else (logical path,
    lookup options, cache policy) from it without changing it.

    =========================================================================
    ATTRIBUTES
    =========================================================================

        path:           Request path relative to the mount point, with its
                        leading "/" and still percent-encoded.
                        "/foo-0aa2105d.js", "/stylesheets/app%20main.css"

        query_string:   Raw query string without the "?".
                        "body=1"

        headers:        Header name → value with LOWERCASE keys, the same
                        normalization HTTP parsers apply (RFC 7230 header
                        names are case-insensitive).

    =========================================================================
    """

    path: str
    query_string: str = ""
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_target(
        cls,
        target: str,
        headers: Optional[Mapping[str, str]] = None,
    ) -> "AssetRequest":
        """
        Build a request from a request-target and a header mapping.

        Example:
            >>> request = AssetRequest.from_target(
            ...     "/application.js?body=1",
            ...     {"If-None-Match": '"abc123"'},
            ... )
            >>> request.path, request.query_string
            ('/application.js', 'body=1')
            >>> request.if_none_match
            '"abc123"'
        """
        path, _, query = target.partition("?")
        # A fragment never reaches a server, but tolerate one from tooling
        path = path.split("#", 1)[0]
        normalized = {name.lower(): value for name, value in (headers or {}).items()}
        return cls(path=path or "/", query_string=query, headers=normalized)

    # =========================================================================
    # HEADER ACCESSORS
    # =========================================================================

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower(), default)

    @property
    def if_none_match(self) -> Optional[str]:
        """The conditional-match token sent back by a caching client."""
        return self.get_header("if-none-match")

    @property
    def accept_encoding(self) -> Optional[str]:
        """
        The Accept-Encoding header, or None when the client sent none.

        An empty header is returned as "" and still counts as present.
        """
        return self.get_header("accept-encoding")
