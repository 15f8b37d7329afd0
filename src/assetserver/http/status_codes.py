"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The handful of status codes an asset server ever answers with.

    ┌────────┬───────────────────────────────────────────────────────────┐
    │  200   │ Asset body, or compile-failure content for .js / .css     │
    │  304   │ Client's cached copy is still valid (ETag matched)       │
    │  403   │ Path traversal attempt ("..")                            │
    │  404   │ Resolver has no such asset (X-Cascade: pass)             │
    │  405   │ Method other than GET/HEAD reached the HTTP adapter      │
    │  500   │ Failure propagated to the process boundary               │
    └────────┴───────────────────────────────────────────────────────────┘

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes with reason phrases.

        >>> HTTPStatus.NOT_MODIFIED == 304
        True
        >>> HTTPStatus.NOT_MODIFIED.phrase
        'Not Modified'
    """

    OK = 200
    NOT_MODIFIED = 304                  # Cached version is still valid
    FORBIDDEN = 403                     # Refused, typically ".." in the path
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    INTERNAL_SERVER_ERROR = 500         # Unabsorbed failure

    @property
    def phrase(self) -> str:
        """Reason phrase for the status line ("HTTP/1.1 304 Not Modified")."""
        return _STATUS_PHRASES.get(self, "Unknown")

    @property
    def is_error(self) -> bool:
        """4xx or 5xx."""
        return self >= 400

    @property
    def allows_body(self) -> bool:
        """
        Whether a response with this status may carry a message body.

        RFC 7230 §3.3.3: a 304 never has one, so neither a body nor an
        implied Content-Length is written for it.
        """
        return self is not HTTPStatus.NOT_MODIFIED


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.NOT_MODIFIED: "Not Modified",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}
