"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

The response value returned by the asset handler, a fluent builder for it,
and HTTP-date formatting.

=============================================================================
RESPONSE SHAPES
=============================================================================

    ┌────────┬─────────────────────────────────────┬─────────────────────┐
    │ Status │ Headers                             │ Body                │
    ├────────┼─────────────────────────────────────┼─────────────────────┤
    │  200   │ Content-Encoding?, Content-Length,  │ asset bytes, or     │
    │        │ Content-Type?, Cache-Control,       │ compile-failure     │
    │        │ Last-Modified, ETag, Vary?          │ content             │
    │  304   │ Cache-Control, Last-Modified, ETag, │ (empty)             │
    │        │ Vary?                               │                     │
    │  403   │ Content-Type, Content-Length: 9     │ "Forbidden"         │
    │  404   │ Content-Type, Content-Length: 9,    │ "Not found"         │
    │        │ X-Cascade: pass                     │                     │
    └────────┴─────────────────────────────────────┴─────────────────────┘

Headers are kept in a plain dict: insertion ordered, one value per name.

=============================================================================
THE BUILDER PATTERN
=============================================================================

    response = (ResponseBuilder()
        .status(HTTPStatus.OK)
        .header("Content-Type", "application/javascript")
        .body(b"throw Error(...)")
        .build())

Each method returns `self`, so construction reads top to bottom in the
order the headers end up on the wire.

=============================================================================
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Union

from .status_codes import HTTPStatus


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response produced by the handler.

    A plain data container. Use ResponseBuilder to construct one.

    =========================================================================
    INVARIANTS
    =========================================================================

    - headers has no duplicate names (it's a dict)
    - when body is non-empty and Content-Length is set, it equals len(body)
    - a 304 carries no body

    =========================================================================
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """Status line, e.g. HTTP/1.1 304 Not Modified."""
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    def to_bytes(self, server_name: str = "assetserver", include_body: bool = True) -> bytes:
        """
        Serialize the response for the wire.

        =====================================================================
        SERIALIZATION FORMAT
        =====================================================================

            HTTP/1.1 200 OK\\r\\n
            Content-Length: 27\\r\\n        ← added if missing (not on 304)
            Content-Type: application/javascript\\r\\n
            Date: Wed, 01 Jan 2026 ...\\r\\n  ← added if missing
            Server: assetserver\\r\\n         ← added if missing
            \\r\\n
            <body bytes>                    ← omitted for 304

        =====================================================================

        Args:
            server_name: Value for the Server header.
            include_body: False for HEAD requests. Headers, including
                          Content-Length, stay those of the full response.
        """
        response_headers = dict(self.headers)

        if self.status.allows_body and "Content-Length" not in response_headers:
            response_headers["Content-Length"] = str(len(self.body))

        if "Date" not in response_headers:
            response_headers["Date"] = format_http_date(datetime.now(timezone.utc))

        if "Server" not in response_headers:
            response_headers["Server"] = server_name

        lines = [self.status_line]
        for name, value in response_headers.items():
            lines.append(f"{name}: {value}")
        lines.append("")

        header_bytes = "\r\n".join(lines).encode("latin-1") + b"\r\n"

        if not include_body or not self.status.allows_body:
            return header_bytes
        return header_bytes + self.body


class ResponseBuilder:
    """
    Fluent builder for constructing HTTP responses.

        response = (ResponseBuilder()
            .status(HTTPStatus.NOT_FOUND)
            .text("Not found")
            .header("X-Cascade", "pass")
            .build())
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body: bytes = b""

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        self._status = status
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        self._headers[name] = value
        return self

    def headers(self, headers: Dict[str, str]) -> "ResponseBuilder":
        """Add several headers at once, keeping their order."""
        self._headers.update(headers)
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        return self.header("Content-Type", content_type)

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """
        Set the body and a matching Content-Length.

        Strings are encoded to UTF-8 first, so Content-Length is always the
        byte length, never the character count.
        """
        if isinstance(body, str):
            body = body.encode("utf-8")
        self._body = body
        self._headers["Content-Length"] = str(len(body))
        return self

    def text(self, text: str, content_type: str = "text/plain") -> "ResponseBuilder":
        """Plain text body; Content-Type first, then Content-Length."""
        self._headers["Content-Type"] = content_type
        return self.body(text)

    def build(self) -> HTTPResponse:
        return HTTPResponse(
            status=self._status,
            headers=self._headers,
            body=self._body,
        )


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231).

    Format: Day, DD Mon YYYY HH:MM:SS GMT
    Example: Wed, 01 Jan 2026 12:00:00 GMT

    HTTP dates are always GMT. Aware datetimes are converted to UTC;
    naive ones are taken to be UTC already.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)

    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


# =============================================================================
# CANNED RESPONSES
# =============================================================================
#
# Byte-exact bodies: both are 9 bytes long, and Content-Length says so.
#
# =============================================================================

def forbidden() -> HTTPResponse:
    """403 Forbidden for path traversal attempts."""
    return (ResponseBuilder()
        .status(HTTPStatus.FORBIDDEN)
        .text("Forbidden")
        .build())


def not_found() -> HTTPResponse:
    """
    404 Not Found.

    X-Cascade: pass tells an enclosing router it may try the next
    application mounted at the same prefix.
    """
    return (ResponseBuilder()
        .status(HTTPStatus.NOT_FOUND)
        .text("Not found")
        .header("X-Cascade", "pass")
        .build())


def internal_error() -> HTTPResponse:
    """500 for failures nothing else absorbed."""
    return (ResponseBuilder()
        .status(HTTPStatus.INTERNAL_SERVER_ERROR)
        .text("Internal Server Error")
        .build())


def method_not_allowed(allowed_methods: list) -> HTTPResponse:
    """405 with the Allow header RFC 7231 requires."""
    return (ResponseBuilder()
        .status(HTTPStatus.METHOD_NOT_ALLOWED)
        .text("Method Not Allowed")
        .header("Allow", ", ".join(allowed_methods))
        .build())
