"""
=============================================================================
COMPILE FAILURES AS ASSET CONTENT
=============================================================================

When an asset fails to compile, a 500 would be invisible: the browser
just logs a failed <script> or <link> load. Instead the failure is
delivered *as the asset*, in a form the browser acts on.

=============================================================================
THE TWO RESPONSES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  SCRIPT (.js)                                                       │
    │                                                                      │
    │    throw Error("FileNotFound: couldn't find file 'jquery.js'\n     │
    │                   (in application.js:1)")                           │
    │                                                                      │
    │    → shows up in the browser console with the message and origin   │
    ├─────────────────────────────────────────────────────────────────────┤
    │  STYLESHEET (.css)                                                  │
    │                                                                      │
    │    body > * { display: none !important; }                           │
    │    body:before { content: "\\000a FileNotFound: ..."; }             │
    │                                                                      │
    │    → hides the page and paints the error over it                   │
    ├─────────────────────────────────────────────────────────────────────┤
    │  ANYTHING ELSE (.png, .woff, ...)                                   │
    │                                                                      │
    │    → no way to show an error inside it; the failure propagates     │
    └─────────────────────────────────────────────────────────────────────┘

Both are sent as 200 OK: a browser ignores the body of a failed script or
stylesheet load, and the body is the whole point.

=============================================================================
CSS STRING ESCAPING
=============================================================================

The message lands inside content: "...". Four characters could break out
of that string or the surrounding comment/rule, so they become CSS hex
escapes. A hex escape ends at the first space after it:

    \\   →  \\005c␠
    \\n  →  \\000a␠
    "   →  \\0022␠
    /   →  \\002f␠      (no "*/" can close a comment early)

=============================================================================
"""

import json
import traceback
from enum import Enum
from pathlib import PurePosixPath
from string import Template

from ..http.response import HTTPResponse, ResponseBuilder
from ..http.status_codes import HTTPStatus


class AssetKind(Enum):
    """What kind of asset a path names, by extension."""

    SCRIPT = "script"
    STYLESHEET = "stylesheet"
    UNCLASSIFIED = "unclassified"

    @classmethod
    def from_path(cls, path: str) -> "AssetKind":
        """
        Classify a path by its final extension.

            >>> AssetKind.from_path("application-0aa2105d.js")
            <AssetKind.SCRIPT: 'script'>
            >>> AssetKind.from_path("logo.png")
            <AssetKind.UNCLASSIFIED: 'unclassified'>
        """
        return _EXTENSION_KINDS.get(PurePosixPath(path).suffix, cls.UNCLASSIFIED)


_EXTENSION_KINDS = {
    ".js": AssetKind.SCRIPT,
    ".css": AssetKind.STYLESHEET,
}


# =============================================================================
# DESCRIBING THE FAILURE
# =============================================================================

def error_category(error: BaseException) -> str:
    """The failure's category name, e.g. "FileNotFound"."""
    return type(error).__name__


def error_origin(error: BaseException) -> str:
    """
    Where the failure came from.

    Prefers the asset source location a resolver attached
    ("application.js:3"), then the innermost Python frame of the
    traceback ("/srv/pipeline.py:88:in compile").
    """
    origin = getattr(error, "origin", None)
    if origin:
        return origin

    frames = traceback.extract_tb(error.__traceback__)
    if frames:
        frame = frames[-1]
        return f"{frame.filename}:{frame.lineno}:in {frame.name}"

    return "unknown"


def escape_css_content(content: str) -> str:
    """Escape text for use inside a CSS content: "..." string."""
    return (content
        .replace("\\", "\\005c ")
        .replace("\n", "\\000a ")
        .replace('"', "\\0022 ")
        .replace("/", "\\002f "))


# =============================================================================
# RESPONSES
# =============================================================================

def javascript_exception_response(error: BaseException) -> HTTPResponse:
    """
    A script that rethrows `error` in the browser.

    json.dumps produces a valid JavaScript string literal, quotes and
    newlines escaped.
    """
    err = f"{error_category(error)}: {error}\n  (in {error_origin(error)})"
    body = f"throw Error({json.dumps(err)})"

    return (ResponseBuilder()
        .status(HTTPStatus.OK)
        .content_type("application/javascript")
        .body(body)
        .build())


_CSS_ERROR_TEMPLATE = Template("""\
html {
  padding: 18px 36px;
}

head {
  display: block;
}

body {
  margin: 0;
  padding: 0;
}

body > * {
  display: none !important;
}

head:after, body:before, body:after {
  display: block !important;
}

head:after {
  font-family: sans-serif;
  font-size: large;
  font-weight: bold;
  content: "Error compiling CSS asset";
}

body:before, body:after {
  font-family: monospace;
  white-space: pre-wrap;
}

body:before {
  font-weight: bold;
  content: "$message";
}

body:after {
  content: "$backtrace";
}
""")


def css_exception_response(error: BaseException) -> HTTPResponse:
    """A stylesheet that hides the page and displays `error` instead."""
    message = f"\n{error_category(error)}: {error}"
    backtrace = f"\n  {error_origin(error)}"

    body = _CSS_ERROR_TEMPLATE.substitute(
        message=escape_css_content(message),
        backtrace=escape_css_content(backtrace),
    )

    return (ResponseBuilder()
        .status(HTTPStatus.OK)
        .content_type("text/css; charset=utf-8")
        .body(body)
        .build())
