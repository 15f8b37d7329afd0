"""
=============================================================================
ASSET PATH PARSING
=============================================================================

Everything the handler learns from the request path and query string,
before any asset is looked up.

=============================================================================
FINGERPRINTS
=============================================================================

A fingerprint is a content hash embedded in the filename:

    application-0aa2105d29558f3eb790d411d7d8fb66.js
               └──────────────┬───────────────┘
                   7-40 hex chars before the final extension

    path_fingerprint("application-0aa2105d29558f3eb790d411d7d8fb66.js")
        → "0aa2105d29558f3eb790d411d7d8fb66"

    strip_fingerprint("application-0aa2105d29558f3eb790d411d7d8fb66.js")
        → "application.js"

Because the URL changes whenever the content does, a fingerprinted URL
can be cached "forever" (max-age of one year).

=============================================================================
PATH TRAVERSAL
=============================================================================

    GET /assets/../../../etc/passwd       → 403
    GET /assets/%2e%2e/%2e%2e/etc/passwd  → 403 (checked after decoding)

Any ".." in the decoded path is refused before the resolver sees it.

=============================================================================
"""

import re
from typing import Optional
from urllib.parse import unquote_plus


FINGERPRINT_PATTERN = re.compile(r"-([0-9a-f]{7,40})\.[^.]+$")

# "body=1", "body=t", "body=true"; deliberately loose
BODY_ONLY_PATTERN = re.compile(r"body=(1|t)")


def extract_path(raw_path: str) -> str:
    """
    Logical path from a raw request path.

    Drops one leading "/" and percent-decodes with form semantics, so
    "+" becomes a space.

        >>> extract_path("/stylesheets/app%20main.css")
        'stylesheets/app main.css'
    """
    if raw_path.startswith("/"):
        raw_path = raw_path[1:]
    return unquote_plus(raw_path)


def is_forbidden(path: str) -> bool:
    """True if the decoded path tries to climb out of the asset roots."""
    return ".." in path


def path_fingerprint(path: str) -> Optional[str]:
    """The fingerprint embedded in `path`, or None."""
    match = FINGERPRINT_PATTERN.search(path)
    return match.group(1) if match else None


def strip_fingerprint(path: str) -> str:
    """
    Remove the "-<fingerprint>" segment found by path_fingerprint().

    Only the segment right before the final extension is removed, even if
    the same hex string appears elsewhere in the path.
    """
    match = FINGERPRINT_PATTERN.search(path)
    if match is None:
        return path
    return path[:match.start()] + path[match.end(1):]


def wants_body_only(query_string: str) -> bool:
    """
    Whether the client asked for the file's own body without bundling.

    Tooling that assembles dependency graphs itself requests each file with
    ?body=1 and concatenates them in the browser.
    """
    return BODY_ONLY_PATTERN.search(query_string or "") is not None
