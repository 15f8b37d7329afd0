"""
=============================================================================
MIME TYPE DETECTION
=============================================================================

Maps asset file extensions to the Content-Type the pipeline reports.

=============================================================================
WHY IT MATTERS FOR ASSETS
=============================================================================

    script.js served as text/plain   → browser refuses to execute it
    style.css served as text/plain   → browser refuses to apply it
                                       (strict MIME checking)

For text types the resolver also reports a charset, which the handler
appends only to text/* types:

    text/css                → "text/css; charset=utf-8"
    application/javascript  → "application/javascript"   (no charset)

=============================================================================
"""

from pathlib import Path
from typing import Optional


# =============================================================================
# MIME TYPE DATABASE
# =============================================================================
#
# Lowercase extension (with dot) → MIME type. Scripts use
# application/javascript, the type asset pipelines have always emitted.
#
# =============================================================================

MIME_TYPES = {
    # Compiled asset types
    ".js": "application/javascript",
    ".mjs": "application/javascript",
    ".css": "text/css",
    ".map": "application/json",
    ".json": "application/json",

    # Documents
    ".html": "text/html",
    ".htm": "text/html",
    ".txt": "text/plain",
    ".xml": "application/xml",

    # Images
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    ".webp": "image/webp",

    # Fonts
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",
    ".otf": "font/otf",
    ".eot": "application/vnd.ms-fontobject",

    ".wasm": "application/wasm",
}

DEFAULT_MIME_TYPE = "application/octet-stream"

# Text-based types worth gzipping. Fonts and images are already compressed.
COMPRESSIBLE_TYPES = {
    "text/css",
    "text/html",
    "text/plain",
    "application/javascript",
    "application/json",
    "application/xml",
    "image/svg+xml",
}


def get_mime_type(path: "str | Path", default: Optional[str] = None) -> str:
    """
    Get the MIME type for a file based on its extension.

    Examples:
        >>> get_mime_type("application.js")
        'application/javascript'

        >>> get_mime_type("unknown.xyz")
        'application/octet-stream'
    """
    if isinstance(path, str):
        path = Path(path)

    extension = path.suffix.lower()  # .CSS → .css
    return MIME_TYPES.get(extension, default or DEFAULT_MIME_TYPE)


def is_text_type(mime_type: str) -> bool:
    """
    Check if a MIME type carries text the pipeline can decode and process.

    JavaScript and JSON are text even though they live under application/.
    """
    if mime_type.startswith("text/"):
        return True

    return mime_type in {
        "application/javascript",
        "application/json",
        "application/xml",
        "image/svg+xml",
    }


def is_compressible(mime_type: str) -> bool:
    """Whether a gzip variant of this type is worth producing."""
    return mime_type.split(";")[0].strip().lower() in COMPRESSIBLE_TYPES
