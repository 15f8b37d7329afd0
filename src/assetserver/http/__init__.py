"""
=============================================================================
HTTP MODULE
=============================================================================

HTTP value types the asset handler speaks:

    request.py       AssetRequest - path, query string, headers
    response.py      HTTPResponse, ResponseBuilder, format_http_date
    status_codes.py  HTTPStatus enum with reason phrases
    mime_types.py    Extension → Content-Type, charset and gzip rules

=============================================================================
"""

from .request import AssetRequest
from .response import (
    HTTPResponse,
    ResponseBuilder,
    format_http_date,
    forbidden,
    not_found,
    internal_error,
    method_not_allowed,
)
from .status_codes import HTTPStatus
from .mime_types import get_mime_type, is_text_type, is_compressible

__all__ = [
    "AssetRequest",
    "HTTPResponse",
    "ResponseBuilder",
    "HTTPStatus",
    "format_http_date",
    "forbidden",
    "not_found",
    "internal_error",
    "method_not_allowed",
    "get_mime_type",
    "is_text_type",
    "is_compressible",
]
