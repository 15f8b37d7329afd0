"""
=============================================================================
ASSETS MODULE
=============================================================================

The asset side of the serving contract:

    asset.py       Asset, LookupOptions - values crossing the boundary
    resolver.py    AssetResolver - the capability the handler is given
    errors.py      AssetError hierarchy - failures reported in-asset
    filesystem.py  FileSystemResolver - a directory-backed pipeline

=============================================================================
"""

from .asset import Asset, LookupOptions
from .resolver import AssetResolver
from .errors import (
    AssetError,
    CompileError,
    FileNotFound,
    CircularDependencyError,
    EncodingError,
    ContentTypeMismatch,
)
from .filesystem import FileSystemResolver

__all__ = [
    "Asset",
    "LookupOptions",
    "AssetResolver",
    "AssetError",
    "CompileError",
    "FileNotFound",
    "CircularDependencyError",
    "EncodingError",
    "ContentTypeMismatch",
    "FileSystemResolver",
]
