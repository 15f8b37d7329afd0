"""
=============================================================================
ASSET FAILURES
=============================================================================

Exceptions a resolver raises when it cannot produce an asset.

    AssetError                      base, carries an optional origin
    ├── CompileError                the pipeline failed to build the asset
    │   ├── FileNotFound            a required dependency does not exist
    │   ├── CircularDependencyError a require chain loops back on itself
    │   └── EncodingError           source bytes are not valid text
    └── ContentTypeMismatch         a .js asset required a .css one, etc.

The handler reports any failure inside a .js or .css response, but only
these carry an `origin` pointing into the asset sources. For other
exceptions it falls back to the Python traceback.

=============================================================================
"""

from typing import Optional


class AssetError(Exception):
    """
    Base class for failures in building an asset.

    `origin` points at where in the *asset sources* the failure happened,
    e.g. "app/assets/application.js:3". When it is None the handler falls
    back to the innermost Python traceback frame.
    """

    def __init__(self, message: str, origin: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.origin = origin


class CompileError(AssetError):
    """The pipeline could not compile an asset."""


class FileNotFound(CompileError):
    """A `require` directive names an asset no root contains."""


class CircularDependencyError(CompileError):
    """An asset (indirectly) requires itself."""


class EncodingError(CompileError):
    """Source bytes could not be decoded with the asset's charset."""


class ContentTypeMismatch(AssetError):
    """A required asset's type differs from the requiring asset's type."""
