"""
Asset values exchanged between the handler and a resolver.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class LookupOptions:
    """
    Per-request options the handler passes to the resolver.

        bundle:          True  → dependencies concatenated into one asset
                         False → only the requested file's own body
                                 (requested with ?body=1)

        if_match:        Fingerprint taken from the URL. The resolver must
                         return None unless the asset's digest equals it.

        accept_encoding: Client's Accept-Encoding header, for picking an
                         encoded variant. Never set together with if_match.
    """

    bundle: bool = True
    if_match: Optional[str] = None
    accept_encoding: Optional[str] = None


@dataclass(frozen=True)
class Asset:
    """
    A compiled asset, owned by the resolver and read-only to the handler.

        digest:       Hex content hash of `content` (the bytes actually
                      served, so a gzip variant has its own digest).
        mtime:        Last modification time, newest of the asset and
                      everything bundled into it.
        encoding:     Content-Encoding of `content`, e.g. "gzip".
        content_type: MIME type without parameters.
        charset:      Charset for text types.
    """

    logical_path: str
    content: bytes
    digest: str
    mtime: datetime
    encoding: Optional[str] = None
    content_type: Optional[str] = None
    charset: Optional[str] = None
    filename: Optional[Path] = None

    @property
    def length(self) -> int:
        """Byte length of the content."""
        return len(self.content)

    @property
    def etag(self) -> str:
        """The digest quoted for use as an entity tag."""
        return f'"{self.digest}"'
