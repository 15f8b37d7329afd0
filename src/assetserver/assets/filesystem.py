"""
=============================================================================
FILESYSTEM ASSET RESOLVER
=============================================================================

A small asset pipeline over one or more directories of sources.

=============================================================================
WHAT IT DOES
=============================================================================

    app/assets/javascripts/
    ├── application.js        //= require jquery
    │                         //= require ./lib/util
    │                         console.log("app");
    ├── jquery.js
    └── lib/util.js

    resolve("application.js", LookupOptions(bundle=True))
        → jquery.js + lib/util.js + application.js  (directives removed)

    resolve("application.js", LookupOptions(bundle=False))
        → application.js only                        (directives removed)

=============================================================================
DIRECTIVES
=============================================================================

Only the leading comment block of a .js or .css file is scanned:

    //= require name          JavaScript
    /*= require name */       CSS, one line
     *= require name          CSS, inside a /* ... */ block

A name without an extension takes the requiring file's extension.
Names starting with ./ or ../ are relative to the requiring file; other
names are looked up in every root, in order. Each file is emitted once,
dependencies first.

=============================================================================
ENCODINGS AND DIGESTS
=============================================================================

The digest is the MD5 hex of the bytes actually served. When the client
accepts gzip, the type compresses well and the body is big enough, the
gzip variant is served with its own digest. gzip's header timestamp is
pinned to 0 so the same sources always give the same bytes (and ETag).

=============================================================================
"""

import gzip
import hashlib
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from ..http.mime_types import MIME_TYPES, get_mime_type, is_compressible, is_text_type
from .asset import Asset, LookupOptions
from .errors import (
    CircularDependencyError,
    ContentTypeMismatch,
    EncodingError,
    FileNotFound,
)
from .resolver import AssetResolver


logger = logging.getLogger(__name__)


# Types whose leading comment block is scanned for directives
PROCESSED_TYPES = {"application/javascript", "text/css"}

DIRECTIVE_PATTERN = re.compile(
    r"""^\s*(?:/\*+|//|\*)\s*=\s*require\s+['"]?([^'"\s*]+)['"]?\s*(?:\*/)?\s*$"""
)

# Blank lines and comment lines keep us inside the header
COMMENT_LINE = re.compile(r"^\s*(?:$|//|/\*|\*)")

QVALUE_PATTERN = re.compile(r"q\s*=\s*([0-9.]+)")


class FileSystemResolver(AssetResolver):
    """
    Resolve logical paths against a list of source directories.

    Holds no state between calls, so one instance can serve many threads.

    Usage:
        resolver = FileSystemResolver(["app/assets/javascripts",
                                       "app/assets/stylesheets"])
        asset = resolver.resolve("application.js", LookupOptions())
    """

    def __init__(
        self,
        paths: Iterable["str | Path"],
        gzip_enabled: bool = True,
        gzip_level: int = 6,
        gzip_min_size: int = 1024,
        default_charset: str = "utf-8",
    ):
        """
        Args:
            paths: Source roots, searched in order.
            gzip_enabled: Serve gzip variants to clients that accept them.
            gzip_level: Compression level (1-9).
            gzip_min_size: Smallest body, in bytes, worth compressing.
            default_charset: Charset used to decode and encode text assets.
        """
        self.paths = [Path(path).resolve() for path in paths]
        self.gzip_enabled = gzip_enabled
        self.gzip_level = gzip_level
        self.gzip_min_size = gzip_min_size
        self.default_charset = default_charset

    def resolve(self, logical_path: str, options: LookupOptions) -> Optional[Asset]:
        filename = self._find_file(logical_path)
        if filename is None:
            return None

        content_type = get_mime_type(filename)
        charset = self.default_charset if is_text_type(content_type) else None

        if content_type in PROCESSED_TYPES:
            content, mtime = self._compile(filename, bundle=options.bundle)
        else:
            content = filename.read_bytes()
            mtime = filename.stat().st_mtime

        encoding = None
        if options.accept_encoding is not None and self._should_gzip(
            options.accept_encoding, content_type, content
        ):
            content = gzip.compress(content, compresslevel=self.gzip_level, mtime=0)
            encoding = "gzip"

        digest = hashlib.md5(content, usedforsecurity=False).hexdigest()

        if options.if_match is not None and options.if_match != digest:
            logger.debug(f"Digest mismatch for {logical_path}: {options.if_match} != {digest}")
            return None

        return Asset(
            logical_path=logical_path,
            content=content,
            digest=digest,
            mtime=datetime.fromtimestamp(mtime, tz=timezone.utc),
            encoding=encoding,
            content_type=content_type,
            charset=charset,
            filename=filename,
        )

    # =========================================================================
    # LOOKUP
    # =========================================================================

    def _find_file(self, logical_path: str) -> Optional[Path]:
        """First root containing `logical_path` as a regular file."""
        for root in self.paths:
            candidate = _regular_file(root / logical_path)
            if candidate is not None and self._within(candidate, root):
                return candidate
        return None

    def _find_dependency(self, name: str, requirer: Path, lineno: int) -> Path:
        if Path(name).suffix.lower() not in MIME_TYPES:
            name += requirer.suffix

        if name.startswith("./") or name.startswith("../"):
            candidate = _regular_file(requirer.parent / name)
            found = candidate if candidate is not None and self._within_roots(candidate) else None
        else:
            found = self._find_file(name)

        if found is None:
            raise FileNotFound(
                f"couldn't find file '{name}'",
                origin=f"{self._display(requirer)}:{lineno}",
            )
        return found

    def _within_roots(self, path: Path) -> bool:
        return any(self._within(path, root) for root in self.paths)

    @staticmethod
    def _within(path: Path, root: Path) -> bool:
        # resolve() already followed ".." and symlinks
        try:
            path.relative_to(root)
        except ValueError:
            return False
        return True

    def _display(self, path: Path) -> str:
        """Path relative to its root, for error origins."""
        for root in self.paths:
            if self._within(path, root):
                return path.relative_to(root).as_posix()
        return str(path)

    # =========================================================================
    # COMPILATION
    # =========================================================================

    def _compile(self, filename: Path, bundle: bool) -> Tuple[bytes, float]:
        """Build a script or stylesheet; returns (bytes, newest mtime)."""
        parts: List[str] = []
        mtimes: List[float] = []

        if bundle:
            self._collect(filename, parts, mtimes, emitted=set(), stack=())
        else:
            body, _ = self._read_source(filename)
            parts.append(body)
            mtimes.append(filename.stat().st_mtime)

        # Every bundled part but the last ends with a newline
        for index in range(len(parts) - 1):
            if parts[index] and not parts[index].endswith("\n"):
                parts[index] += "\n"

        logger.debug(f"Compiled {self._display(filename)} from {len(parts)} file(s)")
        return "".join(parts).encode(self.default_charset), max(mtimes)

    def _collect(
        self,
        filename: Path,
        parts: List[str],
        mtimes: List[float],
        emitted: set,
        stack: Tuple[Path, ...],
    ) -> None:
        """Depth-first: dependencies before the file that requires them."""
        if filename in emitted:
            return

        body, requires = self._read_source(filename)
        chain = stack + (filename,)

        for lineno, name in requires:
            dependency = self._find_dependency(name, filename, lineno)
            origin = f"{self._display(filename)}:{lineno}"

            if dependency in chain:
                raise CircularDependencyError(
                    f"{self._display(dependency)} has already been required",
                    origin=origin,
                )

            if get_mime_type(dependency) != get_mime_type(filename):
                raise ContentTypeMismatch(
                    f"{self._display(dependency)} is '{get_mime_type(dependency)}', "
                    f"not '{get_mime_type(filename)}'",
                    origin=origin,
                )

            self._collect(dependency, parts, mtimes, emitted, chain)

        emitted.add(filename)
        parts.append(body)
        mtimes.append(filename.stat().st_mtime)

    def _read_source(self, filename: Path) -> Tuple[str, List[Tuple[int, str]]]:
        """
        Decode a source file and split off its directives.

        Returns the body with directive lines removed, and the list of
        (line number, required name) pairs in source order.
        """
        try:
            text = filename.read_bytes().decode(self.default_charset)
        except UnicodeDecodeError as e:
            raise EncodingError(
                f"{self._display(filename)} is not valid {self.default_charset}: {e.reason}",
                origin=f"{self._display(filename)}:1",
            ) from e

        body_lines = []
        requires = []
        in_header = True

        for lineno, line in enumerate(text.splitlines(keepends=True), start=1):
            if in_header:
                match = DIRECTIVE_PATTERN.match(line)
                if match:
                    requires.append((lineno, match.group(1)))
                    continue
                if not COMMENT_LINE.match(line):
                    in_header = False
            body_lines.append(line)

        return "".join(body_lines), requires

    # =========================================================================
    # ENCODING NEGOTIATION
    # =========================================================================

    def _should_gzip(self, accept_encoding: str, content_type: str, content: bytes) -> bool:
        if not self.gzip_enabled:
            return False
        if not is_compressible(content_type):
            return False
        if len(content) < self.gzip_min_size:
            return False
        return accepts_gzip(accept_encoding)


def _regular_file(path: Path) -> Optional[Path]:
    """
    `path` fully resolved if it names a regular file, else None.

    Names no filesystem can hold (an embedded NUL, too long) count as
    missing.
    """
    try:
        path = path.resolve()
        return path if path.is_file() else None
    except (OSError, ValueError):
        return None


def accepts_gzip(accept_encoding: str) -> bool:
    """
    Whether an Accept-Encoding header admits gzip.

        >>> accepts_gzip("gzip, deflate, br")
        True
        >>> accepts_gzip("gzip;q=0, identity")
        False
        >>> accepts_gzip("*")
        True
    """
    for item in accept_encoding.split(","):
        coding, _, params = item.partition(";")
        if coding.strip().lower() not in ("gzip", "x-gzip", "*"):
            continue

        match = QVALUE_PATTERN.search(params)
        try:
            quality = float(match.group(1)) if match else 1.0
        except ValueError:
            quality = 0.0
        return quality > 0

    return False
