"""
pytest configuration and fixtures.
"""

import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Generator, List, Optional, Tuple

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from assetserver.assets import Asset, AssetResolver, LookupOptions
from assetserver.config import AssetServerConfig
from assetserver.handlers import AssetHandler
from assetserver.server import AssetServer


FINGERPRINT = "0aa2105d29558f3eb790d411d7d8fb66"
MTIME = datetime(2026, 1, 15, 12, 30, 45, tzinfo=timezone.utc)


class StubResolver(AssetResolver):
    """
    In-memory resolver that records every call.

    Honors if_match like a real resolver; raises `error` when set.
    """

    def __init__(self, assets: Optional[Dict[str, Asset]] = None, error: Optional[BaseException] = None):
        self.assets = assets or {}
        self.error = error
        self.calls: List[Tuple[str, LookupOptions]] = []

    def resolve(self, logical_path: str, options: LookupOptions) -> Optional[Asset]:
        self.calls.append((logical_path, options))
        if self.error is not None:
            raise self.error

        asset = self.assets.get(logical_path)
        if asset is None:
            return None
        if options.if_match is not None and options.if_match != asset.digest:
            return None
        return asset


def make_asset(
    logical_path: str = "foo.js",
    content: bytes = b"var foo = 1;\n",
    digest: str = "abc123",
    **kwargs,
) -> Asset:
    """Asset with sensible defaults for handler tests."""
    kwargs.setdefault("content_type", "application/javascript")
    kwargs.setdefault("charset", "utf-8")
    return Asset(
        logical_path=logical_path,
        content=content,
        digest=digest,
        mtime=MTIME,
        **kwargs,
    )


@pytest.fixture
def script_asset() -> Asset:
    return make_asset()


@pytest.fixture
def fingerprinted_asset() -> Asset:
    return make_asset(digest=FINGERPRINT)


@pytest.fixture
def stylesheet_asset() -> Asset:
    return make_asset(
        logical_path="site.css",
        content=b"body { color: red; }\n",
        digest="def456",
        content_type="text/css",
    )


@pytest.fixture
def resolver(script_asset: Asset, stylesheet_asset: Asset) -> StubResolver:
    return StubResolver({"foo.js": script_asset, "site.css": stylesheet_asset})


@pytest.fixture
def handler(resolver: StubResolver) -> AssetHandler:
    return AssetHandler(resolver)


@pytest.fixture
def asset_tree(tmp_path: Path) -> Path:
    """
    A small source tree:

        javascripts/application.js   requires jquery and ./lib/util
        javascripts/jquery.js
        javascripts/lib/util.js
        stylesheets/site.css         requires reset
        stylesheets/reset.css
        images/logo.png
    """
    js = tmp_path / "javascripts"
    css = tmp_path / "stylesheets"
    images = tmp_path / "images"
    (js / "lib").mkdir(parents=True)
    css.mkdir()
    images.mkdir()

    (js / "application.js").write_text(
        "//= require jquery\n"
        "//= require ./lib/util\n"
        "\n"
        "app.start();\n"
    )
    (js / "jquery.js").write_text("window.$ = function () {};\n")
    (js / "lib" / "util.js").write_text("var util = {};\n")

    (css / "site.css").write_text(
        "/*\n"
        " *= require reset\n"
        " */\n"
        "body { color: red; }\n"
    )
    (css / "reset.css").write_text("* { margin: 0; }\n")

    (images / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n" + bytes(range(32)))

    return tmp_path


class RunningServer:
    """Asset server running in a background thread."""

    def __init__(self, server: AssetServer):
        self.server = server
        self._thread: Optional[threading.Thread] = None

    @property
    def port(self) -> int:
        return self.server.server_address[1]

    def start(self):
        self._thread = threading.Thread(target=self.server.serve_forever, daemon=True)
        self._thread.start()

    def stop(self):
        self.server.shutdown()
        self.server.server_close()
        if self._thread is not None:
            self._thread.join(timeout=5.0)


@pytest.fixture
def running_server(asset_tree: Path) -> Generator[RunningServer, None, None]:
    """Server on an ephemeral port, mounted at /assets."""
    config = AssetServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        paths=[str(asset_tree / "javascripts"), str(asset_tree / "stylesheets")],
        gzip_min_size=0,
    )
    server = RunningServer(AssetServer(config))
    server.start()

    yield server

    server.stop()
