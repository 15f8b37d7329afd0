"""
=============================================================================
ASSET SERVER CONFIGURATION
=============================================================================

Centralized configuration for serving an asset pipeline over HTTP.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m assetserver serve --port 3000 app/assets         │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── ASSETS_PORT=3000 python -m assetserver serve               │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

import os
from dataclasses import dataclass, field
from typing import List


class ConfigError(ValueError):
    """Raised by AssetServerConfig.validate() for unusable settings."""


_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class AssetServerConfig:
    """
    Configuration for the asset server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK     host, port
    MOUNT       url_prefix
    PIPELINE    paths, gzip, gzip_level, gzip_min_size, default_charset
    LOGGING     log_level
    IDENTITY    server_name

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """Interface to bind. "0.0.0.0" for containers."""

    port: int = 8080
    """TCP port to listen on. 0 lets the OS pick one (tests)."""

    # ─────────────────────────────────────────────────────────────────────
    # MOUNT POINT
    # ─────────────────────────────────────────────────────────────────────

    url_prefix: str = "/assets"
    """
    URL prefix the pipeline is mounted at.
    "/assets/foo/bar.js" is looked up as "foo/bar.js".
    """

    # ─────────────────────────────────────────────────────────────────────
    # PIPELINE
    # ─────────────────────────────────────────────────────────────────────

    paths: List[str] = field(default_factory=list)
    """Asset source directories, searched in order."""

    gzip: bool = True
    """Serve gzip variants to clients sending Accept-Encoding: gzip."""

    gzip_level: int = 6
    """Compression level, 1 (fastest) to 9 (smallest)."""

    gzip_min_size: int = 1024
    """Bodies smaller than this are not worth the gzip overhead."""

    default_charset: str = "utf-8"
    """Charset of text sources, reported on text/* responses."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """DEBUG shows every compile; INFO one line per request."""

    server_name: str = "assetserver/1.0"
    """Value of the Server header."""

    @classmethod
    def from_env(cls) -> "AssetServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        ASSETS_HOST        Bind address (default: 127.0.0.1)
        ASSETS_PORT        Port (default: 8080)
        ASSETS_URL_PREFIX  Mount point (default: /assets)
        ASSETS_PATHS       Source dirs, os.pathsep separated
                           ("app/assets/javascripts:app/assets/stylesheets")
        ASSETS_GZIP        1/true/yes/on to enable gzip (default: on)
        ASSETS_LOG_LEVEL   Logging level (default: INFO)

        =====================================================================
        """
        raw_paths = os.getenv("ASSETS_PATHS", "")
        return cls(
            host=os.getenv("ASSETS_HOST", "127.0.0.1"),
            port=int(os.getenv("ASSETS_PORT", "8080")),
            url_prefix=os.getenv("ASSETS_URL_PREFIX", "/assets"),
            paths=[path for path in raw_paths.split(os.pathsep) if path],
            gzip=os.getenv("ASSETS_GZIP", "1").strip().lower() in _TRUTHY,
            log_level=os.getenv("ASSETS_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values, failing fast at startup.

        Raises:
            ConfigError: describing the first invalid setting.
        """
        if not 0 <= self.port < 65536:
            raise ConfigError(f"Invalid port: {self.port}. Must be 0-65535.")

        if not self.url_prefix.startswith("/"):
            raise ConfigError(f"url_prefix must start with '/': {self.url_prefix!r}")

        if not self.paths:
            raise ConfigError("At least one asset path is required")

        for path in self.paths:
            if not os.path.isdir(path):
                raise ConfigError(f"Asset path does not exist: {path}")

        if not 1 <= self.gzip_level <= 9:
            raise ConfigError("gzip_level must be between 1 and 9")

        if self.gzip_min_size < 0:
            raise ConfigError("gzip_min_size must be >= 0")

        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigError(f"Unknown log level: {self.log_level}")

    @property
    def mount_prefix(self) -> str:
        """url_prefix without a trailing slash ("/" mounts at the root)."""
        return self.url_prefix.rstrip("/")
