"""
=============================================================================
ASSET RESOLVER INTERFACE
=============================================================================

The capability the asset handler depends on. The handler is given a
resolver; it does not inherit from one.

    ┌──────────────┐   resolve("app.js", LookupOptions(...))   ┌──────────┐
    │ AssetHandler │ ────────────────────────────────────────▶ │ Resolver │
    │              │ ◀──────────────────────────────────────── │          │
    └──────────────┘      Asset | None | raises AssetError     └──────────┘

Any pipeline (a filesystem tree, a precompiled manifest, an in-memory
map in tests) plugs in by implementing `resolve`.

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Optional

from .asset import Asset, LookupOptions


class AssetResolver(ABC):
    """
    Abstract base class for asset resolvers.

    =========================================================================
    THE RESOLVER CONTRACT
    =========================================================================

    resolve(logical_path, options) must:

    - return None when no asset exists at `logical_path`
    - return None when options.if_match is set and differs from the
      asset's digest
    - raise an AssetError subclass when the asset exists but cannot be
      built, so the handler can report it inside the served file

    Resolvers own any caching and any locking around concurrent compiles.
    The handler calls resolve() at most once per request.

    =========================================================================
    """

    @abstractmethod
    def resolve(self, logical_path: str, options: LookupOptions) -> Optional[Asset]:
        """Find and build the asset at `logical_path`."""
        raise NotImplementedError
