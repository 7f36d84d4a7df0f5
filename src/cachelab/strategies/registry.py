"""Strategy construction for the playground."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cachelab.cache.keys import CacheKeys
from cachelab.strategies.absolute import AbsoluteExpirationPolicy
from cachelab.strategies.dependent import DependentCachePolicy, VersionClock
from cachelab.strategies.sliding import SlidingExpirationPolicy

if TYPE_CHECKING:
    from cachelab.cache.store import CacheStore
    from cachelab.config import Settings
    from cachelab.strategies.base import CacheStrategy

# CLI names, in menu order
STRATEGY_NAMES = ("absolute", "sliding", "dependent")


def build_strategies(store: CacheStore, settings: Settings) -> dict[str, CacheStrategy]:
    """Create one instance of each strategy sharing the given store."""
    keys = CacheKeys.from_settings(settings)
    return {
        "absolute": AbsoluteExpirationPolicy(store, key=keys.absolute, ttl=settings.ttl_seconds),
        "sliding": SlidingExpirationPolicy(store, key=keys.sliding, ttl=settings.ttl_seconds),
        "dependent": DependentCachePolicy(
            store,
            parent_key=keys.parent,
            parent_version_key=keys.parent_version,
            child_key=keys.child,
            clock=VersionClock(strict=settings.strict_versions),
        ),
    }
