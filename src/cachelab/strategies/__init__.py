"""Cache invalidation strategies.

- AbsoluteExpirationPolicy: fixed TTL set at write time
- SlidingExpirationPolicy: TTL reset on every successful read
- DependentCachePolicy: child entry invalidated when its parent version moves
"""

from cachelab.strategies.absolute import AbsoluteExpirationPolicy
from cachelab.strategies.base import CacheReport, CacheStrategy, Outcome
from cachelab.strategies.dependent import DependentCachePolicy, VersionClock
from cachelab.strategies.registry import STRATEGY_NAMES, build_strategies
from cachelab.strategies.sliding import SlidingExpirationPolicy

__all__ = [
    "AbsoluteExpirationPolicy",
    "CacheReport",
    "CacheStrategy",
    "DependentCachePolicy",
    "Outcome",
    "STRATEGY_NAMES",
    "SlidingExpirationPolicy",
    "VersionClock",
    "build_strategies",
]
