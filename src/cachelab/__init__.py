"""cachelab: cache invalidation strategies on top of a key-value store.

Three policies share one contract (``name``, ``key``, ``set``/``get``/``check``):
- absolute expiration, where the TTL is fixed at write time
- sliding expiration, where reads reset the TTL
- dependent caching, where a child entry is tied to its parent's version
"""

__version__ = "0.1.0"
