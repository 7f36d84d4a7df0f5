"""Store access for cachelab.

The policies talk to a ``CacheStore``:
- RedisStore wraps the process-wide ``redis.asyncio`` client
- InMemoryStore is a single-process fake with Redis-like TTL semantics
"""

from cachelab.cache.keys import CHILD_PARENT_VERSION_FIELD, CHILD_VALUE_FIELD, CacheKeys
from cachelab.cache.redis import close_redis, get_redis
from cachelab.cache.store import CacheStore, InMemoryStore, RedisStore

__all__ = [
    "CHILD_PARENT_VERSION_FIELD",
    "CHILD_VALUE_FIELD",
    "CacheKeys",
    "CacheStore",
    "InMemoryStore",
    "RedisStore",
    "close_redis",
    "get_redis",
]
