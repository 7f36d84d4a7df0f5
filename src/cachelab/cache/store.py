"""Key-value store abstraction used by the cache policies.

Provides:
- CacheStore: the narrow operation set the policies depend on
- RedisStore: backed by an injected ``redis.asyncio`` client
- InMemoryStore: single-process fake with a pluggable clock

No implementation offers multi-key transactions. Every method touches a
single key, and the policies are written so their correctness rests only on
what they read back, never on grouped writes.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError
from redis.exceptions import TimeoutError as RedisTimeoutError

from cachelab.errors import StoreUnavailableError

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = logging.getLogger(__name__)

# Error text Redis replies with for a command against the wrong value type
WRONGTYPE = "WRONGTYPE Operation against a key holding the wrong kind of value"

Clock = Callable[[], float]


class CacheStore(ABC):
    """Abstract key-value store interface."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Get a string value, or None if the key is absent."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        """Write a string value, replacing any previous value and TTL."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove a key. Missing keys are ignored."""
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check whether a key is present."""
        pass

    @abstractmethod
    async def ttl(self, key: str) -> int | None:
        """Remaining lifetime in seconds.

        Returns None when the key is absent or has no expiry.
        """
        pass

    @abstractmethod
    async def expire(self, key: str, ttl: int) -> None:
        """Reset a key's TTL without rewriting its value."""
        pass

    @abstractmethod
    async def hget(self, key: str, field: str) -> str | None:
        """Get one field of a hash, or None if the key or field is absent."""
        pass

    @abstractmethod
    async def hset(self, key: str, mapping: Mapping[str, str | int]) -> None:
        """Write fields of a hash, creating it if needed."""
        pass

    async def ping(self) -> bool:
        """Check store connectivity."""
        return True

    async def close(self) -> None:
        """Release store resources."""
        return None


def _decode(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


@contextmanager
def _store_errors(operation: str, key: str | None = None) -> Iterator[None]:
    """Translate an unreachable or unresponsive server into StoreUnavailableError.

    Command errors such as ResponseError are bugs in the caller and propagate
    unchanged.
    """
    try:
        yield
    except (RedisConnectionError, RedisTimeoutError) as e:
        logger.error(f"Redis {operation} failed for {key}: {e}")
        raise StoreUnavailableError(operation, key, str(e)) from e


class RedisStore(CacheStore):
    """CacheStore backed by a shared ``redis.asyncio`` client.

    The client is owned by the caller; ``close`` is a no-op unless
    ``owns_client`` is set.
    """

    def __init__(self, client: Redis, owns_client: bool = False):
        self.client = client
        self.owns_client = owns_client

    async def get(self, key: str) -> str | None:
        with _store_errors("GET", key):
            return _decode(await self.client.get(key))

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        with _store_errors("SET", key):
            await self.client.set(key, value, ex=ttl)

    async def delete(self, key: str) -> None:
        with _store_errors("DEL", key):
            await self.client.delete(key)

    async def exists(self, key: str) -> bool:
        with _store_errors("EXISTS", key):
            return bool(await self.client.exists(key))

    async def ttl(self, key: str) -> int | None:
        with _store_errors("TTL", key):
            remaining = int(await self.client.ttl(key))
        # -2: key absent, -1: key has no expiry
        return remaining if remaining >= 0 else None

    async def expire(self, key: str, ttl: int) -> None:
        with _store_errors("EXPIRE", key):
            await self.client.expire(key, ttl)

    async def hget(self, key: str, field: str) -> str | None:
        with _store_errors("HGET", key):
            return _decode(await self.client.hget(key, field))  # type: ignore[misc]

    async def hset(self, key: str, mapping: Mapping[str, str | int]) -> None:
        with _store_errors("HSET", key):
            await self.client.hset(key, mapping=dict(mapping))  # type: ignore[misc]

    async def ping(self) -> bool:
        with _store_errors("PING"):
            return bool(await self.client.ping())  # type: ignore[misc]

    async def close(self) -> None:
        if self.owns_client:
            await self.client.aclose()


@dataclass
class _Entry:
    value: str | dict[str, str]
    expires_at: float | None = None


class InMemoryStore(CacheStore):
    """In-process store with Redis-like TTL semantics.

    Suitable for tests and offline demos. Expired keys are purged lazily
    when touched. ``clock`` returns seconds and defaults to
    ``time.monotonic``; tests pass a manual clock to simulate decay.
    """

    def __init__(self, clock: Clock | None = None):
        self._clock = clock or time.monotonic
        self._data: dict[str, _Entry] = {}

    def _live(self, key: str) -> _Entry | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        if entry.expires_at is not None and self._clock() >= entry.expires_at:
            del self._data[key]
            return None
        return entry

    def _deadline(self, ttl: int | None) -> float | None:
        return None if ttl is None else self._clock() + ttl

    async def get(self, key: str) -> str | None:
        entry = self._live(key)
        if entry is None:
            return None
        if not isinstance(entry.value, str):
            raise ResponseError(WRONGTYPE)
        return entry.value

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        self._data[key] = _Entry(value=str(value), expires_at=self._deadline(ttl))

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def exists(self, key: str) -> bool:
        return self._live(key) is not None

    async def ttl(self, key: str) -> int | None:
        entry = self._live(key)
        if entry is None or entry.expires_at is None:
            return None
        remaining_ms = (entry.expires_at - self._clock()) * 1000
        # Round to the nearest second like the Redis TTL command
        return int((remaining_ms + 500) // 1000)

    async def expire(self, key: str, ttl: int) -> None:
        entry = self._live(key)
        if entry is not None:
            entry.expires_at = self._deadline(ttl)

    async def hget(self, key: str, field: str) -> str | None:
        entry = self._live(key)
        if entry is None:
            return None
        if not isinstance(entry.value, dict):
            raise ResponseError(WRONGTYPE)
        return entry.value.get(field)

    async def hset(self, key: str, mapping: Mapping[str, str | int]) -> None:
        entry = self._live(key)
        fields = {name: str(value) for name, value in mapping.items()}
        if entry is None:
            self._data[key] = _Entry(value=fields)
        elif isinstance(entry.value, dict):
            entry.value.update(fields)
        else:
            raise ResponseError(WRONGTYPE)
