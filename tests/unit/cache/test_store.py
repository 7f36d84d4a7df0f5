"""Tests for the store implementations."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError
from redis.exceptions import TimeoutError as RedisTimeoutError

from cachelab.cache.store import CacheStore, InMemoryStore, RedisStore
from cachelab.errors import StoreUnavailableError
from tests.helpers import ManualClock


class TestInMemoryStore:
    """Tests for the in-memory store's Redis-like semantics."""

    def test_is_cache_store(self, store: InMemoryStore) -> None:
        """InMemoryStore implements the store interface."""
        assert isinstance(store, CacheStore)

    @pytest.mark.asyncio
    async def test_get_missing_key(self, store: InMemoryStore) -> None:
        """Missing keys read as None."""
        assert await store.get("nope") is None
        assert await store.exists("nope") is False
        assert await store.ttl("nope") is None

    @pytest.mark.asyncio
    async def test_set_and_get(self, store: InMemoryStore) -> None:
        """Values round-trip through set/get."""
        await store.set("k", "v")
        assert await store.get("k") == "v"
        assert await store.exists("k") is True

    @pytest.mark.asyncio
    async def test_set_without_ttl_has_no_expiry(self, store: InMemoryStore) -> None:
        """Keys written without TTL report no remaining lifetime."""
        await store.set("k", "v")
        assert await store.ttl("k") is None

    @pytest.mark.asyncio
    async def test_ttl_counts_down(self, store: InMemoryStore, clock: ManualClock) -> None:
        """TTL decreases as the clock advances."""
        await store.set("k", "v", ttl=5)
        assert await store.ttl("k") == 5

        clock.advance(2)
        assert await store.ttl("k") == 3

    @pytest.mark.asyncio
    async def test_ttl_rounds_to_nearest_second(
        self, store: InMemoryStore, clock: ManualClock
    ) -> None:
        """Fractional lifetimes round like the Redis TTL command."""
        await store.set("k", "v", ttl=5)
        clock.advance(0.4)
        assert await store.ttl("k") == 5
        clock.advance(0.2)
        assert await store.ttl("k") == 4

    @pytest.mark.asyncio
    async def test_key_expires(self, store: InMemoryStore, clock: ManualClock) -> None:
        """Keys disappear once their TTL has elapsed."""
        await store.set("k", "v", ttl=5)
        clock.advance(5)

        assert await store.get("k") is None
        assert await store.exists("k") is False
        assert await store.ttl("k") is None

    @pytest.mark.asyncio
    async def test_set_replaces_ttl(self, store: InMemoryStore, clock: ManualClock) -> None:
        """A plain set clears a previous TTL."""
        await store.set("k", "v", ttl=5)
        await store.set("k", "w")
        clock.advance(10)
        assert await store.get("k") == "w"

    @pytest.mark.asyncio
    async def test_expire_resets_window(self, store: InMemoryStore, clock: ManualClock) -> None:
        """expire restarts the countdown without touching the value."""
        await store.set("k", "v", ttl=5)
        clock.advance(4)
        await store.expire("k", 5)

        assert await store.ttl("k") == 5
        assert await store.get("k") == "v"

    @pytest.mark.asyncio
    async def test_expire_missing_key_is_noop(self, store: InMemoryStore) -> None:
        """expire on an absent key does not create it."""
        await store.expire("nope", 5)
        assert await store.exists("nope") is False

    @pytest.mark.asyncio
    async def test_delete(self, store: InMemoryStore) -> None:
        """delete removes a key and ignores missing ones."""
        await store.set("k", "v")
        await store.delete("k")
        await store.delete("k")
        assert await store.get("k") is None

    @pytest.mark.asyncio
    async def test_hash_fields(self, store: InMemoryStore) -> None:
        """Hash fields are stored as strings and merged on hset."""
        await store.hset("h", {"value": "x", "parentVersion": 42})
        await store.hset("h", {"value": "y"})

        assert await store.hget("h", "value") == "y"
        assert await store.hget("h", "parentVersion") == "42"
        assert await store.hget("h", "missing") is None
        assert await store.hget("nope", "value") is None

    @pytest.mark.asyncio
    async def test_wrong_type_access(self, store: InMemoryStore) -> None:
        """Wrong-type access fails with the same error Redis replies with."""
        await store.set("s", "v")
        await store.hset("h", {"value": "x"})

        with pytest.raises(ResponseError, match="WRONGTYPE"):
            await store.hget("s", "value")
        with pytest.raises(ResponseError, match="WRONGTYPE"):
            await store.get("h")
        with pytest.raises(ResponseError, match="WRONGTYPE"):
            await store.hset("s", {"value": "x"})


class TestRedisStore:
    """Tests for RedisStore against a mocked client."""

    @pytest.fixture
    def mock_redis(self) -> AsyncMock:
        """Create mock Redis client."""
        mock = AsyncMock()
        mock.get = AsyncMock(return_value=None)
        mock.set = AsyncMock(return_value=True)
        mock.delete = AsyncMock(return_value=1)
        mock.exists = AsyncMock(return_value=0)
        mock.ttl = AsyncMock(return_value=-2)
        mock.expire = AsyncMock(return_value=True)
        mock.hget = AsyncMock(return_value=None)
        mock.hset = AsyncMock(return_value=2)
        mock.ping = AsyncMock(return_value=True)
        return mock

    @pytest.fixture
    def redis_store(self, mock_redis: AsyncMock) -> RedisStore:
        return RedisStore(mock_redis)

    @pytest.mark.asyncio
    async def test_get_decodes_bytes(self, redis_store: RedisStore, mock_redis: AsyncMock) -> None:
        """Byte replies are decoded to str."""
        mock_redis.get.return_value = b"hello"
        assert await redis_store.get("k") == "hello"
        mock_redis.get.assert_awaited_once_with("k")

    @pytest.mark.asyncio
    async def test_set_passes_ttl(self, redis_store: RedisStore, mock_redis: AsyncMock) -> None:
        """TTL is passed as the EX argument."""
        await redis_store.set("k", "v", ttl=5)
        mock_redis.set.assert_awaited_once_with("k", "v", ex=5)

    @pytest.mark.asyncio
    async def test_set_without_ttl(self, redis_store: RedisStore, mock_redis: AsyncMock) -> None:
        """No TTL means no EX argument value."""
        await redis_store.set("k", "v")
        mock_redis.set.assert_awaited_once_with("k", "v", ex=None)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("reply", "expected"),
        [(-2, None), (-1, None), (0, 0), (4, 4)],
    )
    async def test_ttl_sentinels(
        self, redis_store: RedisStore, mock_redis: AsyncMock, reply: int, expected: int | None
    ) -> None:
        """Negative TTL replies map to None."""
        mock_redis.ttl.return_value = reply
        assert await redis_store.ttl("k") == expected

    @pytest.mark.asyncio
    async def test_exists(self, redis_store: RedisStore, mock_redis: AsyncMock) -> None:
        """EXISTS count is converted to bool."""
        mock_redis.exists.return_value = 1
        assert await redis_store.exists("k") is True

    @pytest.mark.asyncio
    async def test_hash_operations(self, redis_store: RedisStore, mock_redis: AsyncMock) -> None:
        """Hash reads and writes go through HGET/HSET."""
        mock_redis.hget.return_value = b"17"

        await redis_store.hset("h", {"value": "x", "parentVersion": 17})
        assert await redis_store.hget("h", "parentVersion") == "17"

        mock_redis.hset.assert_awaited_once_with("h", mapping={"value": "x", "parentVersion": 17})
        mock_redis.hget.assert_awaited_once_with("h", "parentVersion")

    @pytest.mark.asyncio
    async def test_expire_and_delete(self, redis_store: RedisStore, mock_redis: AsyncMock) -> None:
        """EXPIRE and DEL are forwarded unchanged."""
        await redis_store.expire("k", 5)
        await redis_store.delete("k")

        mock_redis.expire.assert_awaited_once_with("k", 5)
        mock_redis.delete.assert_awaited_once_with("k")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [RedisConnectionError("refused"), RedisTimeoutError("slow")])
    async def test_failures_become_store_unavailable(
        self, redis_store: RedisStore, mock_redis: AsyncMock, error: Exception
    ) -> None:
        """Client failures surface as StoreUnavailableError."""
        mock_redis.get.side_effect = error

        with pytest.raises(StoreUnavailableError) as exc_info:
            await redis_store.get("k")

        assert exc_info.value.operation == "GET"
        assert exc_info.value.key == "k"
        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_command_errors_propagate_unchanged(
        self, redis_store: RedisStore, mock_redis: AsyncMock
    ) -> None:
        """A server that answers with an error is not reported as unavailable."""
        error = ResponseError("WRONGTYPE Operation against a key holding the wrong kind of value")
        mock_redis.hget.side_effect = error

        with pytest.raises(ResponseError) as exc_info:
            await redis_store.hget("k", "value")

        assert exc_info.value is error
        assert not isinstance(exc_info.value, StoreUnavailableError)

    @pytest.mark.asyncio
    async def test_close_leaves_shared_client_open(
        self, redis_store: RedisStore, mock_redis: AsyncMock
    ) -> None:
        """A borrowed client is not closed by the store."""
        await redis_store.close()
        mock_redis.aclose.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_close_owned_client(self, mock_redis: AsyncMock) -> None:
        """An owned client is closed with the store."""
        await RedisStore(mock_redis, owns_client=True).close()
        mock_redis.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_ping(self, redis_store: RedisStore) -> None:
        """PING success is reported."""
        assert await redis_store.ping() is True
