"""Integration test fixtures using Docker.

Starts a throwaway Redis container for the session. Tests are skipped when
Docker is not reachable.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncIterator, Iterator
from typing import Any
from urllib.parse import urlparse

import pytest
import pytest_asyncio

from cachelab.cache.store import RedisStore


def _docker_host(client: Any) -> str:
    """Resolve the host to connect to published container ports."""
    base_url = client.api.base_url
    if base_url.startswith(("unix://", "npipe://", "http+docker://")):
        return "localhost"
    return urlparse(base_url).hostname or "localhost"


@pytest.fixture(scope="session")
def docker_client():
    """Create a Docker client or skip if Docker is unavailable."""
    docker = pytest.importorskip("docker")
    try:
        client = docker.from_env()
        client.ping()
    except Exception as exc:
        pytest.skip(f"Docker not available: {exc}")
    yield client
    client.close()


@pytest.fixture(scope="session")
def redis_url(docker_client) -> Iterator[str]:
    """Start a Redis container and yield its URL."""
    container = docker_client.containers.run(
        "redis:7-alpine", detach=True, ports={"6379/tcp": None}
    )
    try:
        container.reload()
        port = int(container.attrs["NetworkSettings"]["Ports"]["6379/tcp"][0]["HostPort"])
        yield f"redis://{_docker_host(docker_client)}:{port}/0"
    finally:
        container.remove(force=True, v=True)


@pytest_asyncio.fixture
async def redis_store(redis_url: str) -> AsyncIterator[RedisStore]:
    """RedisStore over a dedicated client, flushed after each test."""
    import redis.asyncio as redis

    client = redis.from_url(redis_url, decode_responses=True)
    await _wait_for_redis(client)
    yield RedisStore(client)
    await client.flushdb()  # Clean up after each test
    await client.aclose()


async def _wait_for_redis(client, timeout: float = 30.0) -> None:
    """Wait for Redis to accept connections."""
    deadline = time.monotonic() + timeout
    while True:
        try:
            await client.ping()
            return
        except Exception:
            if time.monotonic() >= deadline:
                raise
            await asyncio.sleep(0.5)
