"""Helpers shared by the CLI commands."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from enum import Enum
from typing import TYPE_CHECKING

from cachelab.cache.redis import close_redis, get_redis
from cachelab.cache.store import CacheStore, InMemoryStore, RedisStore
from cachelab.observability.logging import LogContext
from cachelab.strategies.base import Outcome

if TYPE_CHECKING:
    from rich.console import Console

    from cachelab.strategies.base import CacheReport, CacheStrategy


class StoreKind(str, Enum):
    REDIS = "redis"
    MEMORY = "memory"


OUTCOME_STYLES = {
    Outcome.WRITTEN: "cyan",
    Outcome.HIT: "green",
    Outcome.MISS: "yellow",
    Outcome.STALE: "magenta",
    Outcome.INVALIDATED: "magenta",
    Outcome.INSPECTED: "white",
}


@asynccontextmanager
async def open_store(kind: StoreKind, redis_url: str | None = None) -> AsyncIterator[CacheStore]:
    """Open the store for one CLI invocation.

    The Redis client is process-wide and closed when the command ends.
    """
    if kind == StoreKind.MEMORY:
        yield InMemoryStore()
        return

    client = await get_redis(redis_url)
    try:
        yield RedisStore(client)
    finally:
        await close_redis()


async def run_operation(strategy: CacheStrategy, operation: str) -> CacheReport:
    """Invoke ``set``, ``get`` or ``check`` on a strategy with log context bound."""
    with LogContext(strategy=strategy.name, cache_key=strategy.key, operation=operation):
        if operation == "set":
            return await strategy.set()
        if operation == "get":
            return await strategy.get()
        if operation == "check":
            return await strategy.check()
    raise ValueError(f"Unknown operation: {operation}")


def print_report(console: Console, report: CacheReport) -> None:
    style = OUTCOME_STYLES.get(report.outcome, "white")
    console.print(report.message, style=style, markup=False, highlight=False, soft_wrap=True)
