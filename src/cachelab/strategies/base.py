"""Shared contract for cache invalidation strategies.

Every strategy exposes a constant ``name`` and ``key`` plus three async
operations. Each operation ends with a single ``CacheReport`` whose
``message`` is the human-readable outcome line.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from cachelab.cache.store import CacheStore

# Expiration window used by the TTL policies unless configured otherwise
DEFAULT_TTL_SECONDS = 5


class Outcome(str, Enum):
    """What a strategy operation observed or did."""

    WRITTEN = "written"
    HIT = "hit"
    MISS = "miss"
    STALE = "stale"
    INVALIDATED = "invalidated"
    INSPECTED = "inspected"


@dataclass(frozen=True)
class CacheReport:
    """Result of a single strategy operation."""

    outcome: Outcome
    message: str
    value: str | None = None
    ttl_seconds: int | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "outcome": self.outcome.value,
            "message": self.message,
            "value": self.value,
            "ttl_seconds": self.ttl_seconds,
            "details": dict(self.details),
        }


@runtime_checkable
class CacheStrategy(Protocol):
    """Capability set shared by all strategies."""

    @property
    def name(self) -> str: ...

    @property
    def key(self) -> str: ...

    async def set(self) -> CacheReport:
        """Write or refresh the cached entry."""
        ...

    async def get(self) -> CacheReport:
        """Read the entry for consumption. May refresh TTL or evict."""
        ...

    async def check(self) -> CacheReport:
        """Inspect the entry without mutating anything."""
        ...


def utc_timestamp() -> str:
    """Wall-clock time stamped into written payloads."""
    return datetime.now(timezone.utc).strftime("%H:%M:%S")


def describe_value(value: str | None) -> str:
    return value if value is not None else "<missing>"


def describe_ttl(ttl: int | None) -> str:
    return str(ttl) if ttl is not None else "<expired>"


async def inspect_expiring(store: CacheStore, key: str) -> CacheReport:
    """Read a value and its remaining TTL without touching either."""
    value = await store.get(key)
    ttl = await store.ttl(key)
    return CacheReport(
        outcome=Outcome.INSPECTED,
        message=f"Value: {describe_value(value)}, TTL: {describe_ttl(ttl)} seconds.",
        value=value,
        ttl_seconds=ttl,
    )
