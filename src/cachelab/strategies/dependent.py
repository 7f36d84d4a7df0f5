"""Dependent cache: a child entry is tied to the version of its parent.

Store layout:
- ``parent``          string, the parent payload
- ``parent_version``  string, the current parent version stamp
- ``child``           hash with ``value`` and ``parentVersion`` fields

The three entries are written by separate commands with no transaction, so
a reader can observe any interleaving of a concurrent ``set``. Freshness is
decided only when reading: a child is served iff its linked version equals
the current parent version and both are present. Anything else is stale and
``get`` deletes the child.

Example:
    policy = DependentCachePolicy(store)
    await policy.set()   # parent v1, child seeded with v1
    await policy.set()   # parent v2, child left linked to v1
    await policy.get()   # v1 != v2: child deleted, INVALIDATED
    await policy.get()   # child gone: MISS
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from cachelab.cache.keys import (
    CHILD_KEY,
    CHILD_PARENT_VERSION_FIELD,
    CHILD_VALUE_FIELD,
    PARENT_KEY,
    PARENT_VERSION_KEY,
)
from cachelab.strategies.base import CacheReport, Outcome, describe_value

if TYPE_CHECKING:
    from cachelab.cache.store import CacheStore

logger = logging.getLogger(__name__)


def wall_clock_ms() -> int:
    """Current Unix time in integer milliseconds."""
    return time.time_ns() // 1_000_000


class VersionClock:
    """Source of parent version stamps.

    Stamps are wall-clock milliseconds. Two writes inside the same
    millisecond would get equal stamps and a rewritten parent would look
    unchanged to its child. With ``strict`` set, a stamp that does not
    exceed the previous one is bumped to ``previous + 1``.
    """

    def __init__(self, strict: bool = True, now_ms: Callable[[], int] = wall_clock_ms):
        self.strict = strict
        self._now_ms = now_ms

    def next_version(self, previous: int | None = None) -> int:
        stamp = self._now_ms()
        if self.strict and previous is not None and stamp <= previous:
            return previous + 1
        return stamp


def parse_version(raw: str | None, source: str) -> int | None:
    """Parse a stored version stamp.

    Malformed stamps are treated as absent so a corrupt record makes the
    child stale instead of failing the read.
    """
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring malformed version {raw!r} in {source}")
        return None


def is_fresh(parent_version: int | None, child_version: int | None) -> bool:
    """A child is fresh iff both versions exist and match."""
    if parent_version is None or child_version is None:
        return False
    return parent_version == child_version


def _describe_version(version: int | None) -> str:
    return str(version) if version is not None else "n/a"


class DependentCachePolicy:
    """Parent/child caching with version-based invalidation.

    Holds no state between calls beyond its key names; every operation
    re-reads the store, so independent instances on the same keys agree.
    """

    name = "Dependent cache (parent/child)"

    def __init__(
        self,
        store: CacheStore,
        parent_key: str = PARENT_KEY,
        parent_version_key: str = PARENT_VERSION_KEY,
        child_key: str = CHILD_KEY,
        clock: VersionClock | None = None,
    ):
        self.store = store
        self.parent_key = parent_key
        self.parent_version_key = parent_version_key
        self.child_key = child_key
        self.clock = clock or VersionClock()

    @property
    def key(self) -> str:
        return self.parent_key

    # -------------------------------------------------------------------------
    # Store reads
    # -------------------------------------------------------------------------

    async def _parent_version(self) -> int | None:
        raw = await self.store.get(self.parent_version_key)
        return parse_version(raw, self.parent_version_key)

    async def _child(self) -> tuple[str | None, int | None]:
        value = await self.store.hget(self.child_key, CHILD_VALUE_FIELD)
        raw_version = await self.store.hget(self.child_key, CHILD_PARENT_VERSION_FIELD)
        return value, parse_version(raw_version, f"{self.child_key}.{CHILD_PARENT_VERSION_FIELD}")

    def _log(self, report: CacheReport) -> CacheReport:
        logger.info(report.message, extra={"strategy": self.name, "outcome": report.outcome.value})
        return report

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def set(self) -> CacheReport:
        """Write a new parent version and seed the child only if it is absent.

        An existing child is left untouched and becomes stale relative to
        the new parent version.
        """
        previous = await self._parent_version() if self.clock.strict else None
        version = self.clock.next_version(previous)
        child_exists = await self.store.exists(self.child_key)

        parent_value = f"Product details v{version}"
        await self.store.set(self.parent_key, parent_value)
        await self.store.set(self.parent_version_key, str(version))

        if child_exists:
            return self._log(
                CacheReport(
                    outcome=Outcome.STALE,
                    message="Parent refreshed. Child is now stale until you refresh it.",
                    value=parent_value,
                    details={"parent_version": version},
                )
            )

        await self.store.hset(
            self.child_key,
            {
                CHILD_VALUE_FIELD: f"Inventory snapshot v{version}",
                CHILD_PARENT_VERSION_FIELD: str(version),
            },
        )
        return self._log(
            CacheReport(
                outcome=Outcome.WRITTEN,
                message=(
                    f"Set parent `{self.parent_key}` and child `{self.child_key}` "
                    f"with version {version}."
                ),
                value=parent_value,
                details={"parent_version": version, "child_version": version},
            )
        )

    async def get(self) -> CacheReport:
        """Serve the child if fresh, otherwise evict it."""
        parent_version = await self._parent_version()
        child_value, child_version = await self._child()

        if child_value is None:
            return self._log(
                CacheReport(
                    outcome=Outcome.MISS,
                    message="Child cache miss. Run set to seed both parent and child.",
                )
            )

        details = {"parent_version": parent_version, "child_version": child_version}
        if not is_fresh(parent_version, child_version):
            await self.store.delete(self.child_key)
            return self._log(
                CacheReport(
                    outcome=Outcome.INVALIDATED,
                    message="Parent changed. Child invalidated and removed.",
                    details=details,
                )
            )

        return self._log(
            CacheReport(
                outcome=Outcome.HIT,
                message=f"Child value: {child_value} (linked to parent version {parent_version}).",
                value=child_value,
                details=details,
            )
        )

    async def check(self) -> CacheReport:
        """Report parent and child state. Never deletes, even when stale."""
        parent_value = await self.store.get(self.parent_key)
        parent_version = await self._parent_version()
        child_value, child_version = await self._child()

        stale = child_value is not None and not is_fresh(parent_version, child_version)
        message = (
            f"Parent `{self.parent_key}`: {describe_value(parent_value)} "
            f"(v{_describe_version(parent_version)}); "
            f"child `{self.child_key}`: {describe_value(child_value)} "
            f"(linked v{_describe_version(child_version)})."
        )
        if stale:
            message += " Child is stale and will be dropped on next get."

        return self._log(
            CacheReport(
                outcome=Outcome.STALE if stale else Outcome.INSPECTED,
                message=message,
                value=child_value,
                details={
                    "parent_value": parent_value,
                    "parent_version": parent_version,
                    "child_value": child_value,
                    "child_version": child_version,
                    "stale": stale,
                },
            )
        )
