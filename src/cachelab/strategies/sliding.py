"""Sliding expiration: every successful read resets the TTL window."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cachelab.cache.keys import SLIDING_KEY
from cachelab.strategies.base import (
    DEFAULT_TTL_SECONDS,
    CacheReport,
    Outcome,
    inspect_expiring,
    utc_timestamp,
)

if TYPE_CHECKING:
    from cachelab.cache.store import CacheStore

logger = logging.getLogger(__name__)


class SlidingExpirationPolicy:
    """Keeps a session alive for as long as it keeps being read.

    Only ``get`` slides the window. ``check`` observes the countdown
    without disturbing it.
    """

    name = "Sliding expiration"

    def __init__(
        self, store: CacheStore, key: str = SLIDING_KEY, ttl: int = DEFAULT_TTL_SECONDS
    ):
        self.store = store
        self._key = key
        self.ttl = ttl

    @property
    def key(self) -> str:
        return self._key

    async def set(self) -> CacheReport:
        value = f"User session token (sliding) at {utc_timestamp()}"
        await self.store.set(self.key, value, ttl=self.ttl)
        report = CacheReport(
            outcome=Outcome.WRITTEN,
            message=f"Set `{self.key}` with TTL {self.ttl} seconds. Each get refreshes TTL.",
            value=value,
            ttl_seconds=self.ttl,
        )
        logger.info(report.message, extra={"strategy": self.name, "outcome": report.outcome.value})
        return report

    async def get(self) -> CacheReport:
        """Read the session and, on a hit, reset its TTL to the full window.

        The read and the EXPIRE are separate commands. If the key lapses in
        between, EXPIRE is a no-op on the store and the value read is still
        reported.
        """
        value = await self.store.get(self.key)
        if value is None:
            report = CacheReport(outcome=Outcome.MISS, message="Cache miss.")
        else:
            await self.store.expire(self.key, self.ttl)
            report = CacheReport(
                outcome=Outcome.HIT,
                message=f"Value: {value}. TTL refreshed to {self.ttl} seconds.",
                value=value,
                ttl_seconds=self.ttl,
            )
        logger.info(report.message, extra={"strategy": self.name, "outcome": report.outcome.value})
        return report

    async def check(self) -> CacheReport:
        report = await inspect_expiring(self.store, self.key)
        logger.info(report.message, extra={"strategy": self.name, "outcome": report.outcome.value})
        return report
