"""Absolute expiration: the TTL is fixed at write time and never extended."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cachelab.cache.keys import ABSOLUTE_KEY
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


class AbsoluteExpirationPolicy:
    """Value dies after the TTL no matter how often it is read."""

    name = "Absolute expiration"

    def __init__(
        self, store: CacheStore, key: str = ABSOLUTE_KEY, ttl: int = DEFAULT_TTL_SECONDS
    ):
        self.store = store
        self._key = key
        self.ttl = ttl

    @property
    def key(self) -> str:
        return self._key

    async def set(self) -> CacheReport:
        """Write a fresh snapshot. Re-running restarts the TTL window."""
        value = f"Product catalog snapshot (abs) at {utc_timestamp()}"
        await self.store.set(self.key, value, ttl=self.ttl)
        report = CacheReport(
            outcome=Outcome.WRITTEN,
            message=f"Set `{self.key}` with TTL {self.ttl} seconds.",
            value=value,
            ttl_seconds=self.ttl,
        )
        logger.info(report.message, extra={"strategy": self.name, "outcome": report.outcome.value})
        return report

    async def get(self) -> CacheReport:
        value = await self.store.get(self.key)
        if value is None:
            report = CacheReport(outcome=Outcome.MISS, message="Cache miss.")
        else:
            report = CacheReport(outcome=Outcome.HIT, message=f"Value: {value}", value=value)
        logger.info(report.message, extra={"strategy": self.name, "outcome": report.outcome.value})
        return report

    async def check(self) -> CacheReport:
        report = await inspect_expiring(self.store, self.key)
        logger.info(report.message, extra={"strategy": self.name, "outcome": report.outcome.value})
        return report
