"""Exceptions raised by the cache policy layer.

Cache misses and stale dependencies are ordinary outcomes reported through
``CacheReport``; only store failures are exceptional.
"""

from __future__ import annotations


class CacheLabError(Exception):
    """Base class for cachelab errors."""


class StoreUnavailableError(CacheLabError):
    """The key-value store could not complete an operation.

    Raised for connection and timeout failures. The failed operation is not
    retried and any writes it already made are left in place.
    """

    def __init__(self, operation: str, key: str | None = None, reason: str | None = None):
        self.operation = operation
        self.key = key
        self.reason = reason
        target = f" on {key!r}" if key else ""
        detail = f": {reason}" if reason else ""
        super().__init__(f"Store unavailable during {operation}{target}{detail}")
