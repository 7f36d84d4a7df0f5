"""Global pytest configuration and fixtures.

Provides a manual clock so TTL decay can be simulated without sleeping.
"""

from __future__ import annotations

import pytest

from cachelab.cache.store import InMemoryStore
from tests.helpers import ManualClock


@pytest.fixture
def clock() -> ManualClock:
    """Manual clock starting at an arbitrary epoch."""
    return ManualClock()


@pytest.fixture
def store(clock: ManualClock) -> InMemoryStore:
    """In-memory store driven by the manual clock."""
    return InMemoryStore(clock=clock)
