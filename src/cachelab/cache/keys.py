"""Cache key schema for the cachelab policies.

Each policy works on a fixed set of keys:
- absolute: a single string key with a fixed TTL
- sliding: a single string key whose TTL is reset on reads
- dependent: a parent string, a parent version string and a child hash
  holding ``value`` and ``parentVersion`` fields
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from cachelab.config import Settings

ABSOLUTE_KEY: Final = "cache:absolute:product"
SLIDING_KEY: Final = "cache:sliding:user-session"
PARENT_KEY: Final = "product:details"
PARENT_VERSION_KEY: Final = "product:version"
CHILD_KEY: Final = "product:inventory"

CHILD_VALUE_FIELD: Final = "value"
CHILD_PARENT_VERSION_FIELD: Final = "parentVersion"


@dataclass(frozen=True)
class CacheKeys:
    """Key names for every entry the policies touch."""

    absolute: str = ABSOLUTE_KEY
    sliding: str = SLIDING_KEY
    parent: str = PARENT_KEY
    parent_version: str = PARENT_VERSION_KEY
    child: str = CHILD_KEY

    @classmethod
    def from_settings(cls, settings: Settings) -> CacheKeys:
        """Build the key set from configuration."""
        return cls(
            absolute=settings.absolute_key,
            sliding=settings.sliding_key,
            parent=settings.parent_key,
            parent_version=settings.parent_version_key,
            child=settings.child_key,
        )
