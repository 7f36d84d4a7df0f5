from __future__ import annotations

import logging

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cachelab.cache.keys import (
    ABSOLUTE_KEY,
    CHILD_KEY,
    PARENT_KEY,
    PARENT_VERSION_KEY,
    SLIDING_KEY,
)
from cachelab.strategies.base import DEFAULT_TTL_SECONDS


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CACHELAB_", env_file=".env", extra="ignore")

    app_name: str = "cachelab"

    # Redis
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        validation_alias=AliasChoices("CACHELAB_REDIS_URL", "REDIS_URL"),
    )
    redis_socket_timeout: float = Field(
        default=5.0,
        validation_alias=AliasChoices("CACHELAB_REDIS_SOCKET_TIMEOUT", "REDIS_SOCKET_TIMEOUT"),
    )

    # Expiration window shared by the absolute and sliding policies
    ttl_seconds: int = Field(default=DEFAULT_TTL_SECONDS, gt=0)

    # Keys used by each policy
    absolute_key: str = ABSOLUTE_KEY
    sliding_key: str = SLIDING_KEY
    parent_key: str = PARENT_KEY
    parent_version_key: str = PARENT_VERSION_KEY
    child_key: str = CHILD_KEY

    # Bump colliding version stamps so a rewrite is never mistaken for fresh
    strict_versions: bool = True

    # Observability
    log_level: str = "WARNING"
    log_json: bool = False

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value}")
        return level


settings = Settings()
