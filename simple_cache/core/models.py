"""Core data models for the cache facade."""

import os
from collections.abc import Iterator
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CacheEntry(BaseModel):
    """Single cached record.

    Attributes:
        key: Cache key, opaque to the facade
        content: Cached payload (must be picklable for persistent backends)
        creation_timestamp: Epoch seconds at write time
        expiration_timestamp: Epoch seconds after which the entry is stale,
            or None if it never expires
    """

    model_config = ConfigDict(frozen=True)

    key: str
    content: Any = None
    creation_timestamp: int
    expiration_timestamp: int | None = None

    def is_expired(self, now_timestamp: int) -> bool:
        """Check whether the entry is stale at the given time.

        Args:
            now_timestamp: Current time in epoch seconds

        Returns:
            True if the entry has an expiration and it lies in the past
        """
        if self.expiration_timestamp is None:
            return False

        return now_timestamp > self.expiration_timestamp


class CacheEntries(BaseModel):
    """Batch of contents written together with shared timing."""

    model_config = ConfigDict(frozen=True)

    values: dict[str, Any]
    creation_timestamp: int
    expiration_timestamp: int | None = None

    def entries(self) -> Iterator[CacheEntry]:
        """Expand the batch into one entry per key."""
        for key, content in self.values.items():
            yield CacheEntry(
                key=key,
                content=content,
                creation_timestamp=self.creation_timestamp,
                expiration_timestamp=self.expiration_timestamp,
            )


class CacheSettings(BaseModel):
    """Configuration for building a cache and its storage backend."""

    backend: Literal["volatile", "filesystem", "memcached", "null"] = "volatile"

    # Filesystem
    path: Optional[Path] = None

    # Memcached
    host: str = "127.0.0.1"
    port: int = Field(default=11211, ge=1, le=65535)
    key_prefix: Optional[str] = None
    connect_timeout: Optional[float] = Field(default=None, gt=0)
    timeout: Optional[float] = Field(default=None, gt=0)

    @model_validator(mode="after")
    def _check_backend_options(self) -> "CacheSettings":
        if self.backend == "filesystem" and self.path is None:
            raise ValueError("Filesystem cache backend requires a path")
        return self

    @classmethod
    def from_env(cls, prefix: str = "SIMPLE_CACHE_") -> "CacheSettings":
        """Load settings from environment variables.

        Reads ``<prefix>BACKEND``, ``<prefix>PATH``, ``<prefix>HOST``,
        ``<prefix>PORT``, ``<prefix>KEY_PREFIX``, ``<prefix>CONNECT_TIMEOUT``
        and ``<prefix>TIMEOUT``. Unset variables keep their defaults.

        Args:
            prefix: Environment variable prefix

        Returns:
            Validated settings

        Raises:
            pydantic.ValidationError: If a variable holds an invalid value
        """
        fields = ("backend", "path", "host", "port", "key_prefix", "connect_timeout", "timeout")
        values = {}
        for field in fields:
            raw = os.environ.get(f"{prefix}{field.upper()}")
            if raw:
                values[field] = raw
        return cls(**values)
