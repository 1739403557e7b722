"""Simple Cache - generic content cache over pluggable storage."""

import logging
from typing import Optional

from simple_cache.core import (
    Cache,
    CacheEntries,
    CacheEntry,
    CacheError,
    CacheSettings,
    Clock,
    InvalidArgumentError,
    StorageError,
    SystemClock,
)
from simple_cache.storage import StorageBackend, create_storage
from simple_cache.storage.backends import FileSystemStorage, NullStorage, VolatileStorage

__version__ = "0.1.0"


def create_cache(
    settings: Optional[CacheSettings] = None,
    clock: Optional[Clock] = None,
    logger: Optional[logging.Logger] = None,
) -> Cache:
    """Create a cache wired to the backend described by the settings.

    Args:
        settings: Cache settings (default: loaded from SIMPLE_CACHE_* env vars)
        clock: Time source (default: system clock)
        logger: Failure logger (default: simple_cache.core.cache logger)

    Returns:
        Ready-to-use Cache
    """
    if settings is None:
        settings = CacheSettings.from_env()
    return Cache(create_storage(settings), clock=clock, logger=logger)


__all__ = [
    # Version
    "__version__",
    # Facade
    "Cache",
    "create_cache",
    # Models
    "CacheEntry",
    "CacheEntries",
    "CacheSettings",
    # Clock
    "Clock",
    "SystemClock",
    # Exceptions
    "CacheError",
    "InvalidArgumentError",
    "StorageError",
    # Storage
    "StorageBackend",
    "create_storage",
    "FileSystemStorage",
    "NullStorage",
    "VolatileStorage",
]
