"""Core abstractions and models."""

from simple_cache.core.cache import Cache
from simple_cache.core.clock import Clock, SystemClock
from simple_cache.core.exceptions import CacheError, InvalidArgumentError, StorageError
from simple_cache.core.models import CacheEntries, CacheEntry, CacheSettings
from simple_cache.core.results import Failure, StorageResult, Success

__all__ = [
    # Facade
    "Cache",
    # Clock
    "Clock",
    "SystemClock",
    # Exceptions
    "CacheError",
    "InvalidArgumentError",
    "StorageError",
    # Models
    "CacheEntry",
    "CacheEntries",
    "CacheSettings",
    # Results
    "Success",
    "Failure",
    "StorageResult",
]
