"""Storage backend implementations."""

from simple_cache.storage.backends.filesystem import FileSystemStorage
from simple_cache.storage.backends.null import NullStorage
from simple_cache.storage.backends.volatile import VolatileStorage

__all__ = [
    "FileSystemStorage",
    "NullStorage",
    "VolatileStorage",
]

# Import memcached backend if dependencies are available
try:
    from simple_cache.storage.backends.memcached import MemcachedStorage

    __all__.append("MemcachedStorage")
except ImportError:
    # pymemcache not installed
    pass
