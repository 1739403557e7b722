"""Build storage backends from settings."""

import logging

from simple_cache.core.models import CacheSettings
from simple_cache.storage.base import StorageBackend
from simple_cache.storage.backends.filesystem import FileSystemStorage
from simple_cache.storage.backends.null import NullStorage
from simple_cache.storage.backends.volatile import VolatileStorage

logger = logging.getLogger(__name__)


def create_storage(settings: CacheSettings) -> StorageBackend:
    """Factory function to create the storage backend named in the settings.

    Args:
        settings: Cache settings

    Returns:
        Configured storage backend

    Raises:
        ImportError: If the memcached backend is requested without pymemcache

    Example:
        ```python
        from simple_cache import CacheSettings
        from simple_cache.storage.factory import create_storage

        storage = create_storage(CacheSettings(backend="filesystem", path="/tmp/cache"))
        ```
    """
    logger.debug(f"Creating {settings.backend} cache storage")

    if settings.backend == "filesystem":
        return FileSystemStorage(settings.path)

    if settings.backend == "memcached":
        from simple_cache.storage.backends.memcached import MemcachedStorage

        client_options = {}
        if settings.connect_timeout is not None:
            client_options["connect_timeout"] = settings.connect_timeout
        if settings.timeout is not None:
            client_options["timeout"] = settings.timeout

        return MemcachedStorage.from_credentials(
            host=settings.host,
            port=settings.port,
            key_prefix=settings.key_prefix,
            **client_options,
        )

    if settings.backend == "null":
        return NullStorage()

    return VolatileStorage()
