"""Memcached storage backend.

Delegates storage to a memcached server through pymemcache. Entries are
pickled by the client's serde, so what comes back from the server is a
CacheEntry again, or a sign that the key holds someone else's data.

Batch operations map onto the client's native multi-key commands
(``set_many``, ``get_many``, ``delete_many``) instead of looping over keys.
"""

import logging
import pickle
from collections.abc import Iterable
from typing import Any, NoReturn, Optional

try:
    from pymemcache import serde
    from pymemcache.client.base import Client
    from pymemcache.exceptions import MemcacheError
except ImportError as e:
    raise ImportError(
        "MemcachedStorage requires optional dependencies. "
        "Install with: pip install simple-cache[memcached]"
    ) from e

from simple_cache.core.exceptions import StorageError
from simple_cache.core.models import CacheEntries, CacheEntry
from simple_cache.storage.base import StorageBackend

logger = logging.getLogger(__name__)

HOST_DEFAULT = "127.0.0.1"
PORT_DEFAULT = 11211

# memcached treats an expiration of 0 as "never expires"
NO_EXPIRATION = 0

# Errors the client can surface for a single command
_CLIENT_ERRORS = (MemcacheError, OSError, pickle.PickleError, EOFError, ValueError, TypeError)


class MemcachedStorage(StorageBackend):
    """Stores entries on a memcached server.

    Example:
        ```python
        from simple_cache import Cache
        from simple_cache.storage.backends import MemcachedStorage

        storage = MemcachedStorage.from_credentials(
            host="10.0.0.5",
            port=11211,
            key_prefix="myapp:",
        )
        with Cache(storage) as cache:
            cache.set_multiple({"a": 1, "b": 2}, ttl=300)
        ```

    Args:
        client: Connected pymemcache client. It must deserialize values with
            pickle (``serde=pymemcache.serde.pickle_serde``) so entries
            survive the round trip.
    """

    name = "memcached"

    def __init__(self, client: Client) -> None:
        self.client = client

    @classmethod
    def from_credentials(
        cls,
        host: str = HOST_DEFAULT,
        port: int = PORT_DEFAULT,
        key_prefix: Optional[str] = None,
        **client_options: Any,
    ) -> "MemcachedStorage":
        """Create a backend with its own client connection.

        Args:
            host: Server host (default: 127.0.0.1)
            port: Server port (default: 11211)
            key_prefix: Prefix the client adds to every key
            **client_options: Extra pymemcache Client options
                (e.g. ``connect_timeout``, ``timeout``)

        Returns:
            Configured MemcachedStorage instance
        """
        if key_prefix:
            client_options["key_prefix"] = key_prefix.encode("utf-8")
        # Keys are opaque strings; send non-ASCII ones as UTF-8
        client_options.setdefault("allow_unicode_keys", True)

        client = Client((host, port), serde=serde.pickle_serde, **client_options)
        return cls(client)

    @classmethod
    def from_connection(cls, client: Client) -> "MemcachedStorage":
        """Create a backend around an existing client connection."""
        return cls(client)

    def set(self, entry: CacheEntry) -> None:
        expire = self._get_expire(entry.expiration_timestamp)

        try:
            stored = self.client.set(entry.key, entry, expire=expire, noreply=False)
        except _CLIENT_ERRORS as e:
            self._failure(f"Failed to store cache entry '{entry.key}' into Memcached server", e)

        if not stored:
            raise StorageError(
                f"Failed to store cache entry '{entry.key}' into Memcached server << #NOT_STORED",
                backend=self.name,
                code="NOT_STORED",
            )

    def set_multiple(self, entries: CacheEntries) -> None:
        expire = self._get_expire(entries.expiration_timestamp)
        values = {entry.key: entry for entry in entries.entries()}

        try:
            failed_keys = self.client.set_many(values, expire=expire, noreply=False)
        except _CLIENT_ERRORS as e:
            self._failure("Failed to store cache entries into Memcached server", e)

        if failed_keys:
            raise StorageError(
                f"Failed to store cache entries into Memcached server << #NOT_STORED "
                f"{', '.join(str(key) for key in failed_keys)}",
                backend=self.name,
                code="NOT_STORED",
            )

    def get(self, key: str) -> CacheEntry | None:
        try:
            result = self.client.get(key)
        except _CLIENT_ERRORS as e:
            self._failure(f"Failed to retrieve cache entry '{key}' from Memcached server", e)

        if result is None:
            logger.debug(f"Memcached miss: {key}")
            return None

        return self._check_entry(result)

    def get_multiple(self, keys: Iterable[str]) -> list[CacheEntry]:
        keys = list(keys)
        if not keys:
            return []

        try:
            results = self.client.get_many(keys)
        except _CLIENT_ERRORS as e:
            self._failure("Failed to retrieve cache entries from Memcached server", e)

        if not isinstance(results, dict):
            raise StorageError("Failed to retrieve data from cache.", backend=self.name)

        return [self._check_entry(content) for content in results.values()]

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def delete(self, key: str) -> None:
        # delete() returns False for a missing key, which is fine here
        try:
            self.client.delete(key, noreply=False)
        except _CLIENT_ERRORS as e:
            self._failure(f"Failed to delete cache entry '{key}' from Memcached server", e)

    def delete_multiple(self, keys: Iterable[str]) -> None:
        keys = list(keys)
        if not keys:
            return

        try:
            self.client.delete_many(keys, noreply=False)
        except _CLIENT_ERRORS as e:
            self._failure("Failed to delete cache entries from Memcached server", e)

    def clear(self) -> None:
        try:
            flushed = self.client.flush_all(noreply=False)
        except _CLIENT_ERRORS as e:
            self._failure("Failed to flush Memcached content", e)

        if not flushed:
            raise StorageError("Failed to flush Memcached content.", backend=self.name)

    def close(self) -> None:
        """Close the client connection."""
        self.client.close()

    def _check_entry(self, content: Any) -> CacheEntry:
        if isinstance(content, CacheEntry):
            return content

        raise StorageError(
            f"Unexpected cache data type retrieved: {type(content).__name__}",
            backend=self.name,
        )

    @staticmethod
    def _get_expire(expiration_timestamp: Optional[int]) -> int:
        """Translate an absolute expiration into memcached's ``expire`` value.

        Values above 30 days are read by memcached as absolute Unix
        timestamps, which every real epoch timestamp is.
        """
        if expiration_timestamp is None:
            return NO_EXPIRATION
        return expiration_timestamp

    def _failure(self, message: str, error: Exception) -> NoReturn:
        """Raise a StorageError carrying the client's error code and message.

        Raises:
            StorageError: Always
        """
        code = type(error).__name__
        raise StorageError(
            f"{message} << #{code} {error}",
            backend=self.name,
            code=code,
        ) from error
