"""Base interface for cache storage backends."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

from simple_cache.core.models import CacheEntries, CacheEntry


class StorageBackend(ABC):
    """Abstract base class for cache storage backends.

    This interface defines the contract every storage medium must follow,
    whether it keeps entries in process memory, on disk, or on a remote server.

    Implementations should:
    - Return None / False / an empty list when a key simply does not exist
    - Raise StorageError on any medium-level failure (I/O, serialization,
      protocol errors, unexpected payloads)
    - Never hand out an entry the caller could mutate in place

    Expiration is not enforced here. The cache facade decides whether an
    entry is stale.

    Example:
        >>> class MyStorage(StorageBackend):
        ...     def get(self, key: str) -> CacheEntry | None:
        ...         # Implementation here
        ...         return entry
        ...
        >>> with MyStorage() as storage:
        ...     storage.set(entry)
    """

    name = "storage"

    @abstractmethod
    def set(self, entry: CacheEntry) -> None:
        """Store an entry, replacing any entry with the same key.

        Args:
            entry: Entry to store

        Raises:
            StorageError: If the entry cannot be stored
        """
        pass

    @abstractmethod
    def get(self, key: str) -> CacheEntry | None:
        """Retrieve an entry.

        Args:
            key: Cache key

        Returns:
            The stored entry, or None if the key does not exist

        Raises:
            StorageError: If the entry exists but cannot be read
        """
        pass

    @abstractmethod
    def has(self, key: str) -> bool:
        """Check if an entry exists, regardless of its expiration.

        Args:
            key: Cache key

        Raises:
            StorageError: If existence cannot be determined
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete an entry. Deleting a missing key is not an error.

        Args:
            key: Cache key

        Raises:
            StorageError: If the entry exists but cannot be deleted
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Delete every entry held by this backend.

        Raises:
            StorageError: If any entry cannot be deleted
        """
        pass

    def set_multiple(self, entries: CacheEntries) -> None:
        """Store a batch of entries sharing the same timing.

        The default implementation stores entries one by one and stops at the
        first failure. Backends with a native bulk write should override it.

        Args:
            entries: Batch to store

        Raises:
            StorageError: If any entry cannot be stored
        """
        for entry in entries.entries():
            self.set(entry)

    def get_multiple(self, keys: Iterable[str]) -> list[CacheEntry]:
        """Retrieve the entries that exist for the given keys.

        Args:
            keys: Cache keys

        Returns:
            Existing entries only, in no guaranteed order

        Raises:
            StorageError: If any existing entry cannot be read
        """
        entries = []
        for key in keys:
            entry = self.get(key)
            if entry is not None:
                entries.append(entry)
        return entries

    def delete_multiple(self, keys: Iterable[str]) -> None:
        """Delete the entries for the given keys.

        Args:
            keys: Cache keys

        Raises:
            StorageError: If any entry cannot be deleted
        """
        for key in keys:
            self.delete(key)

    def close(self) -> None:
        """Release connections or handles held by the backend.

        Backends holding no resources can leave this as the default no-op.
        """
        pass

    def __enter__(self) -> "StorageBackend":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: type, exc_val: Exception, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()
