"""Storage backend that stores nothing."""

from collections.abc import Iterable

from simple_cache.core.models import CacheEntries, CacheEntry
from simple_cache.storage.base import StorageBackend


class NullStorage(StorageBackend):
    """Discards every write and misses every read.

    Plug it into a cache to disable caching without touching call sites.
    """

    name = "null"

    def set(self, entry: CacheEntry) -> None:
        pass

    def set_multiple(self, entries: CacheEntries) -> None:
        pass

    def get(self, key: str) -> CacheEntry | None:
        return None

    def get_multiple(self, keys: Iterable[str]) -> list[CacheEntry]:
        return []

    def has(self, key: str) -> bool:
        return False

    def delete(self, key: str) -> None:
        pass

    def delete_multiple(self, keys: Iterable[str]) -> None:
        pass

    def clear(self) -> None:
        pass
