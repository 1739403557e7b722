"""In-process storage backend."""

import logging

from simple_cache.core.models import CacheEntry
from simple_cache.storage.base import StorageBackend

logger = logging.getLogger(__name__)


class VolatileStorage(StorageBackend):
    """Keeps entries in a dictionary owned by this instance.

    Nothing is persisted and nothing expires here; stale entries stay until
    they are overwritten, deleted or cleared. Entries are deep-copied on the
    way in and out so callers never share mutable content with the store.
    """

    name = "volatile"

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}

    def set(self, entry: CacheEntry) -> None:
        self._entries[entry.key] = entry.model_copy(deep=True)
        logger.debug(f"Stored cache entry: {entry.key}")

    def get(self, key: str) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        return entry.model_copy(deep=True)

    def has(self, key: str) -> bool:
        return key in self._entries

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
