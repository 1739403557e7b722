"""Filesystem storage backend.

Each entry lives in its own file under a base directory::

    <base_path>/<md5(key)>.cache

The file holds the pickled CacheEntry. Only files ending in ``.cache`` are
considered part of the cache, so the base directory may be shared with
other content.
"""

import hashlib
import logging
import os
import pickle
import tempfile
from pathlib import Path

from simple_cache.core.exceptions import StorageError
from simple_cache.core.models import CacheEntry
from simple_cache.storage.base import StorageBackend

logger = logging.getLogger(__name__)

CACHE_FILE_SUFFIX = ".cache"


class FileSystemStorage(StorageBackend):
    """Stores one pickled entry per file.

    Example:
        ```python
        from simple_cache import Cache
        from simple_cache.storage.backends import FileSystemStorage

        cache = Cache(FileSystemStorage("/var/cache/myapp"))
        cache.set("report", {"rows": 42}, ttl=3600)
        ```

    Args:
        base_path: Directory holding the cache files. Created on first write.
    """

    name = "filesystem"

    def __init__(self, base_path: str | Path) -> None:
        self.base_path = Path(base_path)

    def set(self, entry: CacheEntry) -> None:
        """Write an entry, atomically replacing the previous file for its key.

        Raises:
            StorageError: If the entry cannot be pickled or written
        """
        cache_file_path = self._get_cache_file_path(entry.key)

        try:
            packed_entry = pickle.dumps(entry)
        except (pickle.PicklingError, TypeError, AttributeError) as e:
            raise StorageError(
                f"Failed to serialize cache entry '{entry.key}': {e}", backend=self.name
            ) from e

        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
            # Write next to the target so the rename stays on one filesystem
            fd, tmp_path = tempfile.mkstemp(dir=self.base_path, suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as tmp_file:
                    tmp_file.write(packed_entry)
                os.replace(tmp_path, cache_file_path)
            except BaseException:
                Path(tmp_path).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(
                f"Failed to store cache entry '{entry.key}': {e}", backend=self.name
            ) from e

        logger.debug(f"Stored cache file: {cache_file_path}")

    def get(self, key: str) -> CacheEntry | None:
        """Read an entry.

        Returns:
            The entry, or None if no file exists for the key

        Raises:
            StorageError: If the file cannot be read or does not hold an entry
        """
        cache_file_path = self._get_cache_file_path(key)

        try:
            file_content = cache_file_path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(
                f"Failed to read cache file '{cache_file_path}': {e}", backend=self.name
            ) from e

        try:
            cache_entry = pickle.loads(file_content)
        except Exception as e:
            # Truncated or foreign files can raise nearly anything while unpickling
            raise StorageError(
                f"Failed to decode cache file '{cache_file_path}': {e}", backend=self.name
            ) from e

        if not isinstance(cache_entry, CacheEntry):
            raise StorageError(
                f"Unexpected content in cache file '{cache_file_path}': "
                f"{type(cache_entry).__name__}",
                backend=self.name,
            )

        return cache_entry

    def has(self, key: str) -> bool:
        return self._get_cache_file_path(key).is_file()

    def delete(self, key: str) -> None:
        """Delete the file for a key. A missing file is not an error.

        Raises:
            StorageError: If the file exists but cannot be removed
        """
        self._unlink(self._get_cache_file_path(key))

    def clear(self) -> None:
        """Delete every cache file in the base directory.

        Stops at the first file that cannot be removed; files removed before
        that stay removed.

        Raises:
            StorageError: If the directory cannot be listed or a file removed
        """
        if not self.base_path.is_dir():
            return

        try:
            cache_file_paths = list(self.base_path.glob(f"*{CACHE_FILE_SUFFIX}"))
        except OSError as e:
            raise StorageError(
                f"Failed to list cache files in '{self.base_path}': {e}", backend=self.name
            ) from e

        for cache_file_path in cache_file_paths:
            self._unlink(cache_file_path)

        logger.debug(f"Cleared {len(cache_file_paths)} cache files from {self.base_path}")

    def _unlink(self, cache_file_path: Path) -> None:
        try:
            cache_file_path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(
                f"Failed to delete cache file '{cache_file_path}': {e}", backend=self.name
            ) from e

    def _get_cache_file_path(self, key: str) -> Path:
        """Map a key to its cache file.

        Args:
            key: Cache key

        Returns:
            Path of the file (MD5 hex digest of the key plus suffix)
        """
        key_bytes = key.encode("utf-8", "surrogatepass")
        digest = hashlib.md5(key_bytes, usedforsecurity=False).hexdigest()
        return self.base_path / f"{digest}{CACHE_FILE_SUFFIX}"
