"""Cache facade over a pluggable storage backend."""

import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timedelta
from typing import Any, Optional

from simple_cache.core.clock import Clock, SystemClock
from simple_cache.core.exceptions import InvalidArgumentError, StorageError
from simple_cache.core.models import CacheEntries, CacheEntry
from simple_cache.core.results import Failure, StorageResult, Success
from simple_cache.storage.base import StorageBackend

TTL = int | timedelta | None


class Cache:
    """Stores any picklable content under string keys.

    The cache never lets a storage failure reach its caller. Failed writes,
    deletes and existence checks return False, failed reads return the caller's
    default, and every failure is logged once at CRITICAL level. Only caller
    mistakes (a malformed key or TTL) raise, as InvalidArgumentError.

    Example:
        >>> cache = Cache(VolatileStorage())
        >>> cache.set("greeting", "hello", ttl=60)
        True
        >>> cache.get("greeting")
        'hello'
        >>> cache.get("missing", default="n/a")
        'n/a'
    """

    def __init__(
        self,
        storage: StorageBackend,
        clock: Optional[Clock] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """Initialize the cache.

        Args:
            storage: Backend holding the entries
            clock: Time source for stamping and expiring entries
                (default: system clock in UTC)
            logger: Receives one CRITICAL record per failed operation
                (default: this module's logger)
        """
        self.storage = storage
        self.clock = clock or SystemClock()
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    def get(self, key: str, default: Any = None) -> Any:
        """Fetch the content stored under a key.

        Expired entries read as missing but are left in storage.

        Args:
            key: Cache key
            default: Returned on a miss, an expired entry, or a storage failure

        Returns:
            Cached content or ``default``
        """
        self._check_key(key)

        match self._attempt(self.storage.get, key):
            case Failure(error=error):
                self._report(f"Failed retrieving cache content for key '{key}'.", error, "get", key)
                return default
            case Success(value=None):
                return default
            case Success(value=entry):
                if entry.is_expired(self._now_timestamp()):
                    return default
                return entry.content

    def set(self, key: str, value: Any, ttl: TTL = None) -> bool:
        """Store content under a key.

        Args:
            key: Cache key
            value: Content to store
            ttl: Seconds (int >= 1) or a positive duration (timedelta, or any
                duration that can be added to a datetime) until the entry
                expires. None means it never expires.

        Returns:
            True if stored, False if the backend failed

        Raises:
            InvalidArgumentError: If the key or TTL is malformed
        """
        self._check_key(key)
        created_at = self.clock.now()

        entry = CacheEntry(
            key=key,
            content=value,
            creation_timestamp=int(created_at.timestamp()),
            expiration_timestamp=self._get_expiration_timestamp(created_at, ttl),
        )

        match self._attempt(self.storage.set, entry):
            case Failure(error=error):
                self._report(f"Failed setting cache content for key '{key}'.", error, "set", key)
                return False
        return True

    def delete(self, key: str) -> bool:
        """Delete an entry. Deleting a missing key succeeds.

        Returns:
            True if the entry is gone, False if the backend failed
        """
        self._check_key(key)

        match self._attempt(self.storage.delete, key):
            case Failure(error=error):
                self._report(f"Failed deleting cache entry '{key}'.", error, "delete", key)
                return False
        return True

    def clear(self) -> bool:
        """Delete every entry.

        Returns:
            True if the backend was cleared, False if it failed
        """
        match self._attempt(self.storage.clear):
            case Failure(error=error):
                self._report("Failed clearing cache.", error, "clear")
                return False
        return True

    def get_multiple(self, keys: Iterable[str], default: Any = None) -> dict[str, Any]:
        """Fetch several keys in one backend round trip.

        Args:
            keys: Cache keys
            default: Value for every key that is missing, expired, or lost to
                a storage failure

        Returns:
            Mapping of every requested key, in request order, to its content
            or ``default``
        """
        keys = self._check_keys(keys)

        found: dict[str, CacheEntry] = {}
        match self._attempt(self.storage.get_multiple, keys):
            case Failure(error=error):
                self._report("Failed retrieving cache content.", error, "get_multiple")
            case Success(value=entries):
                found = {entry.key: entry for entry in entries}

        now_timestamp = self._now_timestamp()
        results = {}
        for key in keys:
            entry = found.get(key)
            if entry is None or entry.is_expired(now_timestamp):
                results[key] = default
            else:
                results[key] = entry.content
        return results

    def set_multiple(self, values: Mapping[str, Any], ttl: TTL = None) -> bool:
        """Store several contents sharing one creation time and expiration.

        Args:
            values: Mapping of key to content
            ttl: Same meaning as in :meth:`set`

        Returns:
            True if every entry was stored, False if the backend failed
            (some entries may have been stored anyway)

        Raises:
            InvalidArgumentError: If a key or the TTL is malformed
        """
        values = dict(values)
        for key in values:
            self._check_key(key)
        created_at = self.clock.now()

        entries = CacheEntries(
            values=values,
            creation_timestamp=int(created_at.timestamp()),
            expiration_timestamp=self._get_expiration_timestamp(created_at, ttl),
        )

        match self._attempt(self.storage.set_multiple, entries):
            case Failure(error=error):
                self._report("Failed adding content to cache.", error, "set_multiple")
                return False
        return True

    def delete_multiple(self, keys: Iterable[str]) -> bool:
        """Delete several entries.

        Returns:
            True if every entry is gone, False if the backend failed
        """
        keys = self._check_keys(keys)

        match self._attempt(self.storage.delete_multiple, keys):
            case Failure(error=error):
                self._report("Failed deleting cache content.", error, "delete_multiple")
                return False
        return True

    def has(self, key: str) -> bool:
        """Check whether the backend holds an entry for a key.

        Expiration is not considered: a stale entry that is still stored
        counts as present.

        Returns:
            True if present, False if absent or the backend failed
        """
        self._check_key(key)

        match self._attempt(self.storage.has, key):
            case Failure(error=error):
                self._report(
                    f"Failed determining cache entry existence for key '{key}'.", error, "has", key
                )
                return False
            case Success(value=exists):
                return bool(exists)

    def close(self) -> None:
        """Release the storage backend's resources."""
        self.storage.close()

    def __enter__(self) -> "Cache":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: type, exc_val: Exception, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()

    def _attempt(self, operation: Callable[..., Any], *args: Any) -> StorageResult[Any]:
        """Run a storage call and turn its outcome into a result value.

        Args:
            operation: Bound storage method
            *args: Arguments for the call

        Returns:
            Success with the call's return value, or Failure with the error
        """
        try:
            return Success(operation(*args))
        except StorageError as e:
            return Failure(e)
        except Exception as e:  # pylint: disable=broad-exception-caught
            error = StorageError(f"Unexpected storage error: {e}", backend=self.storage.name)
            error.__cause__ = e
            return Failure(error)

    def _report(
        self,
        message: str,
        error: StorageError,
        operation: str,
        key: Optional[str] = None,
    ) -> None:
        self.logger.critical(
            message,
            exc_info=error,
            extra={"cache_operation": operation, "cache_key": key},
        )

    def _now_timestamp(self) -> int:
        return int(self.clock.now().timestamp())

    @classmethod
    def _check_keys(cls, keys: Iterable[str]) -> list[str]:
        # A bare string is iterable but is one key, not a batch
        if isinstance(keys, (str, bytes)):
            raise InvalidArgumentError(
                "Cache keys must be an iterable of strings, not a single string."
            )
        keys = list(keys)
        for key in keys:
            cls._check_key(key)
        return keys

    @staticmethod
    def _check_key(key: Any) -> None:
        if not isinstance(key, str):
            raise InvalidArgumentError(f"Cache key must be a string, got {type(key).__name__}.")

    @staticmethod
    def _get_expiration_timestamp(created_at: datetime, ttl: Any) -> Optional[int]:
        """Convert a TTL into an absolute expiration timestamp.

        Integer TTLs are added as seconds. Durations are added to the stored
        creation second (sub-second precision dropped), so calendar-aware
        durations (months, DST-aware deltas) land on the right wall-clock time
        and the outcome does not depend on the clock's microseconds.

        Args:
            created_at: Creation time of the entry
            ttl: None, positive int seconds, or a positive duration

        Returns:
            Expiration in epoch seconds, or None if the entry never expires

        Raises:
            InvalidArgumentError: If the TTL is non-positive or of an unknown type
        """
        if ttl is None:
            return None

        if isinstance(ttl, bool):
            raise InvalidArgumentError("Invalid cache TTL.")

        if isinstance(ttl, int):
            if ttl < 1:
                raise InvalidArgumentError("Invalid cache TTL.")
            return int(created_at.timestamp()) + ttl

        if isinstance(ttl, timedelta) and ttl < timedelta(0):
            raise InvalidArgumentError("Invalid cache expiration interval.")

        created_second = created_at.replace(microsecond=0)
        try:
            expires_at = created_second + ttl
        except TypeError as e:
            raise InvalidArgumentError(f"Unsupported cache TTL type: {type(ttl).__name__}.") from e

        if not isinstance(expires_at, datetime):
            raise InvalidArgumentError(f"Unsupported cache TTL type: {type(ttl).__name__}.")

        expiration_timestamp = int(expires_at.timestamp())
        if expiration_timestamp <= int(created_second.timestamp()):
            raise InvalidArgumentError("Invalid cache expiration interval.")
        return expiration_timestamp
