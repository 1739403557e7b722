"""Basic usage examples for simple-cache."""

import logging
import os
import tempfile
from datetime import timedelta

from simple_cache import (
    Cache,
    CacheSettings,
    FileSystemStorage,
    NullStorage,
    VolatileStorage,
    create_cache,
)


def example_volatile_cache() -> None:
    """Example: In-memory cache with TTLs."""
    print("\n=== Volatile Cache Example ===\n")

    cache = Cache(VolatileStorage())

    cache.set("greeting", "hello", ttl=60)
    cache.set("report", {"rows": 42}, ttl=timedelta(hours=1))

    print(f"greeting: {cache.get('greeting')}")
    print(f"report: {cache.get('report')}")
    print(f"missing: {cache.get('missing', 'n/a')}")


def example_filesystem_cache() -> None:
    """Example: Entries persisted as one file per key."""
    print("\n=== Filesystem Cache Example ===\n")

    with tempfile.TemporaryDirectory() as cache_dir:
        cache = Cache(FileSystemStorage(cache_dir))

        cache.set_multiple({"a": 1, "b": 2}, ttl=300)
        print(f"batch: {cache.get_multiple(['a', 'b', 'c'], default=0)}")

        cache.delete("a")
        print(f"has a: {cache.has('a')}")
        print(f"files: {sorted(os.listdir(cache_dir))}")


def example_disabled_cache() -> None:
    """Example: Disabling caching without touching call sites."""
    print("\n=== Null Cache Example ===\n")

    cache = Cache(NullStorage())

    print(f"set: {cache.set('greeting', 'hello')}")
    print(f"get: {cache.get('greeting', 'always a miss')}")


def example_memcached_cache() -> None:
    """Example: Memcached backend built from settings.

    Requires ``pip install simple-cache[memcached]``. Without a reachable
    server every call degrades to a logged miss instead of raising.
    """
    print("\n=== Memcached Cache Example ===\n")

    settings = CacheSettings(
        backend="memcached",
        host=os.getenv("SIMPLE_CACHE_HOST", "127.0.0.1"),
        key_prefix="examples:",
        connect_timeout=1.0,
        timeout=1.0,
    )

    with create_cache(settings) as cache:
        print(f"set: {cache.set('greeting', 'hello', ttl=30)}")
        print(f"get: {cache.get('greeting', 'unavailable')}")


def main() -> None:
    """Run all examples."""
    logging.basicConfig(level=logging.WARNING)

    example_volatile_cache()
    example_filesystem_cache()
    example_disabled_cache()
    example_memcached_cache()


if __name__ == "__main__":
    main()
