"""Tests for the in-process storage backend."""

from simple_cache.core import CacheEntries, CacheEntry
from simple_cache.storage.backends import VolatileStorage


def make_entry(key: str = "foo", content=None, expiration: int | None = None) -> CacheEntry:
    return CacheEntry(
        key=key,
        content=content if content is not None else {"items": [1, 2, 3]},
        creation_timestamp=100,
        expiration_timestamp=expiration,
    )


def test_set_and_get():
    """Test stored entries are returned."""
    storage = VolatileStorage()
    storage.set(make_entry())

    entry = storage.get("foo")

    assert entry == make_entry()
    assert storage.has("foo") is True
    assert len(storage) == 1


def test_get_missing_returns_none():
    """Test unknown keys read as absent."""
    storage = VolatileStorage()

    assert storage.get("missing") is None
    assert storage.has("missing") is False


def test_set_overwrites():
    """Test a later write replaces the earlier one."""
    storage = VolatileStorage()
    storage.set(make_entry(content="first"))
    storage.set(make_entry(content="second"))

    assert storage.get("foo").content == "second"
    assert len(storage) == 1


def test_returned_entries_are_snapshots():
    """Test callers cannot mutate stored content through reads or writes."""
    storage = VolatileStorage()
    content = {"items": [1, 2, 3]}
    storage.set(make_entry(content=content))

    content["items"].append(4)
    storage.get("foo").content["items"].append(5)

    assert storage.get("foo").content == {"items": [1, 2, 3]}


def test_expired_entries_are_kept():
    """Test the backend does not enforce expiration."""
    storage = VolatileStorage()
    storage.set(make_entry(expiration=101))

    assert storage.get("foo") is not None


def test_batch_operations():
    """Test batch write, read and delete."""
    storage = VolatileStorage()
    storage.set_multiple(CacheEntries(values={"a": 1, "b": 2}, creation_timestamp=100))

    entries = storage.get_multiple(["b", "a", "c"])
    assert sorted((e.key, e.content) for e in entries) == [("a", 1), ("b", 2)]

    storage.delete_multiple(["a", "c"])
    assert storage.has("a") is False
    assert storage.has("b") is True


def test_delete_missing_is_noop():
    """Test deleting an unknown key does nothing."""
    storage = VolatileStorage()

    storage.delete("missing")

    assert len(storage) == 0


def test_clear():
    """Test clear empties the store."""
    storage = VolatileStorage()
    storage.set(make_entry("a"))
    storage.set(make_entry("b"))

    storage.clear()
    storage.clear()

    assert len(storage) == 0
