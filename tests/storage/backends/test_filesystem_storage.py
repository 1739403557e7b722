"""Tests for the filesystem storage backend."""

import hashlib
import pickle

import pytest

from simple_cache import Cache
from simple_cache.core import CacheEntries, CacheEntry, StorageError
from simple_cache.storage.backends import FileSystemStorage


def cache_file(base_path, key: str):
    return base_path / f"{hashlib.md5(key.encode('utf-8', 'surrogatepass')).hexdigest()}.cache"


@pytest.fixture
def storage(tmp_path):
    """Filesystem backend rooted in a temporary directory."""
    return FileSystemStorage(tmp_path)


@pytest.fixture
def entry():
    """Entry expiring one hour after creation."""
    return CacheEntry(
        key="report:2024",
        content={"rows": [1, 2, 3], "title": "Q1"},
        creation_timestamp=1_700_000_000,
        expiration_timestamp=1_700_003_600,
    )


def test_set_writes_pickled_entry_to_hashed_file(storage, tmp_path, entry):
    """Test the on-disk layout."""
    storage.set(entry)

    path = cache_file(tmp_path, "report:2024")
    assert path.is_file()
    assert pickle.loads(path.read_bytes()) == entry


def test_get_returns_stored_entry(storage, entry):
    """Test stored entries read back equal."""
    storage.set(entry)

    assert storage.get("report:2024") == entry
    assert storage.has("report:2024") is True


def test_get_missing_returns_none(storage):
    """Test missing files read as absent."""
    assert storage.get("missing") is None
    assert storage.has("missing") is False


def test_set_creates_base_directory(tmp_path, entry):
    """Test the base directory is created on first write."""
    storage = FileSystemStorage(tmp_path / "nested" / "cache")

    storage.set(entry)

    assert storage.get("report:2024") == entry


def test_trailing_separator_is_normalized(tmp_path, entry):
    """Test a base path with a trailing separator maps to the same files."""
    FileSystemStorage(f"{tmp_path}/").set(entry)

    assert FileSystemStorage(tmp_path).get("report:2024") == entry


def test_set_leaves_no_temporary_files(storage, tmp_path, entry):
    """Test atomic writes clean up after themselves."""
    storage.set(entry)
    storage.set(entry)

    assert [p.name for p in tmp_path.iterdir()] == [cache_file(tmp_path, "report:2024").name]


def test_set_unpicklable_content_fails(storage, tmp_path):
    """Test content that cannot be pickled raises StorageError."""
    entry = CacheEntry(key="foo", content=lambda: None, creation_timestamp=100)

    with pytest.raises(StorageError):
        storage.set(entry)

    assert not cache_file(tmp_path, "foo").exists()


def test_set_into_unwritable_location_fails(tmp_path, entry):
    """Test write failures raise StorageError."""
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("file in the way")

    with pytest.raises(StorageError):
        FileSystemStorage(blocker).set(entry)


def test_get_corrupted_file_fails(storage, tmp_path):
    """Test undecodable files raise StorageError."""
    cache_file(tmp_path, "foo").write_bytes(b"\x80\x04garbage")

    with pytest.raises(StorageError):
        storage.get("foo")


def test_get_foreign_payload_fails(storage, tmp_path):
    """Test files holding something other than an entry raise StorageError."""
    cache_file(tmp_path, "foo").write_bytes(pickle.dumps({"not": "an entry"}))

    with pytest.raises(StorageError, match="Unexpected content"):
        storage.get("foo")


def test_delete_removes_file(storage, tmp_path, entry):
    """Test delete removes the entry's file."""
    storage.set(entry)

    storage.delete("report:2024")

    assert not cache_file(tmp_path, "report:2024").exists()
    assert storage.get("report:2024") is None


def test_delete_missing_is_noop(storage):
    """Test deleting an unknown key is idempotent."""
    storage.delete("missing")
    storage.delete("missing")


def test_delete_failure_raises(storage, tmp_path):
    """Test a path that cannot be unlinked raises StorageError."""
    cache_file(tmp_path, "foo").mkdir()

    with pytest.raises(StorageError):
        storage.delete("foo")


def test_batch_operations(storage):
    """Test batch write, read and delete."""
    storage.set_multiple(
        CacheEntries(values={"a": 1, "b": 2}, creation_timestamp=100, expiration_timestamp=200)
    )

    entries = storage.get_multiple(["a", "b", "c"])
    assert sorted((e.key, e.content, e.expiration_timestamp) for e in entries) == [
        ("a", 1, 200),
        ("b", 2, 200),
    ]

    storage.delete_multiple(["a", "c"])
    assert storage.has("a") is False
    assert storage.has("b") is True


def test_clear_only_removes_cache_files(storage, tmp_path):
    """Test clear leaves unrelated files alone."""
    storage.set_multiple(CacheEntries(values={"a": 1, "b": 2}, creation_timestamp=100))
    unrelated = tmp_path / "notes.txt"
    unrelated.write_text("keep me")

    storage.clear()

    assert list(tmp_path.glob("*.cache")) == []
    assert unrelated.read_text() == "keep me"


def test_clear_is_idempotent(storage, tmp_path):
    """Test clearing an empty or missing directory succeeds."""
    storage.clear()
    storage.clear()
    FileSystemStorage(tmp_path / "does-not-exist").clear()


def test_clear_failure_raises(storage, tmp_path):
    """Test a cache path that cannot be unlinked aborts clear."""
    (tmp_path / "stuck.cache").mkdir()

    with pytest.raises(StorageError):
        storage.clear()


def test_cache_round_trip_on_disk(tmp_path, clock):
    """Test the facade over the filesystem backend."""
    cache = Cache(FileSystemStorage(tmp_path), clock=clock)

    assert cache.set("foo", ["bar"], ttl=60) is True
    assert cache.get("foo") == ["bar"]

    clock.advance(61)
    assert cache.get("foo", "expired") == "expired"

    assert cache.delete("foo") is True
    assert cache.delete("foo") is True
    assert cache.has("foo") is False


def test_cache_contains_corrupted_file(tmp_path, clock, caplog):
    """Test a corrupted file degrades to a logged miss."""
    cache = Cache(FileSystemStorage(tmp_path), clock=clock)
    cache_file(tmp_path, "foo").write_bytes(b"not a pickle")

    assert cache.get("foo", "default") == "default"
    assert any(r.levelname == "CRITICAL" for r in caplog.records)


def test_key_with_lone_surrogate(storage, tmp_path):
    """Test any str key maps to a file, even one that is not valid UTF-8."""
    key = "broken-\ud800-key"
    storage.set(CacheEntry(key=key, content="value", creation_timestamp=100))

    assert cache_file(tmp_path, key).is_file()
    assert storage.get(key).content == "value"
    storage.delete(key)
    assert storage.has(key) is False
