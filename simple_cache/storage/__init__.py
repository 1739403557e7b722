"""Storage module for simple-cache."""

from simple_cache.storage.base import StorageBackend
from simple_cache.storage.factory import create_storage

__all__ = ["StorageBackend", "create_storage"]
