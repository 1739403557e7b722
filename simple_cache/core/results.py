"""Result values returned by guarded storage calls."""

from dataclasses import dataclass
from typing import Generic, TypeVar

from simple_cache.core.exceptions import StorageError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Storage call completed; carries its return value."""

    value: T


@dataclass(frozen=True)
class Failure:
    """Storage call failed; carries the error it raised."""

    error: StorageError


StorageResult = Success[T] | Failure
