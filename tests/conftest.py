"""Pytest configuration and fixtures."""

from datetime import UTC, datetime, timedelta

import pytest

from simple_cache import Cache, VolatileStorage


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: int) -> None:
        self.current += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    """Fake clock starting at 2024-01-31 12:00:00 UTC."""
    return FakeClock(datetime(2024, 1, 31, 12, 0, 0, tzinfo=UTC))


@pytest.fixture
def volatile_cache(clock):
    """Cache over an in-memory backend with a fake clock."""
    return Cache(VolatileStorage(), clock=clock)
