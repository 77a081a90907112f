"""Shared fixtures for the readrmood tests."""

from datetime import datetime, timedelta

import pytest

from readrmood.infrastructure.memory_persistence_store import InMemoryPersistenceStore


class FakeClock:
    """Manually advanced clock returning naive local datetimes."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float = 0, **kwargs) -> datetime:
        self.now = self.now + timedelta(seconds=seconds, **kwargs)
        return self.now


@pytest.fixture
def clock():
    """A clock frozen at Tuesday 2026-01-13 10:00."""
    return FakeClock(datetime(2026, 1, 13, 10, 0, 0))


@pytest.fixture
def store():
    """Create a fresh InMemoryPersistenceStore for each test."""
    return InMemoryPersistenceStore()
