"""Shared fixtures for checkpoint store tests."""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from workflow_checkpoints.services.checkpoint_service import CheckpointStore
from workflow_checkpoints.storage.codec import CheckpointCodec
from workflow_checkpoints.storage.memory_cache import InMemoryCacheTier
from workflow_checkpoints.storage.sqlite import SQLiteDurableTier


class FakeClock:
    """Deterministic clock that advances by ``tick`` on every read."""

    def __init__(self, start: datetime, tick: timedelta = timedelta(seconds=1)):
        self.now = start
        self.tick = tick

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.tick
        return current

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    """Clock starting at 2024-01-01 UTC."""
    return FakeClock(datetime(2024, 1, 1, tzinfo=timezone.utc))


@pytest.fixture
def cache():
    """In-memory cache tier."""
    return InMemoryCacheTier()


@pytest_asyncio.fixture
async def durable():
    """In-memory SQLite durable tier."""
    tier = SQLiteDurableTier(":memory:")
    yield tier
    await tier.close()


@pytest.fixture
def store(cache, durable, clock):
    """Checkpoint store with compression enabled."""
    return CheckpointStore(
        cache=cache,
        durable=durable,
        codec=CheckpointCodec(enable_compression=True),
        key_prefix="test",
        clock=clock,
    )
