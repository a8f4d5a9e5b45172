"""Unit tests for the retention manager."""

import asyncio
from datetime import timedelta

import pytest
from unittest.mock import AsyncMock, MagicMock

from workflow_checkpoints.errors import DurableTierError
from workflow_checkpoints.models.checkpoint_models import CheckpointData
from workflow_checkpoints.services.retention_service import RetentionManager


@pytest.fixture
def mock_store():
    """Create a store whose cleanup deletes two checkpoints per cycle."""
    store = MagicMock()
    store.cleanup = AsyncMock(return_value=2)
    return store


@pytest.mark.asyncio
class TestRetentionManager:
    """Test suite for RetentionManager."""

    async def test_rejects_non_positive_interval(self, mock_store):
        """Test the interval must be positive."""
        with pytest.raises(ValueError):
            RetentionManager(mock_store, interval_seconds=0, retention_horizon=60)

    @pytest.mark.parametrize("horizon", [-1, timedelta(hours=-1)])
    async def test_rejects_negative_horizon(self, mock_store, horizon):
        """Test a negative retention horizon is rejected up front."""
        with pytest.raises(ValueError):
            RetentionManager(mock_store, interval_seconds=60, retention_horizon=horizon)

    async def test_run_once(self, mock_store):
        """Test a single cycle calls cleanup with the horizon."""
        manager = RetentionManager(mock_store, interval_seconds=60, retention_horizon=3600)

        assert await manager.run_once() == 2
        mock_store.cleanup.assert_awaited_once_with(3600)
        assert manager.cycles == 1
        assert manager.total_deleted == 2

    async def test_failed_cycle_is_contained(self, mock_store):
        """Test a failing cycle is counted and does not raise."""
        mock_store.cleanup = AsyncMock(side_effect=[DurableTierError("down"), 1])
        manager = RetentionManager(mock_store, interval_seconds=60, retention_horizon=3600)

        assert await manager.run_once() is None
        assert await manager.run_once() == 1
        assert manager.failures == 1
        assert manager.cycles == 1

    async def test_start_and_stop(self, mock_store):
        """Test the loop runs cycles until stopped."""
        manager = RetentionManager(mock_store, interval_seconds=0.01, retention_horizon=3600)

        manager.start()
        assert manager.is_running
        for _ in range(100):
            if mock_store.cleanup.await_count >= 2:
                break
            await asyncio.sleep(0.01)
        await manager.stop()

        assert not manager.is_running
        assert mock_store.cleanup.await_count >= 2

    async def test_stop_before_first_cycle(self, mock_store):
        """Test stopping promptly does not wait for the interval."""
        manager = RetentionManager(mock_store, interval_seconds=3600, retention_horizon=60)

        manager.start()
        await asyncio.wait_for(manager.stop(), timeout=1)

        mock_store.cleanup.assert_not_awaited()

    async def test_loop_survives_failures(self, mock_store):
        """Test the loop keeps running after cycles fail."""
        mock_store.cleanup = AsyncMock(side_effect=DurableTierError("down"))
        manager = RetentionManager(mock_store, interval_seconds=0.01, retention_horizon=60)

        async with manager:
            for _ in range(100):
                if manager.failures >= 2:
                    break
                await asyncio.sleep(0.01)
            assert manager.is_running

        assert manager.failures >= 2
        assert not manager.is_running

    async def test_stop_without_start(self, mock_store):
        """Test stop is a no-op when never started."""
        manager = RetentionManager(mock_store, interval_seconds=60, retention_horizon=60)
        await manager.stop()
        assert not manager.is_running

    async def test_purges_real_store(self, store, clock):
        """Test a cycle against a real store removes aged checkpoints."""
        await store.put("T1", "", CheckpointData(checkpoint_id="old"))
        clock.advance(hours=25)
        await store.put("T1", "", CheckpointData(checkpoint_id="new"))

        manager = RetentionManager(
            store, interval_seconds=60, retention_horizon=timedelta(hours=24)
        )

        assert await manager.run_once() == 1
        assert [c.checkpoint_id for c in await store.list("T1", "")] == ["new"]

    async def test_store_close_stops_retention(self, store):
        """Test closing the store stops its retention manager."""
        manager = store.start_retention(3600, timedelta(hours=1))
        assert manager.is_running

        await store.close()

        assert not manager.is_running
