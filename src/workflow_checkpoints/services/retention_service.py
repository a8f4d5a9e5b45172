"""Background retention of aged checkpoints."""

import asyncio
import logging
from datetime import timedelta
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from .checkpoint_service import CheckpointStore

logger = logging.getLogger(__name__)


class RetentionManager:
    """
    Periodically purges checkpoints older than the retention horizon.

    PATTERN: One asyncio task with a stop event; stop() waits for it to finish
    CRITICAL: A failed cycle is logged and the next cycle retries; errors never escape
    """

    def __init__(
        self,
        store: "CheckpointStore",
        interval_seconds: float,
        retention_horizon: Union[timedelta, float],
    ):
        """
        Initialize retention manager.

        Args:
            store: Checkpoint store to clean up
            interval_seconds: Seconds between cleanup cycles
            retention_horizon: Maximum checkpoint age (timedelta or seconds)
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        horizon = (
            retention_horizon
            if isinstance(retention_horizon, timedelta)
            else timedelta(seconds=retention_horizon)
        )
        if horizon < timedelta(0):
            raise ValueError("retention_horizon must not be negative")
        self.store = store
        self.interval_seconds = interval_seconds
        self.retention_horizon = retention_horizon
        self._task: Optional[asyncio.Task] = None
        self._stop_event: Optional[asyncio.Event] = None

        # Statistics
        self.cycles = 0
        self.failures = 0
        self.total_deleted = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the cleanup loop on the running event loop."""
        if self.is_running:
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run())
        logger.info(
            f"Started checkpoint retention (interval={self.interval_seconds}s, "
            f"horizon={self.retention_horizon})"
        )

    async def stop(self) -> None:
        """Stop the cleanup loop and wait for it to terminate."""
        if self._task is None:
            return
        self._stop_event.set()
        task, self._task = self._task, None
        await asyncio.gather(task, return_exceptions=True)
        logger.info("Stopped checkpoint retention")

    async def run_once(self) -> Optional[int]:
        """
        Run one cleanup cycle.

        Returns:
            Number of checkpoints deleted, or None if the cycle failed
        """
        try:
            deleted = await self.store.cleanup(self.retention_horizon)
        except Exception as e:
            self.failures += 1
            logger.error(f"Checkpoint retention cycle failed: {e}")
            return None

        self.cycles += 1
        self.total_deleted += deleted
        return deleted

    async def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                await asyncio.wait_for(
                    self._stop_event.wait(), timeout=self.interval_seconds
                )
            except asyncio.TimeoutError:
                await self.run_once()

    async def __aenter__(self) -> "RetentionManager":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
