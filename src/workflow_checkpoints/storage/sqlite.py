"""
SQLite durable tier for local development and tests.

Requires aiosqlite. One connection is shared and serialized through a lock,
which also keeps ``:memory:`` databases alive for the tier's lifetime.
"""

import asyncio
import logging
import sqlite3
from typing import Any, Dict, List, Optional, Sequence

import aiosqlite

from .base import DurableTier
from .dialect import SQLITE
from ..errors import DurableTierError

logger = logging.getLogger(__name__)


class SQLiteDurableTier(DurableTier):
    """Executes statements on a single aiosqlite connection."""

    dialect = SQLITE

    def __init__(self, db_path: str = "checkpoints.db"):
        self.db_path = db_path
        self._db: Optional[aiosqlite.Connection] = None
        self._lock = asyncio.Lock()

    async def _connect(self) -> aiosqlite.Connection:
        if self._db is None:
            try:
                self._db = await aiosqlite.connect(self.db_path)
            except (sqlite3.Error, OSError) as e:
                raise DurableTierError(f"SQLite unavailable: {e}") from e
            self._db.row_factory = aiosqlite.Row
            logger.info(f"SQLite database opened at {self.db_path}")
        return self._db

    async def query(
        self, statement: str, params: Sequence[Any] = ()
    ) -> List[Dict[str, Any]]:
        async with self._lock:
            db = await self._connect()
            try:
                async with db.execute(statement, tuple(params)) as cursor:
                    rows = await cursor.fetchall()
                await db.commit()
            except sqlite3.Error as e:
                await db.rollback()
                raise DurableTierError(f"SQLite query failed: {e}") from e
        return [dict(row) for row in rows]

    async def close(self) -> None:
        """Close the database connection."""
        async with self._lock:
            if self._db is not None:
                await self._db.close()
                self._db = None
                logger.info("SQLite database closed")
