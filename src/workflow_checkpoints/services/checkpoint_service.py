"""Checkpoint store for resumable workflow state persistence."""

import asyncio
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Union
from urllib.parse import quote

from ..config.checkpoint_config import CheckpointConfig
from ..errors import InvalidArgumentError, PersistenceError
from ..models.checkpoint_models import (
    Checkpoint,
    CheckpointData,
    CheckpointRecord,
    CheckpointStatistics,
    ResumptionHandle,
)
from ..storage.base import CacheTier, DurableTier
from ..storage.codec import CheckpointCodec
from ..storage.dialect import to_utc
from ..storage.postgres import PostgresDurableTier
from ..storage.redis_cache import RedisCacheTier
from .retention_service import RetentionManager

logger = logging.getLogger(__name__)

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
FIELD_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
STAGE_FIELD = "stage"
COLUMNS = (
    "thread_id, checkpoint_ns, checkpoint_id, parent_checkpoint_id, type, "
    "checkpoint, metadata, created_at, updated_at"
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CheckpointStore:
    """
    Two-tier checkpoint store.

    Writes go to the cache tier (with TTL) and then to the durable tier, which
    is the system of record. Reads by id are served from the cache when
    possible and written back on a durable hit. Listing, "latest" lookups,
    cleanup and statistics always use the durable tier.

    CRITICAL: put is not durable until it returns; callers retry on PersistenceError
    GOTCHA: Cache failures never surface; the cache is only an accelerator
    """

    def __init__(
        self,
        cache: CacheTier,
        durable: DurableTier,
        codec: Optional[CheckpointCodec] = None,
        key_prefix: str = "workflow",
        cache_ttl: int = 3600,
        table_name: str = "workflow_checkpoints",
        schema_name: str = "public",
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize checkpoint store.

        Args:
            cache: Cache tier client
            durable: Durable tier client
            codec: Payload/metadata codec (compression enabled by default)
            key_prefix: Prefix for every cache key
            cache_ttl: TTL for cached checkpoints in seconds
            table_name: Durable table name
            schema_name: Durable schema name (ignored by SQLite)
            clock: Source of timezone-aware "now"
        """
        for name in (table_name, schema_name):
            if not IDENTIFIER_PATTERN.match(name):
                raise InvalidArgumentError(f"Invalid SQL identifier: {name!r}")
        if cache_ttl <= 0:
            raise InvalidArgumentError("cache_ttl must be positive")

        self.cache = cache
        self.durable = durable
        self.codec = codec or CheckpointCodec()
        self.key_prefix = key_prefix
        self.cache_ttl = cache_ttl
        self.table_name = table_name
        self.schema_name = schema_name
        self._clock = clock
        self._initialized = False
        self._init_lock = asyncio.Lock()
        self._retention: Optional[RetentionManager] = None

    @classmethod
    def from_config(
        cls,
        config: CheckpointConfig,
        cache: CacheTier,
        durable: DurableTier,
        clock: Callable[[], datetime] = utc_now,
    ) -> "CheckpointStore":
        """Build a store for injected tiers using configured naming and codec options."""
        return cls(
            cache=cache,
            durable=durable,
            codec=CheckpointCodec(enable_compression=config.enable_compression),
            key_prefix=config.key_prefix,
            cache_ttl=config.cache_ttl,
            table_name=config.table_name,
            schema_name=config.schema_name,
            clock=clock,
        )

    @property
    def dialect(self):
        return self.durable.dialect

    @property
    def table(self) -> str:
        return self.dialect.table(self.schema_name, self.table_name)

    # -- Key model ------------------------------------------------------------

    @staticmethod
    def _key_part(value: str) -> str:
        # Percent-encode so ":" and glob characters inside ids cannot collide
        return quote(value, safe="")

    def _cache_key(self, thread_id: str, namespace: str, checkpoint_id: str) -> str:
        parts = ":".join(self._key_part(p) for p in (thread_id, namespace, checkpoint_id))
        return f"{self.key_prefix}:checkpoint:{parts}"

    def _metadata_key(self, thread_id: str, namespace: str) -> str:
        parts = ":".join(self._key_part(p) for p in (thread_id, namespace))
        return f"{self.key_prefix}:metadata:{parts}"

    @staticmethod
    def _require(value: Optional[str], name: str) -> str:
        if not value:
            raise InvalidArgumentError(f"{name} is required")
        return value

    # -- Lifecycle ------------------------------------------------------------

    async def initialize(self) -> None:
        """Create the checkpoint table and indexes if needed."""
        if self._initialized:
            return

        async with self._init_lock:
            if self._initialized:
                return
            for statement in self._schema_statements():
                await self._query(statement, (), "initialize storage")
            self._initialized = True
            logger.info(f"Checkpoint storage initialized (table={self.table})")

    def _schema_statements(self) -> List[str]:
        d = self.dialect
        table = self.table
        name = self.table_name
        return [
            f"""
            CREATE TABLE IF NOT EXISTS {table} (
                thread_id VARCHAR(255) NOT NULL,
                checkpoint_ns VARCHAR(255) NOT NULL DEFAULT '',
                checkpoint_id VARCHAR(255) NOT NULL,
                parent_checkpoint_id VARCHAR(255),
                type VARCHAR(100) NOT NULL,
                checkpoint TEXT NOT NULL,
                metadata {d.json_type},
                created_at {d.timestamp_type} NOT NULL,
                updated_at {d.timestamp_type} NOT NULL,
                PRIMARY KEY (thread_id, checkpoint_ns, checkpoint_id)
            )
            """,
            f"CREATE INDEX IF NOT EXISTS idx_{name}_thread_id ON {table}(thread_id)",
            f"CREATE INDEX IF NOT EXISTS idx_{name}_thread_ns_created "
            f"ON {table}(thread_id, checkpoint_ns, created_at)",
            f"CREATE INDEX IF NOT EXISTS idx_{name}_created_at ON {table}(created_at)",
            f"CREATE INDEX IF NOT EXISTS idx_{name}_type ON {table}(type)",
        ]

    def start_retention(
        self,
        interval_seconds: float,
        retention_horizon: Union[timedelta, float],
    ) -> RetentionManager:
        """
        Start a retention manager bound to this store.

        The manager is stopped by close().

        Args:
            interval_seconds: Seconds between cleanup cycles
            retention_horizon: Maximum checkpoint age

        Returns:
            The running retention manager
        """
        if self._retention is not None and self._retention.is_running:
            return self._retention
        self._retention = RetentionManager(
            self, interval_seconds=interval_seconds, retention_horizon=retention_horizon
        )
        self._retention.start()
        return self._retention

    async def close(self) -> None:
        """Stop retention and close both tiers."""
        if self._retention is not None:
            await self._retention.stop()
            self._retention = None
        await self.cache.close()
        await self.durable.close()
        logger.info("Checkpoint store closed")

    async def __aenter__(self) -> "CheckpointStore":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # -- Public operations ----------------------------------------------------

    async def put(
        self,
        thread_id: str,
        namespace: str,
        checkpoint: CheckpointData,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ResumptionHandle:
        """
        Save a checkpoint to the cache and durable tiers.

        Re-putting an existing (thread, namespace, checkpoint_id) overwrites it
        in place and keeps its created_at.

        Args:
            thread_id: Workflow instance identifier
            namespace: Sub-partition within the thread ("" by default)
            checkpoint: Snapshot to save; its checkpoint_id is required
            metadata: Side-channel fields used for filtering and statistics

        Returns:
            Resumption handle embedding the checkpoint id

        Raises:
            InvalidArgumentError: thread_id or checkpoint_id missing
            PersistenceError: the durable write failed
        """
        self._require(thread_id, "thread_id")
        if checkpoint is None:
            raise InvalidArgumentError("checkpoint is required")
        checkpoint_id = self._require(checkpoint.checkpoint_id, "checkpoint_id")
        namespace = namespace or ""

        now = to_utc(self._clock())
        record = CheckpointRecord(
            thread_id=thread_id,
            namespace=namespace,
            checkpoint_id=checkpoint_id,
            parent_checkpoint_id=checkpoint.parent_checkpoint_id,
            type=checkpoint.type,
            checkpoint=self.codec.encode_payload(checkpoint.payload),
            metadata=self.codec.encode_metadata(metadata or {}),
            created_at=now,
            updated_at=now,
        )

        await self._write_cache(record)

        await self.initialize()
        rows = await self._upsert(record, keep_created_at=True, action="save checkpoint")
        stored_created_at = self.dialect.decode_timestamp(rows[0]["created_at"]) if rows else now
        if stored_created_at != record.created_at:
            # Overwrite of an existing row: refresh the cache with its real created_at
            record = record.model_copy(update={"created_at": stored_created_at})
            await self._write_cache(record)

        logger.info(f"Saved checkpoint {checkpoint_id} for thread {thread_id}")
        return ResumptionHandle(
            thread_id=thread_id, namespace=namespace, checkpoint_id=checkpoint_id
        )

    async def get(
        self,
        thread_id: str,
        namespace: str = "",
        checkpoint_id: Optional[str] = None,
    ) -> Optional[Checkpoint]:
        """
        Get a checkpoint, from the cache when possible.

        Args:
            thread_id: Workflow instance identifier
            namespace: Sub-partition within the thread
            checkpoint_id: Specific checkpoint (default: latest by created_at)

        Returns:
            Checkpoint, or None if not found
        """
        self._require(thread_id, "thread_id")
        namespace = namespace or ""

        if checkpoint_id:
            cached = await self._read_cache(thread_id, namespace, checkpoint_id)
            if cached is not None:
                logger.debug(f"Cache hit for checkpoint {checkpoint_id}")
                return cached
            logger.debug(f"Cache miss for checkpoint {checkpoint_id}")

        await self.initialize()
        d = self.dialect
        if checkpoint_id:
            statement = f"""
                SELECT {COLUMNS} FROM {self.table}
                WHERE thread_id = {d.param(1)} AND checkpoint_ns = {d.param(2)}
                  AND checkpoint_id = {d.param(3)}
            """
            params: Sequence[Any] = (thread_id, namespace, checkpoint_id)
        else:
            statement = f"""
                SELECT {COLUMNS} FROM {self.table}
                WHERE thread_id = {d.param(1)} AND checkpoint_ns = {d.param(2)}
                ORDER BY created_at DESC, checkpoint_id DESC
                LIMIT 1
            """
            params = (thread_id, namespace)

        rows = await self._query(statement, params, "get checkpoint")
        if not rows:
            return None

        record = self._row_to_record(rows[0])
        await self._write_cache(record)
        logger.debug(f"Wrote back checkpoint {record.checkpoint_id} to cache")
        return self._to_checkpoint(record)

    async def list(
        self,
        thread_id: str,
        namespace: str = "",
        filter: Optional[Dict[str, Any]] = None,
        before: Optional[Union[str, ResumptionHandle]] = None,
        limit: Optional[int] = None,
    ) -> List[Checkpoint]:
        """
        List checkpoints of a thread namespace, newest first.

        Always served by the durable tier.

        Args:
            thread_id: Workflow instance identifier
            namespace: Sub-partition within the thread
            filter: Metadata fields that must equal the given scalar values
            before: Only checkpoints strictly older than this checkpoint
            limit: Maximum number of results (default: all)

        Returns:
            Checkpoints ordered by created_at descending
        """
        self._require(thread_id, "thread_id")
        namespace = namespace or ""
        if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int) or limit < 1):
            raise InvalidArgumentError(f"limit must be a positive integer, got {limit!r}")

        d = self.dialect
        params: List[Any] = [thread_id, namespace]
        conditions = [
            f"thread_id = {d.param(1)}",
            f"checkpoint_ns = {d.param(2)}",
        ]

        for key, value in (filter or {}).items():
            field = d.json_field("metadata", self._field_key(key))
            if value is None:
                conditions.append(f"{field} IS NULL")
            elif isinstance(value, (str, int, float, bool)):
                params.append(d.filter_value(value))
                conditions.append(f"{field} = {d.param(len(params))}")
            else:
                raise InvalidArgumentError(
                    f"Filter value for {key!r} must be a scalar, got {type(value).__name__}"
                )

        if before is not None:
            before_id = before.checkpoint_id if isinstance(before, ResumptionHandle) else before
            params.extend([thread_id, namespace, self._require(before_id, "before")])
            n = len(params)
            conditions.append(
                f"""created_at < (
                    SELECT created_at FROM {self.table}
                    WHERE thread_id = {d.param(n - 2)} AND checkpoint_ns = {d.param(n - 1)}
                      AND checkpoint_id = {d.param(n)}
                )"""
            )

        statement = (
            f"SELECT {COLUMNS} FROM {self.table} WHERE "
            + " AND ".join(conditions)
            + " ORDER BY created_at DESC, checkpoint_id DESC"
        )
        if limit is not None:
            params.append(limit)
            statement += f" LIMIT {d.param(len(params))}"

        await self.initialize()
        rows = await self._query(statement, params, "list checkpoints")
        return [self._to_checkpoint(self._row_to_record(row)) for row in rows]

    async def delete(self, thread_id: str, namespace: str, checkpoint_id: str) -> bool:
        """
        Delete a checkpoint from both tiers.

        Cache removal is best-effort; a stale cache entry expires via TTL.

        Args:
            thread_id: Workflow instance identifier
            namespace: Sub-partition within the thread
            checkpoint_id: Checkpoint to delete (required)

        Returns:
            True if a durable row was deleted, False if not found
        """
        self._require(thread_id, "thread_id")
        self._require(checkpoint_id, "checkpoint_id")
        namespace = namespace or ""

        try:
            await self.cache.delete(self._cache_key(thread_id, namespace, checkpoint_id))
            await self.cache.hash_delete(self._metadata_key(thread_id, namespace), checkpoint_id)
        except Exception as e:
            logger.warning(f"Cache eviction failed for checkpoint {checkpoint_id}: {e}")

        await self.initialize()
        d = self.dialect
        rows = await self._query(
            f"""
            DELETE FROM {self.table}
            WHERE thread_id = {d.param(1)} AND checkpoint_ns = {d.param(2)}
              AND checkpoint_id = {d.param(3)}
            RETURNING checkpoint_id
            """,
            (thread_id, namespace, checkpoint_id),
            "delete checkpoint",
        )
        deleted = bool(rows)
        if deleted:
            logger.info(f"Deleted checkpoint {checkpoint_id} for thread {thread_id}")
        else:
            logger.debug(f"Checkpoint {checkpoint_id} for thread {thread_id} not found")
        return deleted

    async def cleanup(self, retention_horizon: Union[timedelta, float]) -> int:
        """
        Delete durable checkpoints older than the retention horizon.

        Cached checkpoint entries are left to expire via TTL; metadata hash
        fields of purged checkpoints are pruned best-effort.

        Args:
            retention_horizon: Maximum age, as a timedelta or seconds

        Returns:
            Number of checkpoints deleted
        """
        horizon = self._as_timedelta(retention_horizon)
        cutoff = to_utc(self._clock()) - horizon

        await self.initialize()
        d = self.dialect
        rows = await self._query(
            f"""
            DELETE FROM {self.table}
            WHERE created_at < {d.param(1)}
            RETURNING thread_id, checkpoint_ns, checkpoint_id
            """,
            (d.encode_timestamp(cutoff),),
            "cleanup checkpoints",
        )
        logger.info(f"Cleaned up {len(rows)} old checkpoints (cutoff {cutoff.isoformat()})")

        try:
            for row in rows:
                await self.cache.hash_delete(
                    self._metadata_key(row["thread_id"], row["checkpoint_ns"]),
                    row["checkpoint_id"],
                )
            keys = await self.cache.list_keys(f"{self.key_prefix}:checkpoint:*")
            logger.info(f"Found {len(keys)} cached checkpoints left to expire via TTL")
        except Exception as e:
            logger.warning(f"Cache pass of cleanup failed: {e}")

        return len(rows)

    async def get_statistics(self, thread_id: Optional[str] = None) -> CheckpointStatistics:
        """
        Aggregate checkpoint statistics from the durable tier.

        Args:
            thread_id: Restrict to one thread (default: all threads)

        Returns:
            Totals, per-thread and per-stage counts, and timestamp bounds
        """
        await self.initialize()
        d = self.dialect
        where = f"WHERE thread_id = {d.param(1)}" if thread_id else ""
        params = (thread_id,) if thread_id else ()
        stage = d.json_field("metadata", STAGE_FIELD)

        statements = [
            f"SELECT COUNT(*) AS total FROM {self.table} {where}",
            f"SELECT thread_id, COUNT(*) AS count FROM {self.table} {where} GROUP BY thread_id",
            f"SELECT {stage} AS stage, COUNT(*) AS count FROM {self.table} {where} GROUP BY {stage}",
            f"SELECT MIN(created_at) AS oldest, MAX(created_at) AS newest FROM {self.table} {where}",
        ]
        totals, by_thread, by_stage, bounds = await asyncio.gather(
            *(self._query(s, params, "get statistics") for s in statements)
        )

        return CheckpointStatistics(
            total_checkpoints=int(totals[0]["total"]) if totals else 0,
            per_thread_counts={row["thread_id"]: int(row["count"]) for row in by_thread},
            per_stage_counts={
                str(row["stage"]): int(row["count"])
                for row in by_stage
                if row["stage"] is not None
            },
            oldest_timestamp=d.decode_timestamp(bounds[0]["oldest"]) if bounds else None,
            newest_timestamp=d.decode_timestamp(bounds[0]["newest"]) if bounds else None,
        )

    async def list_thread(self, thread_id: str) -> List[Checkpoint]:
        """
        List every checkpoint of a thread across namespaces, oldest first.

        Args:
            thread_id: Workflow instance identifier

        Returns:
            Checkpoints ordered by created_at ascending
        """
        self._require(thread_id, "thread_id")
        await self.initialize()
        d = self.dialect
        rows = await self._query(
            f"""
            SELECT {COLUMNS} FROM {self.table}
            WHERE thread_id = {d.param(1)}
            ORDER BY created_at ASC, checkpoint_ns ASC, checkpoint_id ASC
            """,
            (thread_id,),
            "list thread checkpoints",
        )
        return [self._to_checkpoint(self._row_to_record(row)) for row in rows]

    async def restore(self, checkpoint: Checkpoint) -> ResumptionHandle:
        """
        Write a complete checkpoint to the durable tier, keeping its timestamps.

        Used when importing backups. The cache is not populated.

        Args:
            checkpoint: Checkpoint as previously read or exported

        Returns:
            Resumption handle for the restored checkpoint
        """
        self._require(checkpoint.thread_id, "thread_id")
        self._require(checkpoint.checkpoint_id, "checkpoint_id")
        record = CheckpointRecord(
            thread_id=checkpoint.thread_id,
            namespace=checkpoint.namespace or "",
            checkpoint_id=checkpoint.checkpoint_id,
            parent_checkpoint_id=checkpoint.parent_checkpoint_id,
            type=checkpoint.type,
            checkpoint=self.codec.encode_payload(checkpoint.payload),
            metadata=self.codec.encode_metadata(checkpoint.metadata),
            created_at=to_utc(checkpoint.created_at),
            updated_at=to_utc(checkpoint.updated_at),
        )
        await self.initialize()
        await self._upsert(record, keep_created_at=False, action="restore checkpoint")
        return ResumptionHandle(
            thread_id=record.thread_id,
            namespace=record.namespace,
            checkpoint_id=record.checkpoint_id,
        )

    # -- Helpers --------------------------------------------------------------

    async def _query(
        self, statement: str, params: Sequence[Any], action: str
    ) -> List[Dict[str, Any]]:
        try:
            return await self.durable.query(statement, params)
        except PersistenceError as e:
            logger.error(f"Failed to {action}: {e}")
            raise

    async def _upsert(
        self, record: CheckpointRecord, keep_created_at: bool, action: str
    ) -> List[Dict[str, Any]]:
        d = self.dialect
        placeholders = [d.param(i) for i in range(1, 10)]
        placeholders[6] = d.json_param(7)
        updates = [
            "parent_checkpoint_id = EXCLUDED.parent_checkpoint_id",
            "type = EXCLUDED.type",
            "checkpoint = EXCLUDED.checkpoint",
            "metadata = EXCLUDED.metadata",
            "updated_at = EXCLUDED.updated_at",
        ]
        if not keep_created_at:
            updates.append("created_at = EXCLUDED.created_at")

        statement = f"""
            INSERT INTO {self.table} ({COLUMNS})
            VALUES ({", ".join(placeholders)})
            ON CONFLICT (thread_id, checkpoint_ns, checkpoint_id) DO UPDATE SET
                {", ".join(updates)}
            RETURNING created_at, updated_at
        """
        params = (
            record.thread_id,
            record.namespace,
            record.checkpoint_id,
            record.parent_checkpoint_id,
            record.type,
            record.checkpoint,
            record.metadata,
            d.encode_timestamp(record.created_at),
            d.encode_timestamp(record.updated_at),
        )
        return await self._query(statement, params, action)

    async def _write_cache(self, record: CheckpointRecord) -> None:
        try:
            await self.cache.set(
                self._cache_key(record.thread_id, record.namespace, record.checkpoint_id),
                record.model_dump_json(),
                self.cache_ttl,
            )
            await self.cache.hash_set(
                self._metadata_key(record.thread_id, record.namespace),
                record.checkpoint_id,
                record.metadata,
            )
        except Exception as e:
            logger.warning(f"Cache write failed for checkpoint {record.checkpoint_id}: {e}")

    async def _read_cache(
        self, thread_id: str, namespace: str, checkpoint_id: str
    ) -> Optional[Checkpoint]:
        try:
            data = await self.cache.get(self._cache_key(thread_id, namespace, checkpoint_id))
            if data is None:
                return None
            record = CheckpointRecord.model_validate_json(data)
            if (record.thread_id, record.namespace, record.checkpoint_id) != (
                thread_id,
                namespace,
                checkpoint_id,
            ):
                logger.warning(f"Cache entry for checkpoint {checkpoint_id} belongs to another key")
                return None
            return self._to_checkpoint(record)
        except Exception as e:
            logger.warning(f"Cache read failed for checkpoint {checkpoint_id}, using durable tier: {e}")
            return None

    def _row_to_record(self, row: Dict[str, Any]) -> CheckpointRecord:
        metadata = row["metadata"]
        if metadata is not None and not isinstance(metadata, str):
            metadata = self.codec.encode_metadata(metadata)
        return CheckpointRecord(
            thread_id=row["thread_id"],
            namespace=row["checkpoint_ns"] or "",
            checkpoint_id=row["checkpoint_id"],
            parent_checkpoint_id=row["parent_checkpoint_id"],
            type=row["type"],
            checkpoint=row["checkpoint"],
            metadata=metadata or "{}",
            created_at=self.dialect.decode_timestamp(row["created_at"]),
            updated_at=self.dialect.decode_timestamp(row["updated_at"]),
        )

    def _to_checkpoint(self, record: CheckpointRecord) -> Checkpoint:
        return Checkpoint(
            thread_id=record.thread_id,
            namespace=record.namespace,
            checkpoint_id=record.checkpoint_id,
            parent_checkpoint_id=record.parent_checkpoint_id,
            type=record.type,
            payload=self.codec.decode_payload(record.checkpoint),
            metadata=self.codec.decode_metadata(record.metadata),
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

    @staticmethod
    def _field_key(key: str) -> str:
        if not isinstance(key, str) or not FIELD_KEY_PATTERN.match(key):
            raise InvalidArgumentError(f"Invalid metadata filter key: {key!r}")
        return key

    @staticmethod
    def _as_timedelta(value: Union[timedelta, float]) -> timedelta:
        horizon = value if isinstance(value, timedelta) else timedelta(seconds=value)
        if horizon < timedelta(0):
            raise InvalidArgumentError("retention horizon must not be negative")
        return horizon


async def create_checkpoint_store(
    config: Optional[CheckpointConfig] = None,
    cache: Optional[CacheTier] = None,
    durable: Optional[DurableTier] = None,
    start_retention: bool = False,
) -> CheckpointStore:
    """
    Factory function to create an initialized checkpoint store.

    PATTERN: Create once at startup, share across workflow runs
    CRITICAL: Await store.close() on shutdown to stop retention and release pools

    Args:
        config: Store configuration (default: from environment)
        cache: Cache tier (default: Redis at config.redis_url)
        durable: Durable tier (default: PostgreSQL at config.database_url)
        start_retention: Start the background retention manager

    Returns:
        Initialized checkpoint store
    """
    config = config or CheckpointConfig()
    if cache is None:
        cache = RedisCacheTier(
            config.redis_url, max_connections=config.connection_pool_size
        )
    if durable is None:
        if not config.database_url:
            raise InvalidArgumentError("DATABASE_URL is required for the durable tier")
        durable = PostgresDurableTier(
            dsn=config.database_url,
            min_size=min(2, config.connection_pool_size),
            max_size=config.connection_pool_size,
        )

    store = CheckpointStore.from_config(config, cache=cache, durable=durable)
    await store.initialize()
    if start_retention:
        store.start_retention(config.cleanup_interval, config.retention_horizon)

    logger.info(f"Created checkpoint store (prefix={config.key_prefix}, table={store.table})")
    return store
