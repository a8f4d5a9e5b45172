"""Storage tiers and codec for checkpoint persistence."""

from .base import CacheTier, DurableTier
from .codec import CheckpointCodec
from .dialect import POSTGRES, SQLITE, PostgresDialect, SqlDialect, SQLiteDialect
from .memory_cache import InMemoryCacheTier
from .postgres import PostgresDurableTier
from .redis_cache import RedisCacheTier
from .sqlite import SQLiteDurableTier

__all__ = [
    "CacheTier",
    "DurableTier",
    "CheckpointCodec",
    "SqlDialect",
    "PostgresDialect",
    "SQLiteDialect",
    "POSTGRES",
    "SQLITE",
    "InMemoryCacheTier",
    "RedisCacheTier",
    "PostgresDurableTier",
    "SQLiteDurableTier",
]
