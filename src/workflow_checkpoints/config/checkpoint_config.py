"""Checkpoint store configuration with environment variable loading."""

import os
from datetime import timedelta
from typing import Optional
from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class CheckpointConfig(BaseModel):
    """Configuration for the two-tier checkpoint store."""

    # Cache tier
    redis_url: str = Field(
        default_factory=lambda: os.getenv("REDIS_URL", "redis://localhost:6379/0"),
        description="Redis connection URL",
    )
    key_prefix: str = Field(
        default_factory=lambda: os.getenv("CHECKPOINT_KEY_PREFIX", "workflow"),
        min_length=1,
        description="Prefix for every cache key",
    )
    cache_ttl: int = Field(
        default_factory=lambda: int(os.getenv("CHECKPOINT_CACHE_TTL", "3600")),
        gt=0,
        description="TTL for cached checkpoints (seconds)",
    )

    # Durable tier
    database_url: Optional[str] = Field(
        default_factory=lambda: os.getenv("DATABASE_URL"),
        description="PostgreSQL connection URL",
    )
    table_name: str = Field(
        default_factory=lambda: os.getenv("CHECKPOINT_TABLE", "workflow_checkpoints"),
        pattern=r"^[A-Za-z_][A-Za-z0-9_]*$",
        description="Durable table holding checkpoints",
    )
    schema_name: str = Field(
        default_factory=lambda: os.getenv("CHECKPOINT_SCHEMA", "public"),
        pattern=r"^[A-Za-z_][A-Za-z0-9_]*$",
        description="PostgreSQL schema for the checkpoint table",
    )

    # Codec
    enable_compression: bool = Field(
        default_factory=lambda: _env_flag("CHECKPOINT_COMPRESSION", "true"),
        description="Compress checkpoint payloads with zlib",
    )

    # Retention
    retention_hours: float = Field(
        default_factory=lambda: float(os.getenv("CHECKPOINT_RETENTION_HOURS", "24")),
        gt=0,
        description="Maximum checkpoint age before cleanup",
    )
    cleanup_interval: float = Field(
        default_factory=lambda: float(
            os.getenv("CHECKPOINT_CLEANUP_INTERVAL", str(24 * 60 * 60))
        ),
        gt=0,
        description="Seconds between retention cleanup cycles",
    )

    # Performance Configuration
    connection_pool_size: int = Field(
        default_factory=lambda: int(os.getenv("CONNECTION_POOL_SIZE", "10")),
        ge=1,
        description="Connection pool size for Redis and PostgreSQL",
    )

    @property
    def retention_horizon(self) -> timedelta:
        """Retention horizon as a timedelta."""
        return timedelta(hours=self.retention_hours)
