"""Unit tests for checkpoint configuration."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from workflow_checkpoints.config.checkpoint_config import CheckpointConfig


class TestCheckpointConfig:
    """Test suite for CheckpointConfig."""

    def test_defaults(self, monkeypatch):
        """Test defaults when no environment variables are set."""
        for name in (
            "REDIS_URL",
            "CHECKPOINT_KEY_PREFIX",
            "CHECKPOINT_CACHE_TTL",
            "DATABASE_URL",
            "CHECKPOINT_TABLE",
            "CHECKPOINT_SCHEMA",
            "CHECKPOINT_COMPRESSION",
            "CHECKPOINT_RETENTION_HOURS",
            "CHECKPOINT_CLEANUP_INTERVAL",
            "CONNECTION_POOL_SIZE",
        ):
            monkeypatch.delenv(name, raising=False)

        config = CheckpointConfig()

        assert config.redis_url == "redis://localhost:6379/0"
        assert config.key_prefix == "workflow"
        assert config.cache_ttl == 3600
        assert config.database_url is None
        assert config.table_name == "workflow_checkpoints"
        assert config.schema_name == "public"
        assert config.enable_compression is True
        assert config.retention_horizon == timedelta(hours=24)
        assert config.cleanup_interval == 86400
        assert config.connection_pool_size == 10

    def test_environment_overrides(self, monkeypatch):
        """Test values are read from the environment."""
        monkeypatch.setenv("REDIS_URL", "redis://cache:6379/2")
        monkeypatch.setenv("CHECKPOINT_CACHE_TTL", "120")
        monkeypatch.setenv("DATABASE_URL", "postgresql://db/app")
        monkeypatch.setenv("CHECKPOINT_COMPRESSION", "false")
        monkeypatch.setenv("CHECKPOINT_RETENTION_HOURS", "1.5")

        config = CheckpointConfig()

        assert config.redis_url == "redis://cache:6379/2"
        assert config.cache_ttl == 120
        assert config.database_url == "postgresql://db/app"
        assert config.enable_compression is False
        assert config.retention_horizon == timedelta(minutes=90)

    def test_rejects_unsafe_table_name(self):
        """Test table names must be SQL identifiers."""
        with pytest.raises(ValidationError):
            CheckpointConfig(table_name="checkpoints; DROP TABLE users")

    def test_rejects_non_positive_ttl(self):
        """Test the cache TTL must be positive."""
        with pytest.raises(ValidationError):
            CheckpointConfig(cache_ttl=0)
