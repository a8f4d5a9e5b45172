"""
Two-tier checkpoint persistence for long-running, resumable workflows.

Example usage:
    from workflow_checkpoints import CheckpointData, create_checkpoint_store

    store = await create_checkpoint_store(start_retention=True)
    handle = await store.put("thread-1", "", CheckpointData(checkpoint_id="c1", payload={"step": 1}))
    checkpoint = await store.get("thread-1", "", handle.checkpoint_id)
    await store.close()
"""

from .config.checkpoint_config import CheckpointConfig
from .errors import (
    CacheTierError,
    CheckpointError,
    DurableTierError,
    InvalidArgumentError,
    PersistenceError,
)
from .models.checkpoint_models import (
    Checkpoint,
    CheckpointData,
    CheckpointStatistics,
    ResumptionHandle,
)
from .services import (
    CheckpointBackup,
    CheckpointStore,
    RetentionManager,
    create_checkpoint_store,
)
from .storage import (
    CacheTier,
    CheckpointCodec,
    DurableTier,
    InMemoryCacheTier,
    PostgresDurableTier,
    RedisCacheTier,
    SQLiteDurableTier,
)

__all__ = [
    "CheckpointConfig",
    "CheckpointError",
    "InvalidArgumentError",
    "PersistenceError",
    "CacheTierError",
    "DurableTierError",
    "Checkpoint",
    "CheckpointData",
    "CheckpointStatistics",
    "ResumptionHandle",
    "CheckpointStore",
    "create_checkpoint_store",
    "RetentionManager",
    "CheckpointBackup",
    "CacheTier",
    "DurableTier",
    "CheckpointCodec",
    "InMemoryCacheTier",
    "RedisCacheTier",
    "PostgresDurableTier",
    "SQLiteDurableTier",
]
