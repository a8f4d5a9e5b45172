"""Services package for checkpoint persistence."""

from .checkpoint_service import CheckpointStore, create_checkpoint_store
from .retention_service import RetentionManager
from .backup_service import CheckpointBackup

__all__ = [
    "CheckpointStore",
    "create_checkpoint_store",
    "RetentionManager",
    "CheckpointBackup",
]
