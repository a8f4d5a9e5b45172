"""Data models for the checkpoint store."""

from .checkpoint_models import (
    DEFAULT_CHECKPOINT_TYPE,
    Checkpoint,
    CheckpointData,
    CheckpointRecord,
    CheckpointStatistics,
    ResumptionHandle,
)

__all__ = [
    "DEFAULT_CHECKPOINT_TYPE",
    "Checkpoint",
    "CheckpointData",
    "CheckpointRecord",
    "CheckpointStatistics",
    "ResumptionHandle",
]
