"""Checkpoint data models for state persistence."""

from pydantic import BaseModel, Field
from typing import Any, Dict, Optional
from datetime import datetime

DEFAULT_CHECKPOINT_TYPE = "checkpoint"


class CheckpointData(BaseModel):
    """Snapshot supplied by the workflow runtime at a suspension point."""

    checkpoint_id: str = Field(description="Caller-supplied snapshot identifier")
    payload: Any = Field(default=None, description="Opaque serializable state")
    parent_checkpoint_id: Optional[str] = Field(
        default=None, description="Checkpoint this one resumed or branched from"
    )
    type: str = Field(default=DEFAULT_CHECKPOINT_TYPE, description="Opaque type tag")


class Checkpoint(BaseModel):
    """Durable snapshot of one workflow instance's state."""

    thread_id: str
    namespace: str = ""
    checkpoint_id: str
    parent_checkpoint_id: Optional[str] = None
    type: str = DEFAULT_CHECKPOINT_TYPE
    payload: Any = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime


class CheckpointRecord(BaseModel):
    """Encoded form of a checkpoint, as held by the cache and durable tiers."""

    thread_id: str
    namespace: str = ""
    checkpoint_id: str
    parent_checkpoint_id: Optional[str] = None
    type: str = DEFAULT_CHECKPOINT_TYPE
    checkpoint: str = Field(description="Encoded (optionally compressed) payload")
    metadata: str = Field(description="Encoded metadata JSON")
    created_at: datetime
    updated_at: datetime


class ResumptionHandle(BaseModel):
    """Handle returned by put, identifying the checkpoint to resume from."""

    thread_id: str
    namespace: str = ""
    checkpoint_id: str

    def to_config(self) -> Dict[str, Any]:
        """Runnable-style config mapping understood by workflow runtimes."""
        return {
            "configurable": {
                "thread_id": self.thread_id,
                "checkpoint_ns": self.namespace,
                "checkpoint_id": self.checkpoint_id,
            }
        }


class CheckpointStatistics(BaseModel):
    """Aggregate view of the durable tier."""

    total_checkpoints: int = 0
    per_thread_counts: Dict[str, int] = Field(default_factory=dict)
    per_stage_counts: Dict[str, int] = Field(default_factory=dict)
    oldest_timestamp: Optional[datetime] = None
    newest_timestamp: Optional[datetime] = None
