"""Configuration for the checkpoint store."""

from .checkpoint_config import CheckpointConfig

__all__ = ["CheckpointConfig"]
