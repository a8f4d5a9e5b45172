"""Thread-scoped export and import of checkpoints as JSON Lines."""

import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from ..errors import InvalidArgumentError
from ..models.checkpoint_models import Checkpoint
from .checkpoint_service import CheckpointStore

logger = logging.getLogger(__name__)


class CheckpointBackup:
    """Backup and restore hooks for one checkpoint store."""

    def __init__(self, store: CheckpointStore):
        self.store = store

    async def export_thread(self, thread_id: str, output_path: Union[str, Path]) -> int:
        """
        Export every checkpoint of a thread, across namespaces.

        Args:
            thread_id: Thread to export
            output_path: Destination file (overwritten)

        Returns:
            Number of checkpoints written
        """
        checkpoints = await self.store.list_thread(thread_id)
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with path.open("w", encoding="utf-8") as f:
            for checkpoint in checkpoints:
                f.write(checkpoint.model_dump_json())
                f.write("\n")

        logger.info(f"Exported {len(checkpoints)} checkpoints for thread {thread_id} to {path}")
        return len(checkpoints)

    async def import_file(
        self,
        input_path: Union[str, Path],
        thread_id: Optional[str] = None,
    ) -> int:
        """
        Import checkpoints from an export file.

        Existing checkpoints with the same key are overwritten, keeping the
        exported timestamps.

        Args:
            input_path: File written by export_thread
            thread_id: Only import this thread's checkpoints (default: all)

        Returns:
            Number of checkpoints imported
        """
        path = Path(input_path)
        checkpoints = []
        with path.open("r", encoding="utf-8") as f:
            for line_number, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                try:
                    checkpoint = Checkpoint.model_validate_json(line)
                except ValidationError as e:
                    raise InvalidArgumentError(
                        f"Malformed checkpoint on line {line_number} of {path}: {e}"
                    ) from e
                if thread_id is None or checkpoint.thread_id == thread_id:
                    checkpoints.append(checkpoint)

        for checkpoint in checkpoints:
            await self.store.restore(checkpoint)

        logger.info(f"Imported {len(checkpoints)} checkpoints from {path}")
        return len(checkpoints)
