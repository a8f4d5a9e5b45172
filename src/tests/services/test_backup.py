"""Unit tests for checkpoint backup and restore."""

import json

import pytest

from workflow_checkpoints.errors import InvalidArgumentError
from workflow_checkpoints.models.checkpoint_models import CheckpointData
from workflow_checkpoints.services.backup_service import CheckpointBackup


@pytest.mark.asyncio
class TestCheckpointBackup:
    """Test suite for CheckpointBackup."""

    async def _seed(self, store):
        await store.put("T1", "", CheckpointData(checkpoint_id="c1", payload={"step": 1}), {"stage": "a"})
        await store.put(
            "T1",
            "sub",
            CheckpointData(checkpoint_id="c2", parent_checkpoint_id="c1", payload={"step": 2}),
            {"stage": "b"},
        )
        await store.put("T2", "", CheckpointData(checkpoint_id="c1", payload="other"))

    async def test_export_writes_json_lines(self, store, tmp_path):
        """Test export writes one checkpoint per line for the thread."""
        await self._seed(store)
        path = tmp_path / "backups" / "T1.jsonl"

        count = await CheckpointBackup(store).export_thread("T1", path)

        lines = path.read_text(encoding="utf-8").splitlines()
        assert count == 2
        assert [json.loads(line)["checkpoint_id"] for line in lines] == ["c1", "c2"]
        assert json.loads(lines[1])["namespace"] == "sub"

    async def test_export_import_round_trip(self, store, cache, tmp_path):
        """Test imported checkpoints equal the exported ones."""
        await self._seed(store)
        backup = CheckpointBackup(store)
        path = tmp_path / "T1.jsonl"
        await backup.export_thread("T1", path)
        exported = await store.list_thread("T1")

        for checkpoint in exported:
            await store.delete(checkpoint.thread_id, checkpoint.namespace, checkpoint.checkpoint_id)
        assert await store.list_thread("T1") == []

        assert await backup.import_file(path) == 2
        cache.clear()
        assert await store.list_thread("T1") == exported

    async def test_import_filters_by_thread(self, store, tmp_path):
        """Test import can be restricted to one thread."""
        await self._seed(store)
        backup = CheckpointBackup(store)
        path = tmp_path / "T1.jsonl"
        await backup.export_thread("T1", path)

        assert await backup.import_file(path, thread_id="T9") == 0

    async def test_import_rejects_malformed_line(self, store, tmp_path):
        """Test a malformed line names its line number."""
        path = tmp_path / "bad.jsonl"
        path.write_text('{"thread_id": "T1"}\n', encoding="utf-8")

        with pytest.raises(InvalidArgumentError, match="line 1"):
            await CheckpointBackup(store).import_file(path)

    async def test_export_empty_thread(self, store, tmp_path):
        """Test exporting an unknown thread writes an empty file."""
        path = tmp_path / "empty.jsonl"

        assert await CheckpointBackup(store).export_thread("nope", path) == 0
        assert path.read_text(encoding="utf-8") == ""
