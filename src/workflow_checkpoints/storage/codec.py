"""JSON codec with optional zlib compression for checkpoint payloads."""

import base64
import json
import logging
import zlib
from typing import Any, Dict

from ..errors import InvalidArgumentError, PersistenceError

logger = logging.getLogger(__name__)

COMPRESSED_PREFIX = "zlib:"


class CheckpointCodec:
    """
    Serializes checkpoint payloads and metadata to text.

    Compressed payloads are base64 text tagged with a ``zlib:`` prefix. Plain
    JSON never starts with that prefix, so decoding does not depend on the
    current compression setting.
    """

    def __init__(self, enable_compression: bool = True, compression_level: int = 6):
        self.enable_compression = enable_compression
        self.compression_level = compression_level

    def encode_payload(self, payload: Any) -> str:
        text = self._dumps(payload, "payload")
        if not self.enable_compression:
            return text
        compressed = zlib.compress(text.encode("utf-8"), self.compression_level)
        return COMPRESSED_PREFIX + base64.b64encode(compressed).decode("ascii")

    def decode_payload(self, data: str) -> Any:
        if data.startswith(COMPRESSED_PREFIX):
            try:
                raw = base64.b64decode(data[len(COMPRESSED_PREFIX):])
                data = zlib.decompress(raw).decode("utf-8")
            except (ValueError, zlib.error) as e:
                raise PersistenceError(f"Corrupt compressed payload: {e}") from e
        return self._loads(data, "payload")

    def encode_metadata(self, metadata: Dict[str, Any]) -> str:
        # Metadata stays plain JSON so the durable tier can filter on it
        return self._dumps(metadata or {}, "metadata")

    def decode_metadata(self, data: Any) -> Dict[str, Any]:
        if data is None:
            return {}
        if isinstance(data, dict):
            return data
        return self._loads(data, "metadata")

    @staticmethod
    def _dumps(value: Any, what: str) -> str:
        try:
            return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f"Checkpoint {what} is not JSON serializable: {e}") from e

    @staticmethod
    def _loads(data: str, what: str) -> Any:
        try:
            return json.loads(data)
        except ValueError as e:
            logger.error(f"Failed to decode checkpoint {what}: {e}")
            raise PersistenceError(f"Corrupt checkpoint {what}: {e}") from e
