"""In-process cache tier with TTL support."""

import fnmatch
import time
from typing import Callable, Dict, List, Optional, Tuple

from .base import CacheTier


class InMemoryCacheTier(CacheTier):
    """
    Dict-backed cache tier for tests and single-process deployments.

    PATTERN: Expiry is checked lazily on access, like the Redis semantics it stands in for
    GOTCHA: Hashes never expire, matching Redis HSET without EXPIRE
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._values: Dict[str, Tuple[str, float]] = {}
        self._hashes: Dict[str, Dict[str, str]] = {}

    def _live(self, key: str) -> Optional[str]:
        entry = self._values.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._values[key]
            return None
        return value

    async def get(self, key: str) -> Optional[str]:
        return self._live(key)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._values[key] = (value, self._clock() + ttl_seconds)

    async def delete(self, key: str) -> bool:
        existed = self._live(key) is not None
        self._values.pop(key, None)
        existed = self._hashes.pop(key, None) is not None or existed
        return existed

    async def hash_get(self, key: str, field: str) -> Optional[str]:
        return self._hashes.get(key, {}).get(field)

    async def hash_set(self, key: str, field: str, value: str) -> None:
        self._hashes.setdefault(key, {})[field] = value

    async def hash_delete(self, key: str, field: str) -> bool:
        fields = self._hashes.get(key)
        if not fields or field not in fields:
            return False
        del fields[field]
        if not fields:
            del self._hashes[key]
        return True

    async def hash_get_all(self, key: str) -> Dict[str, str]:
        return dict(self._hashes.get(key, {}))

    async def list_keys(self, pattern: str) -> List[str]:
        keys = [key for key in list(self._values) if self._live(key) is not None]
        keys.extend(self._hashes)
        return sorted(key for key in keys if fnmatch.fnmatchcase(key, pattern))

    def clear(self) -> None:
        """Drop every key (for testing)."""
        self._values.clear()
        self._hashes.clear()
