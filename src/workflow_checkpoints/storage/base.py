"""Abstract transport interfaces for the cache and durable tiers."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from .dialect import SqlDialect


class CacheTier(ABC):
    """
    Fast, ephemeral key-value store with TTL and hash fields.

    Carries no checkpoint logic. Implementations raise CacheTierError on
    I/O failures.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Get a value.

        Args:
            key: Cache key

        Returns:
            Stored value, or None if missing or expired
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """
        Store a value that expires after ttl_seconds.

        Args:
            key: Cache key
            value: Text value
            ttl_seconds: Time to live in seconds
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete a key. Returns True if it existed."""
        pass

    @abstractmethod
    async def hash_get(self, key: str, field: str) -> Optional[str]:
        """Get one field of a hash."""
        pass

    @abstractmethod
    async def hash_set(self, key: str, field: str, value: str) -> None:
        """Set one field of a hash."""
        pass

    @abstractmethod
    async def hash_delete(self, key: str, field: str) -> bool:
        """Delete one field of a hash. Returns True if it existed."""
        pass

    @abstractmethod
    async def hash_get_all(self, key: str) -> Dict[str, str]:
        """Get every field of a hash."""
        pass

    @abstractmethod
    async def list_keys(self, pattern: str) -> List[str]:
        """
        List keys matching a glob-style pattern.

        Args:
            pattern: Pattern such as ``prefix:checkpoint:*``

        Returns:
            Matching keys
        """
        pass

    async def close(self) -> None:
        """Release connections."""
        pass


class DurableTier(ABC):
    """
    Authoritative relational store.

    The checkpoint store builds every statement using ``dialect``; the tier
    only executes it. Implementations raise DurableTierError on I/O failures.
    """

    dialect: SqlDialect

    @abstractmethod
    async def query(
        self, statement: str, params: Sequence[Any] = ()
    ) -> List[Dict[str, Any]]:
        """
        Execute one statement.

        Args:
            statement: SQL using the dialect's placeholder style
            params: Positional parameters

        Returns:
            Result rows as dicts (empty for statements without RETURNING)
        """
        pass

    async def close(self) -> None:
        """Release connections."""
        pass
