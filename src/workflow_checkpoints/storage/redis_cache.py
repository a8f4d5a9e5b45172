"""Redis-based cache tier for fast checkpoint access with TTL."""

import asyncio
import logging
import time
from typing import Dict, List, Optional
from redis.asyncio import Redis, ConnectionPool
from redis.exceptions import RedisError, ConnectionError as RedisConnectionError

from .base import CacheTier
from ..errors import CacheTierError

logger = logging.getLogger(__name__)


class RedisCacheTier(CacheTier):
    """Redis cache tier with connection pooling and lazy connection."""

    def __init__(
        self,
        redis_url: str,
        max_connections: int = 10,
        connect_retries: int = 1,
        connect_timeout: float = 0.5,
        retry_backoff: float = 5.0,
        redis: Optional[Redis] = None,
    ):
        """
        Initialize Redis cache tier.

        Args:
            redis_url: Redis connection URL
            max_connections: Connection pool size
            connect_retries: Ping attempts before giving up on a connect
            connect_timeout: Socket connect timeout in seconds
            retry_backoff: Seconds to fail fast after a failed connect
            redis: Existing client to use instead of building a pool
        """
        self.redis_url = redis_url
        self.max_connections = max_connections
        self.connect_retries = connect_retries
        self.connect_timeout = connect_timeout
        self.retry_backoff = retry_backoff
        self._pool: Optional[ConnectionPool] = None
        self._redis: Optional[Redis] = redis
        self._owns_client = redis is None
        self._retry_after = 0.0

    async def _get_redis(self) -> Redis:
        """
        Get Redis client with connection pooling and retry logic.

        GOTCHA: After a failed connect, calls fail immediately until retry_backoff
        elapses, so an outage costs one connect attempt rather than one per request

        Returns:
            Redis async client
        """
        if self._redis is None:
            if time.monotonic() < self._retry_after:
                raise CacheTierError("Redis unavailable, skipping until backoff expires")

            self._pool = ConnectionPool.from_url(
                self.redis_url,
                max_connections=self.max_connections,
                decode_responses=True,
                socket_connect_timeout=self.connect_timeout,
            )
            self._redis = Redis(connection_pool=self._pool)

            for attempt in range(self.connect_retries):
                try:
                    await self._redis.ping()
                    logger.info("Redis connection established successfully")
                    break
                except (RedisConnectionError, RedisError) as e:
                    if attempt == self.connect_retries - 1:
                        logger.error(
                            f"Failed to connect to Redis after {self.connect_retries} attempts: {e}"
                        )
                        self._retry_after = time.monotonic() + self.retry_backoff
                        await self.close()
                        raise CacheTierError(f"Redis unavailable: {e}") from e
                    logger.warning(
                        f"Redis connection attempt {attempt + 1} failed, retrying..."
                    )
                    await asyncio.sleep(1)

        return self._redis

    async def get(self, key: str) -> Optional[str]:
        redis = await self._get_redis()
        try:
            return await redis.get(key)
        except RedisError as e:
            raise CacheTierError(f"Redis GET {key} failed: {e}") from e

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        redis = await self._get_redis()
        try:
            await redis.setex(key, ttl_seconds, value)
        except RedisError as e:
            raise CacheTierError(f"Redis SETEX {key} failed: {e}") from e

    async def delete(self, key: str) -> bool:
        redis = await self._get_redis()
        try:
            return await redis.delete(key) > 0
        except RedisError as e:
            raise CacheTierError(f"Redis DEL {key} failed: {e}") from e

    async def hash_get(self, key: str, field: str) -> Optional[str]:
        redis = await self._get_redis()
        try:
            return await redis.hget(key, field)
        except RedisError as e:
            raise CacheTierError(f"Redis HGET {key} {field} failed: {e}") from e

    async def hash_set(self, key: str, field: str, value: str) -> None:
        redis = await self._get_redis()
        try:
            await redis.hset(key, field, value)
        except RedisError as e:
            raise CacheTierError(f"Redis HSET {key} {field} failed: {e}") from e

    async def hash_delete(self, key: str, field: str) -> bool:
        redis = await self._get_redis()
        try:
            return await redis.hdel(key, field) > 0
        except RedisError as e:
            raise CacheTierError(f"Redis HDEL {key} {field} failed: {e}") from e

    async def hash_get_all(self, key: str) -> Dict[str, str]:
        redis = await self._get_redis()
        try:
            return await redis.hgetall(key)
        except RedisError as e:
            raise CacheTierError(f"Redis HGETALL {key} failed: {e}") from e

    async def list_keys(self, pattern: str) -> List[str]:
        # SCAN rather than KEYS so large keyspaces do not block the server
        redis = await self._get_redis()
        try:
            return [key async for key in redis.scan_iter(match=pattern, count=100)]
        except RedisError as e:
            raise CacheTierError(f"Redis SCAN {pattern} failed: {e}") from e

    async def close(self) -> None:
        """Close Redis connection."""
        if self._redis and self._owns_client:
            await self._redis.aclose()
            self._redis = None
        if self._pool:
            await self._pool.aclose()
            self._pool = None
        logger.info("Redis connection closed")
