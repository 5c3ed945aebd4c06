"""Usage counter implementations."""

import redis.asyncio as redis
from loguru import logger
from redis.exceptions import RedisError

from ..exceptions import StorageError


class LocalCounter:
    """In-process counter.

    Lives only as long as the process and is not shared between workers.
    """

    def __init__(self, initial: int = 0) -> None:
        self.value = initial

    async def startup(self) -> None:
        """No initialization needed."""
        pass

    async def shutdown(self) -> None:
        """No cleanup needed."""
        pass

    async def read(self) -> int:
        return self.value

    async def increment(self) -> int:
        self.value += 1
        return self.value

    async def health_check(self) -> bool:
        return True


class RedisCounter:
    """Durable counter backed by a Redis-compatible key-value store."""

    def __init__(self, redis_url: str, key: str) -> None:
        """Initialize Redis counter.

        Args:
            redis_url: Redis connection URL.
            key: Key holding the counter value.
        """
        self.redis_url = redis_url
        self.key = key
        self.redis: redis.Redis | None = None

    async def startup(self) -> None:
        """Create the Redis client and check the connection."""
        self.redis = redis.from_url(self.redis_url, decode_responses=True)
        try:
            await self.redis.ping()
            logger.info("Redis counter connected")
        except RedisError as e:
            logger.warning(f"Redis counter not reachable at startup: {e}")

    async def shutdown(self) -> None:
        """Close Redis connection."""
        if self.redis:
            try:
                await self.redis.aclose()
            except RedisError as e:
                raise StorageError(f"Failed to close Redis connection: {e}") from e
            finally:
                self.redis = None

    def _client(self) -> redis.Redis:
        if self.redis is None:
            raise StorageError("Redis counter used before startup")
        return self.redis

    async def read(self) -> int:
        """Get the current count; a missing key reads as 0."""
        try:
            value = await self._client().get(self.key)
        except RedisError as e:
            logger.error(f"Counter read failed: {e}")
            raise StorageError(f"Failed to read counter: {e}") from e
        return int(value) if value else 0

    async def increment(self) -> int:
        """Atomically increment the count with INCR."""
        try:
            return int(await self._client().incr(self.key))
        except RedisError as e:
            logger.error(f"Counter increment failed: {e}")
            raise StorageError(f"Failed to increment counter: {e}") from e

    async def health_check(self) -> bool:
        try:
            return bool(await self._client().ping())
        except (RedisError, StorageError) as e:
            logger.warning(f"Redis counter health check failed: {e}")
            return False
