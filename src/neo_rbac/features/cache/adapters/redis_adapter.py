"""Redis cache backend adapter for neo-rbac."""

import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from ....core.exceptions import CacheUnavailableError

logger = logging.getLogger(__name__)


class RedisCacheAdapter:
    """CacheBackend implementation on top of ``redis.asyncio``."""

    def __init__(self, client: redis.Redis):
        self.client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisCacheAdapter":
        """Create an adapter with a client built from a redis URL."""
        return cls(redis.from_url(url, decode_responses=True))

    async def get(self, key: str) -> Optional[str]:
        try:
            value = await self.client.get(key)
        except (RedisError, OSError) as e:
            raise CacheUnavailableError(f"Redis GET failed: {e}", details={"key": key}) from e
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str, ttl: int) -> None:
        try:
            await self.client.set(key, value, ex=ttl)
        except (RedisError, OSError) as e:
            raise CacheUnavailableError(f"Redis SET failed: {e}", details={"key": key}) from e

    async def delete(self, *keys: str) -> int:
        """Delete keys in a single pipeline round-trip."""
        if not keys:
            return 0
        try:
            async with self.client.pipeline(transaction=False) as pipe:
                for key in keys:
                    pipe.delete(key)
                results = await pipe.execute()
        except (RedisError, OSError) as e:
            raise CacheUnavailableError(f"Redis DEL failed: {e}", details={"keys": list(keys)}) from e
        return sum(int(r) for r in results)

    async def close(self) -> None:
        await self.client.aclose()
