"""
Redis storage backend.
Each collection is a Redis hash "<prefix>:<collection>", values are JSON strings.
"""
import json
import logging
from typing import Any, Dict, Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from dlmm_bot.storage.base import StoreBackend

logger = logging.getLogger(__name__)


class RedisBackend(StoreBackend):
    """Networked backend, may be unavailable"""

    name = "redis"

    def __init__(self, client: aioredis.Redis, prefix: str = "dlmm"):
        self.client = client
        self.prefix = prefix

    @classmethod
    def from_url(cls, url: str, prefix: str = "dlmm", timeout: float = 5.0) -> "RedisBackend":
        client = aioredis.from_url(
            url,
            decode_responses=True,
            socket_connect_timeout=timeout,
            socket_timeout=timeout,
        )
        return cls(client, prefix=prefix)

    def _hash_name(self, collection: str) -> str:
        return f"{self.prefix}:{collection}"

    async def connect(self) -> bool:
        try:
            await self.client.ping()
        except (RedisError, OSError) as e:
            logger.warning(f"Redis is unavailable: {e}")
            return False
        logger.info("Connected to Redis")
        return True

    async def get(self, collection: str, key: str) -> Optional[Any]:
        raw = await self.client.hget(self._hash_name(collection), str(key))
        return json.loads(raw) if raw is not None else None

    async def set(self, collection: str, key: str, value: Any) -> None:
        await self.client.hset(self._hash_name(collection), str(key), json.dumps(value, default=str))

    async def delete(self, collection: str, key: str) -> None:
        await self.client.hdel(self._hash_name(collection), str(key))

    async def items(self, collection: str) -> Dict[str, Any]:
        raw_items = await self.client.hgetall(self._hash_name(collection))
        return {key: json.loads(raw) for key, raw in raw_items.items()}

    async def close(self) -> None:
        await self.client.aclose()
