import json
import logging
from typing import Any, Optional

import redis

from celltech.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

redis_client = redis.from_url(settings.REDIS_URL, decode_responses=True)


class CacheService:
    """
    Thin Redis wrapper used for read-through caching of product details.

    Every method degrades to a cache miss (or a no-op) when Redis is
    unreachable, so the API keeps serving from the database.
    """

    def __init__(self, client: redis.Redis = None, ttl: int = None):
        self.client = client or redis_client
        self.ttl = ttl or settings.CACHE_TTL

    def _make_key(self, prefix: str, key: str) -> str:
        return f"{prefix}:{key}"

    def get(self, prefix: str, key: str) -> Optional[Any]:
        """Return the decoded value stored under ``prefix:key`` or None."""
        cache_key = self._make_key(prefix, key)
        try:
            value = self.client.get(cache_key)
            if value:
                return json.loads(value)
            return None
        except (redis.RedisError, json.JSONDecodeError) as e:
            logger.warning(f"Cache read failed for {cache_key}: {e}")
            return None

    def set(self, prefix: str, key: str, value: Any, ttl: int = None) -> bool:
        """
        Store a JSON-serializable value with a TTL.

        Args:
            prefix: Cache key prefix (e.g., 'product')
            key: Unique identifier
            value: Value to cache
            ttl: Time to live in seconds, defaults to CACHE_TTL

        Returns:
            True if the value was written
        """
        cache_key = self._make_key(prefix, key)
        try:
            serialized = json.dumps(value, default=str)
            self.client.setex(cache_key, ttl or self.ttl, serialized)
            return True
        except (redis.RedisError, TypeError) as e:
            logger.warning(f"Cache write failed for {cache_key}: {e}")
            return False

    def delete(self, prefix: str, key: str) -> bool:
        cache_key = self._make_key(prefix, key)
        try:
            self.client.delete(cache_key)
            return True
        except redis.RedisError as e:
            logger.warning(f"Cache delete failed for {cache_key}: {e}")
            return False

    def delete_many(self, prefix: str, keys: list) -> int:
        """Delete several keys under one prefix, returning how many were removed."""
        if not keys:
            return 0
        try:
            return self.client.delete(*[self._make_key(prefix, str(k)) for k in keys])
        except redis.RedisError as e:
            logger.warning(f"Cache delete failed for {prefix} keys {keys}: {e}")
            return 0


cache_service = CacheService()
