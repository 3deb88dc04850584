"""Redis cache layer for link records."""

import json
import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from .models import Link


class RedisCache:
    """Read-through cache of link records keyed by short ID.

    Only the stored record is cached. Whether a link has expired is decided
    by the caller on every lookup.
    """

    KEY_PREFIX = "qrlink:link:"

    def __init__(
        self,
        redis_url: Optional[str] = None,
        ttl_seconds: int = 3600,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize Redis cache.

        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379/0)
            ttl_seconds: TTL for cached records
            logger: Optional logger instance
        """
        self.redis_url = redis_url
        self.ttl_seconds = ttl_seconds
        self.logger = logger or logging.getLogger(__name__)
        self.enabled = redis_url is not None
        self.client: Optional[redis.Redis] = None

    async def connect(self) -> None:
        """Connect to Redis. Caching is disabled if the server is unreachable."""
        if not self.enabled:
            return

        try:
            self.client = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            await self.client.ping()
            self.logger.info(f"Connected to Redis, record TTL={self.ttl_seconds}s")
        except (RedisError, OSError) as e:
            self.logger.error(f"Failed to connect to Redis: {e}")
            self.enabled = False

    def get_cache_key(self, short_id: str) -> str:
        return f"{self.KEY_PREFIX}{short_id}"

    async def get_link(self, short_id: str) -> Optional[Link]:
        """Get a cached link record, or None on miss or error."""
        if not self.enabled or not self.client:
            return None

        try:
            raw = await self.client.get(self.get_cache_key(short_id))
        except (RedisError, OSError) as e:
            self.logger.error(f"Cache get error: {e}")
            return None

        if raw is None:
            return None

        try:
            return Link.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            self.logger.warning(f"Discarding malformed cache entry for {short_id}: {e}")
            await self.delete(short_id)
            return None

    async def set_link(self, link: Link) -> bool:
        """Cache a link record. Returns True if stored."""
        if not self.enabled or not self.client:
            return False

        try:
            await self.client.setex(
                self.get_cache_key(link.short_id),
                self.ttl_seconds,
                json.dumps(link.to_dict()),
            )
            return True
        except (RedisError, OSError) as e:
            self.logger.error(f"Cache set error: {e}")
            return False

    async def delete(self, short_id: str) -> bool:
        """Drop a cached record. Returns True if a key was removed."""
        if not self.enabled or not self.client:
            return False

        try:
            return await self.client.delete(self.get_cache_key(short_id)) > 0
        except (RedisError, OSError) as e:
            self.logger.error(f"Cache delete error: {e}")
            return False

    async def ping(self) -> bool:
        if not self.enabled or not self.client:
            return False
        try:
            return bool(await self.client.ping())
        except (RedisError, OSError) as e:
            self.logger.error(f"Cache ping failed: {e}")
            return False

    async def close(self) -> None:
        """Close Redis connection."""
        if self.client:
            await self.client.aclose()
            self.client = None
            self.logger.info("Redis connection closed")
