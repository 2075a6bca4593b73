"""
Generated Document Cache - ephemeral resume / cover letter text

Generated documents are derived text, not durable records: they live only
in Redis with a TTL and never reach the relational store, so they do not
survive a cache flush. Saving the same key again overwrites it.

Key Pattern:
    doc:{owner_id}:{application_id}:{kind}

Degrades gracefully when Redis is unavailable: reads miss, writes report
False, and a warning is logged.

Usage:
    cache = await get_document_cache()
    await cache.save(user.id, application_id, DocumentKind.RESUME, text)
    text = await cache.get(user.id, application_id, DocumentKind.RESUME)
"""

import logging
from typing import Dict, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from autoapply.config import get_settings
from autoapply.schemas import DocumentKind

logger = logging.getLogger(__name__)


def document_key(owner_id: str, application_id: str, kind: DocumentKind) -> str:
    return f"doc:{owner_id}:{application_id}:{DocumentKind(kind).value}"


class GeneratedDocumentCache:
    """
    Redis-backed store for generated document text.

    Attributes:
        redis: Async Redis client, created lazily
        ttl: Seconds a saved document is kept
        stats: Hit / miss counters
    """

    def __init__(self, redis_url: str, ttl: int):
        self.redis_url = redis_url
        self.ttl = ttl
        self.redis: Optional[redis.Redis] = None
        self.stats: Dict[str, int] = {"hits": 0, "misses": 0}

    async def _ensure_connected(self) -> Optional[redis.Redis]:
        if self.redis is None:
            try:
                self.redis = redis.from_url(
                    self.redis_url,
                    encoding="utf-8",
                    decode_responses=True
                )
            except (RedisError, ValueError) as e:
                logger.warning(f"Failed to connect to Redis: {e}")
                return None
        return self.redis

    async def get(self, owner_id: str, application_id: str, kind: DocumentKind) -> Optional[str]:
        """Cached document text, or None on miss / Redis error."""
        try:
            client = await self._ensure_connected()
            if not client:
                return None

            cached = await client.get(document_key(owner_id, application_id, kind))
        except RedisError as e:
            logger.warning(f"Redis get error (documents): {e}")
            self.stats["misses"] += 1
            return None

        if cached is None:
            self.stats["misses"] += 1
            return None

        self.stats["hits"] += 1
        return cached

    async def save(self, owner_id: str, application_id: str, kind: DocumentKind, content: str) -> bool:
        """Store (or overwrite) document text. False when Redis is unavailable."""
        try:
            client = await self._ensure_connected()
            if not client:
                return False

            await client.setex(document_key(owner_id, application_id, kind), self.ttl, content)
            return True
        except RedisError as e:
            logger.warning(f"Redis set error (documents): {e}")
            return False

    async def discard(self, owner_id: str, application_id: str) -> int:
        """Drop every document kind for an application. Returns keys removed."""
        keys = [document_key(owner_id, application_id, kind) for kind in DocumentKind]
        try:
            client = await self._ensure_connected()
            if not client:
                return 0

            return await client.delete(*keys)
        except RedisError as e:
            logger.warning(f"Redis delete error (documents): {e}")
            return 0

    async def close(self) -> None:
        if self.redis:
            await self.redis.close()
            self.redis = None


# ==================== Factory Function ====================

_cache_instance: Optional[GeneratedDocumentCache] = None


async def get_document_cache() -> GeneratedDocumentCache:
    """Get or create the document cache singleton."""
    global _cache_instance

    if _cache_instance is None:
        settings = get_settings()
        _cache_instance = GeneratedDocumentCache(
            redis_url=settings.redis_url,
            ttl=settings.document_cache_ttl_seconds,
        )

    return _cache_instance
