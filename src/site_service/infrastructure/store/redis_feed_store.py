"""Redis sorted-set implementation of the feed store."""
from __future__ import annotations

import logging

import redis.asyncio as aioredis

logger = logging.getLogger(__name__)


class RedisFeedStore:
    """Implements application.ports.feed_store.FeedStore."""

    def __init__(self, redis: aioredis.Redis, key: str) -> None:
        self._redis = redis
        self._key = key

    async def range_by_rank(self, start: int, stop: int, *, desc: bool = False) -> list[str]:
        if desc:
            return await self._redis.zrevrange(self._key, start, stop)
        return await self._redis.zrange(self._key, start, stop)

    async def rank_of(self, member: str) -> int | None:
        return await self._redis.zrank(self._key, member)

    async def count_by_score(self, low: float, high: float) -> int:
        return await self._redis.zcount(self._key, low, high)

    async def add_with_score(self, member: str, score: float) -> None:
        await self._redis.zadd(self._key, {member: score})

    async def trim_by_rank(self, start: int, stop: int) -> None:
        removed = await self._redis.zremrangebyrank(self._key, start, stop)
        if removed:
            logger.debug("Trimmed %d entries from %s", removed, self._key)

    async def ping(self) -> bool:
        return bool(await self._redis.ping())
