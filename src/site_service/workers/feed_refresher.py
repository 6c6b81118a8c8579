"""Feed refresher: pulls GitHub org activity into the feed store on a timer."""
from __future__ import annotations

import asyncio
import logging

import httpx
import redis.asyncio as aioredis

from site_service.config import settings
from site_service.infrastructure.alerts.slack import build_alert_sink
from site_service.infrastructure.http.github_client import GitHubClient
from site_service.infrastructure.store.redis_feed_store import RedisFeedStore
from site_service.services.feed_service import FeedCache

logger = logging.getLogger(__name__)


class FeedRefresher:
    """Background task calling FeedCache.refresh every `interval` seconds."""

    def __init__(self, feed: FeedCache, interval: float) -> None:
        self._feed = feed
        self._interval = interval
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        self._task = asyncio.create_task(self._loop(), name="feed-refresher")
        logger.info("Feed refresher started (interval=%.0fs)", self._interval)

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            logger.info("Feed refresher stopped")

    async def _loop(self) -> None:
        while True:
            try:
                await self._feed.refresh()
            except Exception:
                logger.exception("Feed refresher loop error")
            await asyncio.sleep(self._interval)


async def run_feed_refresher() -> None:
    if not settings.REDIS_URL:
        logger.error("[missing] Redis client URL, nothing to refresh")
        return

    redis = aioredis.from_url(settings.REDIS_URL, decode_responses=True)
    http = httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)
    alerts = build_alert_sink(http, settings.SLACK_WEBHOOK_URL, development=settings.is_development)
    feed = FeedCache(
        RedisFeedStore(redis, settings.FEED_KEY),
        GitHubClient(http, api_url=settings.GITHUB_API_URL, token=settings.GITHUB_OAUTH_TOKEN),
        alerts,
        org=settings.GITHUB_ORG,
        max_events=settings.FEED_MAX_EVENTS,
        fetch_count=settings.FEED_FETCH_COUNT,
    )
    refresher = FeedRefresher(feed, settings.FEED_REFRESH_INTERVAL)

    await refresher.start()
    try:
        while True:
            await asyncio.sleep(3600)
    except asyncio.CancelledError:
        pass
    finally:
        await refresher.stop()
        await redis.aclose()
        await http.aclose()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    asyncio.run(run_feed_refresher())


if __name__ == "__main__":
    main()
