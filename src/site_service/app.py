from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
import redis.asyncio as aioredis
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from site_service.api.v1.routers import health, ws
from site_service.config import Settings, settings
from site_service.infrastructure.alerts.slack import build_alert_sink
from site_service.infrastructure.http.daemon_client import DaemonClient
from site_service.infrastructure.http.github_client import GitHubClient
from site_service.infrastructure.http.newsletter_client import NewsletterClient
from site_service.infrastructure.store.redis_feed_store import RedisFeedStore
from site_service.infrastructure.ws.manager import ConnectionManager
from site_service.services.feed_service import FeedCache
from site_service.services.message_router import MessageRouter
from site_service.workers.feed_refresher import FeedRefresher

logger = logging.getLogger(__name__)


def _report_missing(cfg: Settings) -> None:
    if not cfg.GITHUB_OAUTH_TOKEN:
        logger.warning("[missing] GitHub token")
    if not cfg.REDIS_URL:
        logger.warning("[missing] Redis client URL")
    if not cfg.LBRY_DAEMON_ACCESS_TOKEN:
        logger.warning("[missing] LBRY daemon access token")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    cfg: Settings = app.state.settings
    _report_missing(cfg)

    http = httpx.AsyncClient(timeout=cfg.HTTP_TIMEOUT_SECONDS)
    alerts = build_alert_sink(http, cfg.SLACK_WEBHOOK_URL, development=cfg.is_development)

    redis: aioredis.Redis | None = None
    store: RedisFeedStore | None = None
    if cfg.REDIS_URL:
        redis = aioredis.from_url(cfg.REDIS_URL, decode_responses=True)
        store = RedisFeedStore(redis, cfg.FEED_KEY)
        logger.info("Redis connection pool created")

    feed = FeedCache(
        store,
        GitHubClient(http, api_url=cfg.GITHUB_API_URL, token=cfg.GITHUB_OAUTH_TOKEN),
        alerts,
        org=cfg.GITHUB_ORG,
        max_events=cfg.FEED_MAX_EVENTS,
        render_count=cfg.FEED_RENDER_COUNT,
        fetch_count=cfg.FEED_FETCH_COUNT,
        utc_offset_hours=cfg.FEED_DISPLAY_UTC_OFFSET_HOURS,
    )

    app.state.feed_store = store
    app.state.message_router = MessageRouter(
        daemon=DaemonClient(
            http,
            rpc_url=cfg.LBRY_DAEMON_URL,
            images_url=cfg.LBRY_DAEMON_IMAGES_URL,
            access_token=cfg.LBRY_DAEMON_ACCESS_TOKEN,
        ),
        feed=feed,
        newsletter=NewsletterClient(http, url=cfg.NEWSLETTER_URL),
        alerts=alerts,
        images_path=cfg.LBRY_DAEMON_IMAGES_PATH,
    )

    refresher: FeedRefresher | None = None
    if feed.enabled:
        refresher = FeedRefresher(feed, cfg.FEED_REFRESH_INTERVAL)
        await refresher.start()

    if cfg.is_development:
        logger.info("Server listening on %s:%d", cfg.HOST, cfg.PORT)
    else:
        await alerts.send(f"Server started at port `{cfg.PORT}`")

    yield

    if refresher is not None:
        await refresher.stop()
    await app.state.manager.shutdown()
    await feed.aclose()
    if redis is not None:
        await redis.aclose()
        logger.info("Redis connection pool closed")
    await http.aclose()


def create_app(cfg: Settings | None = None) -> FastAPI:
    cfg = cfg or settings
    app = FastAPI(
        title="LBRY.tech Site Service",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.manager = ConnectionManager()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(ws.router)

    return app
