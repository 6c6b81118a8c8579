"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from starlette.requests import HTTPConnection

from site_service.infrastructure.store.redis_feed_store import RedisFeedStore
from site_service.infrastructure.ws.manager import ConnectionManager
from site_service.services.message_router import MessageRouter


def get_manager(conn: HTTPConnection) -> ConnectionManager:
    return conn.app.state.manager


def get_message_router(conn: HTTPConnection) -> MessageRouter:
    return conn.app.state.message_router


def get_feed_store(conn: HTTPConnection) -> RedisFeedStore | None:
    return getattr(conn.app.state, "feed_store", None)


ManagerDep = Annotated[ConnectionManager, Depends(get_manager)]
MessageRouterDep = Annotated[MessageRouter, Depends(get_message_router)]
FeedStoreDep = Annotated[RedisFeedStore | None, Depends(get_feed_store)]
