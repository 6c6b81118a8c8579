"""In-process WebSocket connection registry."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Coroutine

from fastapi import WebSocket

from site_service.infrastructure.ws.protocol import OutboundEnvelope

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks open sockets and the handler tasks they spawned.

    Handler tasks are not tied to their socket's lifetime: a socket may
    close while a handler is still awaiting an upstream, and the late
    write is dropped by `send`.
    """

    def __init__(self) -> None:
        self._connections: set[WebSocket] = set()
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    async def connect(self, ws: WebSocket) -> None:
        await ws.accept()
        self._connections.add(ws)
        logger.debug("WS connected (total=%d)", len(self._connections))

    def disconnect(self, ws: WebSocket) -> None:
        self._connections.discard(ws)
        logger.debug("WS disconnected (total=%d)", len(self._connections))

    def spawn(self, coro: Coroutine[Any, Any, None], *, name: str | None = None) -> asyncio.Task[None]:
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("WS handler failed", exc_info=task.exception())

    async def send(self, ws: WebSocket, envelope: OutboundEnvelope) -> None:
        """Send one envelope; writes to a closed socket are ignored."""
        raw = envelope.model_dump_json()
        try:
            await ws.send_text(raw)
        except Exception:
            logger.debug("Dropped %s for closed socket", envelope.message, exc_info=True)
            self.disconnect(ws)

    async def shutdown(self) -> None:
        """Cancel in-flight handlers when the server stops."""
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
