from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from site_service.api.deps import ManagerDep, MessageRouterDep
from site_service.infrastructure.ws.manager import ConnectionManager
from site_service.infrastructure.ws.protocol import OutboundEnvelope
from site_service.services.message_router import MessageRouter

logger = logging.getLogger(__name__)
router = APIRouter(tags=["websocket"])


@router.websocket("/")
async def ws_site(
    websocket: WebSocket,
    manager: ManagerDep,
    message_router: MessageRouterDep,
) -> None:
    await manager.connect(websocket)
    try:
        await _read_loop(websocket, manager, message_router)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WS error")
    finally:
        manager.disconnect(websocket)


async def _read_loop(ws: WebSocket, manager: ConnectionManager, message_router: MessageRouter) -> None:
    async def respond(envelope: OutboundEnvelope) -> None:
        await manager.send(ws, envelope)

    while True:
        frame = await ws.receive()
        if frame["type"] == "websocket.disconnect":
            raise WebSocketDisconnect(frame.get("code", 1000))
        raw = frame.get("text")
        if raw is None:
            raw = (frame.get("bytes") or b"").decode("utf-8", errors="replace")
        # Each message is handled on its own task so a slow upstream
        # never blocks the next frame on this socket.
        manager.spawn(message_router.dispatch(raw, respond), name="ws-dispatch")
