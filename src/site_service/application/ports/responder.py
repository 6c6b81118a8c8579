from __future__ import annotations

from typing import Awaitable, Callable

from site_service.infrastructure.ws.protocol import OutboundEnvelope

Respond = Callable[[OutboundEnvelope], Awaitable[None]]
