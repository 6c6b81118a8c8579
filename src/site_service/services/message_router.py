from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from site_service.application.ports.alerts import AlertSink
from site_service.application.ports.responder import Respond
from site_service.domain.value_objects.enums import InboundTag
from site_service.infrastructure.http.daemon_client import DaemonClient
from site_service.infrastructure.http.newsletter_client import NewsletterClient
from site_service.infrastructure.ws.protocol import HtmlUpdate, WsInbound
from site_service.services import newsletter_service, tour_service
from site_service.services.feed_service import FeedCache

logger = logging.getLogger(__name__)

FEED_SELECTOR = "#github-feed"


class MessageRouter:
    """Dispatches one inbound socket message to its handler by tag."""

    def __init__(
        self,
        *,
        daemon: DaemonClient,
        feed: FeedCache,
        newsletter: NewsletterClient,
        alerts: AlertSink,
        images_path: str = "",
    ) -> None:
        self._daemon = daemon
        self._feed = feed
        self._newsletter = newsletter
        self._alerts = alerts
        self._images_path = images_path

    async def dispatch(self, raw: str | dict[str, Any], respond: Respond) -> None:
        msg = self._decode(raw)
        if msg is None:
            return

        payload = msg.model_extra or {}

        if msg.message == InboundTag.FETCH_METADATA:
            await tour_service.fetch_metadata(
                payload,
                respond,
                daemon=self._daemon,
                alerts=self._alerts,
                images_path=self._images_path,
            )

        elif msg.message == InboundTag.HOMEPAGE_LANDED:
            html = await self._feed.render()
            if html is not None:
                await respond(HtmlUpdate(selector=FEED_SELECTOR, html=html))

        elif msg.message == InboundTag.SUBSCRIBE:
            await newsletter_service.subscribe(
                payload.get("email"),
                respond,
                client=self._newsletter,
                alerts=self._alerts,
            )

        else:
            logger.info("Ignoring unknown message: %s", raw)

    @staticmethod
    def _decode(raw: str | dict[str, Any]) -> WsInbound | None:
        try:
            if isinstance(raw, dict):
                return WsInbound.model_validate(raw)
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError("message is not a JSON object")
            return WsInbound.model_validate(data)
        except (ValueError, ValidationError):
            logger.info("Dropping undecodable message: %r", raw)
            return None
