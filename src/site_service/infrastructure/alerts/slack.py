"""Operational alert sinks."""
from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)


class SlackAlertSink:
    """Posts preformatted text to a Slack incoming webhook."""

    def __init__(self, http: httpx.AsyncClient, webhook_url: str) -> None:
        self._http = http
        self._webhook_url = webhook_url

    async def send(self, text: str) -> None:
        try:
            response = await self._http.post(self._webhook_url, json={"text": text})
            response.raise_for_status()
        except httpx.HTTPError:
            logger.exception("Failed to deliver alert to Slack: %s", text.strip())


class LogAlertSink:
    """Development fallback: alerts go to the process log."""

    async def send(self, text: str) -> None:
        logger.warning("ALERT %s", text.strip())


def build_alert_sink(
    http: httpx.AsyncClient,
    webhook_url: str | None,
    *,
    development: bool = False,
) -> SlackAlertSink | LogAlertSink:
    if webhook_url and not development:
        return SlackAlertSink(http, webhook_url)
    return LogAlertSink()
