from __future__ import annotations

import json
import logging
from typing import Any

from site_service.application.exceptions import UpstreamError
from site_service.application.ports.alerts import AlertSink, format_alert
from site_service.application.ports.responder import Respond
from site_service.domain.email import validate_email
from site_service.infrastructure.http.newsletter_client import NewsletterClient
from site_service.infrastructure.ws.protocol import HtmlUpdate

logger = logging.getLogger(__name__)

SELECTOR = "#emailMessage"

INVALID_EMAIL = "Your email is invalid"
UNREACHABLE = "Something is terribly wrong"
THANK_YOU = "Thank you! Please confirm subscription in your inbox."
ALREADY_SUBSCRIBED = "You have already subscribed!"
GENERIC_FAILURE = "Something went wrong"


def _reply(text: str) -> HtmlUpdate:
    return HtmlUpdate(selector=SELECTOR, html=text)


def _parse(body: str) -> Any:
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        return None


async def subscribe(
    email: Any,
    respond: Respond,
    *,
    client: NewsletterClient,
    alerts: AlertSink,
) -> None:
    if not validate_email(email):
        await respond(_reply(INVALID_EMAIL))
        return

    email = str(email)
    cause = f"{email} interacted with the form"

    try:
        raw = await client.subscribe(email)
    except UpstreamError as exc:
        await alerts.send(format_alert("NEWSLETTER ERROR", exc.detail, cause))
        if exc.status_code == 409:
            await respond(_reply(ALREADY_SUBSCRIBED))
        else:
            await respond(_reply(GENERIC_FAILURE))
        return

    body = _parse(raw)
    if not isinstance(body, dict):
        await alerts.send(
            format_alert("NEWSLETTER ERROR", r"¯\_(ツ)_/¯ This should be an unreachable error", cause)
        )
        await respond(_reply(UNREACHABLE))
        return

    if not body.get("success"):
        error = str(body.get("error") or GENERIC_FAILURE)
        logger.info("Subscription rejected for %s: %s", email, error)
        await alerts.send(format_alert("NEWSLETTER ERROR", error, cause))
        await respond(_reply(error))
        return

    await respond(_reply(THANK_YOU))
