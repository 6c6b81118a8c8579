from __future__ import annotations

import json
import logging
from html import escape
from typing import Any

from pydantic import ValidationError

from site_service.application.exceptions import UploadError, UpstreamError
from site_service.application.ports.alerts import AlertSink, format_alert
from site_service.application.ports.responder import Respond
from site_service.domain.value_objects.enums import TourMethod
from site_service.infrastructure.http.daemon_client import DaemonClient
from site_service.infrastructure.ws.protocol import HtmlUpdate, Notification, TourRequest

logger = logging.getLogger(__name__)

ALLOWED_CLAIMS = frozenset({
    "fortnite-top-stream-moments-nickatnyte",
    "hellolbry",
    "itsadisaster",
    "six",
    "unbubbled1-1",
})

ALLOWED_METHODS = frozenset(m.value for m in TourMethod)

PUBLISH_BID = 0.001

TOUR_CAUSE = "Someone is going through the Tour"
PUBLISH_CAUSE = "Someone attempted to publish a meme via the Tour"


def _is_complete(request: TourRequest) -> bool:
    if not request.method:
        return False
    if request.step == 1 and not request.claim:
        return False
    if request.step == 2 and request.data is None:
        return False
    return True


def build_body(request: TourRequest, access_token: str | None, images_path: str) -> dict[str, Any]:
    """Query parameters for the daemon call described by `request`."""
    body: dict[str, Any] = {
        "access_token": access_token,
        "method": request.method,
    }
    if request.step == 1:
        body["uri"] = request.claim

    if request.method == TourMethod.PUBLISH:
        data = request.data
        if data is None:
            raise ValueError("publish requires data")
        body.update(
            bid=PUBLISH_BID,
            description=data.description,
            file_path=f"{images_path}{data.file_path}",
            language=data.language,
            license=data.license,
            name=data.name,
            nsfw=data.nsfw,
            title=data.title,
        )
    return body


def render_success(request: TourRequest, response: dict[str, Any]) -> HtmlUpdate:
    step = request.step or 1
    subject = f"lbry://{request.claim}" if step == 1 else str(request.method)
    pretty = json.dumps(response, indent=2, ensure_ascii=False)
    html = (
        f'<p style="text-align: center;">Success! Here is the response for '
        f"<strong>{escape(subject)}</strong>:</p>"
        f'<pre><code class="json">{escape(pretty)}</code></pre>'
        f'<button class="__button-black" data-action="tour, step {step + 1}" type="button">'
        f"Go to next step</button>"
        f"<script>$('#temp-loader').remove();</script>"
    )
    return HtmlUpdate(selector=f"#step{step}-result", html=html)


async def fetch_metadata(
    payload: dict[str, Any] | TourRequest,
    respond: Respond,
    *,
    daemon: DaemonClient,
    alerts: AlertSink,
    images_path: str = "",
) -> None:
    """Proxy one interactive-tour call to the daemon.

    Incomplete requests are dropped without a response. Daemon failures
    are alerted but never surfaced to the browser.
    """
    try:
        request = payload if isinstance(payload, TourRequest) else TourRequest.model_validate(payload)
    except ValidationError:
        logger.debug("Dropping malformed tour request", exc_info=True)
        return

    if not _is_complete(request):
        return

    if request.method not in ALLOWED_METHODS:
        await respond(Notification(details="Unallowed resolve method for tutorial"))
        return

    if request.step == 1 and request.claim not in ALLOWED_CLAIMS:
        await respond(Notification(details="Invalid claim ID for tutorial"))
        return

    try:
        body = build_body(request, daemon.access_token, images_path)
    except ValueError:
        return

    if request.method == TourMethod.PUBLISH:
        try:
            body["file_path"] = await daemon.upload_image(body["file_path"])
        except UploadError as exc:
            await respond(Notification(details="Image upload failed"))
            await alerts.send(format_alert("DAEMON ERROR", exc.detail, PUBLISH_CAUSE))
            return

    try:
        result = await daemon.call(body)
    except UpstreamError as exc:
        await alerts.send(format_alert("DAEMON ERROR", exc.detail, TOUR_CAUSE))
        return

    if "error" in result:
        await alerts.send(format_alert("DAEMON ERROR", result["error"], TOUR_CAUSE))
        return

    await respond(render_success(request, result))
