"""WebSocket message envelope models."""
from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict


class WsInbound(BaseModel):
    """Client → Server. Payload fields sit next to the tag."""

    model_config = ConfigDict(extra="allow")

    message: str = ""


class PublishData(BaseModel):
    description: str | None = None
    file_path: str = ""
    language: str | None = None
    license: str | None = None
    name: str | None = None
    nsfw: bool = False
    title: str | None = None


class TourRequest(BaseModel):
    """Payload of a `fetch metadata` message."""

    step: int | None = None
    claim: str | None = None
    method: str | None = None
    data: PublishData | None = None


class Notification(BaseModel):
    """Server → Client, user-visible error toast."""

    message: Literal["notification"] = "notification"
    type: Literal["error"] = "error"
    details: str


class HtmlUpdate(BaseModel):
    """Server → Client, replace the inner HTML of `selector`."""

    message: Literal["updated html"] = "updated html"
    selector: str
    html: str


OutboundEnvelope = Union[Notification, HtmlUpdate]
