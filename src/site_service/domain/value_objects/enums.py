from __future__ import annotations

from enum import StrEnum


class InboundTag(StrEnum):
    FETCH_METADATA = "fetch metadata"
    HOMEPAGE_LANDED = "landed on homepage"
    SUBSCRIBE = "subscribe"


class TourMethod(StrEnum):
    PUBLISH = "publish"
    RESOLVE = "resolve"
    WALLET_SEND = "wallet_send"


class LinkRole(StrEnum):
    ACTOR = "actor"
    REPO = "repo"
