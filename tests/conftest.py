"""Shared test fixtures."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import httpx
import pytest

from site_service.application.exceptions import UpstreamError
from site_service.infrastructure.ws.protocol import OutboundEnvelope

NOW = datetime(2024, 5, 1, 16, 30, 15, tzinfo=timezone.utc)


def make_event(
    event_id: int,
    *,
    event_type: str = "WatchEvent",
    login: str = "lbry-bot",
    repo: str = "lbryio/lbry-sdk",
    created_at: datetime | None = None,
    payload: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """A GitHub org event as the REST API returns it."""
    created = created_at or NOW - timedelta(hours=3)
    return {
        "id": str(event_id),
        "type": event_type,
        "actor": {
            "id": 1,
            "login": login,
            "display_login": login,
            "avatar_url": f"https://avatars.example/{login}.png",
            "url": f"https://api.github.com/users/{login}",
        },
        "repo": {"id": 2, "name": repo, "url": f"https://api.github.com/repos/{repo}"},
        "payload": payload or {},
        "public": True,
        "created_at": created.strftime("%Y-%m-%dT%H:%M:%SZ"),
    }


def _redis_slice(items: list[str], start: int, stop: int) -> list[str]:
    n = len(items)
    if start < 0:
        start = max(n + start, 0)
    if stop < 0:
        stop = n + stop
    if start >= n or start > stop:
        return []
    return items[start:min(stop, n - 1) + 1]


@dataclass
class FakeFeedStore:
    """In-memory sorted set with Redis rank semantics."""

    _scores: dict[str, float] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)
    fail_on: str | None = None

    def _check(self, op: str) -> None:
        self.calls.append(op)
        if self.fail_on == op:
            raise ConnectionError(f"store down during {op}")

    def _ordered(self) -> list[str]:
        return sorted(self._scores, key=lambda m: (self._scores[m], m))

    async def range_by_rank(self, start: int, stop: int, *, desc: bool = False) -> list[str]:
        self._check("range_by_rank")
        items = self._ordered()
        if desc:
            items.reverse()
        return _redis_slice(items, start, stop)

    async def rank_of(self, member: str) -> int | None:
        self._check("rank_of")
        if member not in self._scores:
            return None
        return self._ordered().index(member)

    async def count_by_score(self, low: float, high: float) -> int:
        self._check("count_by_score")
        return sum(1 for score in self._scores.values() if low <= score <= high)

    async def add_with_score(self, member: str, score: float) -> None:
        self._check("add_with_score")
        self._scores[member] = score

    async def trim_by_rank(self, start: int, stop: int) -> None:
        self._check("trim_by_rank")
        for member in _redis_slice(self._ordered(), start, stop):
            del self._scores[member]

    async def ping(self) -> bool:
        return True

    def __len__(self) -> int:
        return len(self._scores)


@dataclass
class FakeGitHub:
    events: list[dict[str, Any]] = field(default_factory=list)
    error: Exception | None = None
    requests: list[tuple[str, int]] = field(default_factory=list)

    async def org_events(self, org: str, *, per_page: int = 20, page: int = 1) -> list[dict[str, Any]]:
        self.requests.append((org, per_page))
        if self.error is not None:
            raise self.error
        return self.events[:per_page]


@dataclass
class FakeAlertSink:
    sent: list[str] = field(default_factory=list)

    async def send(self, text: str) -> None:
        self.sent.append(text)


@dataclass
class RecordingResponder:
    sent: list[OutboundEnvelope] = field(default_factory=list)

    async def __call__(self, envelope: OutboundEnvelope) -> None:
        self.sent.append(envelope)


@dataclass
class RecordingTransport:
    """httpx.MockTransport wrapper that keeps every request it served."""

    handler: Callable[[httpx.Request], httpx.Response]
    requests: list[httpx.Request] = field(default_factory=list)

    def _serve(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self._serve))


def github_unavailable() -> UpstreamError:
    return UpstreamError("GitHub responded 502", status_code=502)


@pytest.fixture
def alerts() -> FakeAlertSink:
    return FakeAlertSink()


@pytest.fixture
def responder() -> RecordingResponder:
    return RecordingResponder()


@pytest.fixture
def store() -> FakeFeedStore:
    return FakeFeedStore()
