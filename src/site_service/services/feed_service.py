"""Activity feed cache: renders recent org events, refreshes from GitHub."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from html import escape
from typing import Any, Callable

from site_service.application.ports.alerts import AlertSink, format_alert
from site_service.application.ports.feed_store import FeedStore
from site_service.domain.feed_event import FeedEvent, generate_event, generate_url
from site_service.domain.relative_date import relative_date
from site_service.domain.value_objects.enums import LinkRole
from site_service.infrastructure.http.github_client import GitHubClient

logger = logging.getLogger(__name__)

REFRESH_CAUSE = "GitHub feed refresh"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def render_event(event: FeedEvent, now: datetime) -> str:
    actor_url = escape(generate_url(LinkRole.ACTOR, event))
    repo_url = escape(generate_url(LinkRole.REPO, event))
    avatar = escape(event.actor.get("avatar_url", ""))
    return (
        "<div class='github-feed__event'>"
        f'<a href="{actor_url}" target="_blank" rel="noopener noreferrer">'
        f'<img src="{avatar}" class="github-feed__event__avatar" alt=""/>'
        "</a>"
        "<p>"
        f"{generate_event(event)} "
        f'<a href="{repo_url}" title="View this repo on GitHub" target="_blank" rel="noopener noreferrer">'
        f"<strong>{escape(event.repo['name'])}</strong></a>"
        f'<em class="github-feed__event__time">{relative_date(event.created, now)}</em>'
        "</p>"
        "</div>"
    )


def last_updated(now: datetime, utc_offset_hours: int) -> str:
    """`YYYY·MM·DD at h:mm:ss am EST` at a fixed display offset."""
    local = now.astimezone(timezone(timedelta(hours=utc_offset_hours)))
    hour = local.hour % 12 or 12
    meridiem = "am" if local.hour < 12 else "pm"
    date = local.strftime("%Y-%m-%d").replace("-", "&middot;")
    return f"{date} at {hour}:{local:%M:%S} {meridiem} EST"


class FeedCache:
    """Capped, de-duplicated, score-ordered cache of org activity."""

    def __init__(
        self,
        store: FeedStore | None,
        github: GitHubClient,
        alerts: AlertSink,
        *,
        org: str,
        max_events: int = 50,
        render_count: int = 10,
        fetch_count: int = 20,
        utc_offset_hours: int = -4,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._github = github
        self._alerts = alerts
        self._org = org
        self._max_events = max_events
        self._render_count = render_count
        self._fetch_count = fetch_count
        self._utc_offset_hours = utc_offset_hours
        self._clock = clock
        self._refreshes: set[asyncio.Task[int]] = set()

    @property
    def enabled(self) -> bool:
        return self._store is not None

    async def render(self) -> str | None:
        """HTML for the feed panel, or None when the store is unavailable."""
        if self._store is None:
            return None

        try:
            members = await self._store.range_by_rank(0, self._render_count - 1, desc=True)
        except Exception:
            logger.warning("Feed store read failed", exc_info=True)
            return None

        now = self._clock()
        rendered: list[str] = []
        for member in members:
            try:
                rendered.append(render_event(FeedEvent.from_member(member), now))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping unreadable feed entry", exc_info=True)

        self.schedule_refresh()

        return (
            "<h3>GitHub</h3>"
            f'<h5 class="last-updated">Last updated: {last_updated(now, self._utc_offset_hours)}</h5>'
            + "".join(rendered)
        )

    def schedule_refresh(self) -> asyncio.Task[int] | None:
        """Start a background refresh without waiting for it."""
        if self._store is None:
            return None
        task = asyncio.create_task(self.refresh(), name="feed-refresh")
        self._refreshes.add(task)
        task.add_done_callback(self._refreshes.discard)
        return task

    async def refresh(self) -> int:
        """Pull the newest org events into the store; returns how many were added."""
        if self._store is None:
            return 0

        try:
            raw_events = await self._github.org_events(self._org, per_page=self._fetch_count)
            events = [FeedEvent.from_api(raw) for raw in raw_events]
            added = await self._store_new(events)
            # keep the highest-scored max_events entries
            await self._store.trim_by_rank(0, -(self._max_events + 1))
        except Exception as exc:
            logger.exception("Feed refresh failed")
            await self._alerts.send(format_alert("GITHUB FEED ERROR", _describe_error(exc), REFRESH_CAUSE))
            return 0

        if added:
            logger.info("Feed refresh stored %d new event(s)", added)
        return added

    async def _store_new(self, events: list[FeedEvent]) -> int:
        # One check-then-insert per event, strictly in arrival order.
        added = 0
        for event in events:
            member = event.to_member()
            if await self._store.rank_of(member) is not None:
                continue
            # entries written in another serialization still score by id
            if await self._store.count_by_score(event.score, event.score):
                continue
            await self._store.add_with_score(member, event.score)
            added += 1
        return added

    async def aclose(self) -> None:
        for task in list(self._refreshes):
            task.cancel()
        if self._refreshes:
            await asyncio.gather(*self._refreshes, return_exceptions=True)


def _describe_error(exc: Exception) -> Any:
    return getattr(exc, "detail", None) or f"{type(exc).__name__}: {exc}"
