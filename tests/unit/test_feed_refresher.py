from __future__ import annotations

import asyncio

import pytest

from site_service.workers.feed_refresher import FeedRefresher


class CountingFeed:
    def __init__(self, fail_first: bool = False) -> None:
        self.calls = 0
        self._fail_first = fail_first

    async def refresh(self) -> int:
        self.calls += 1
        if self._fail_first and self.calls == 1:
            raise RuntimeError("unexpected")
        return 0


@pytest.mark.asyncio
async def test_refresher_runs_until_stopped():
    feed = CountingFeed()
    refresher = FeedRefresher(feed, interval=0)

    await refresher.start()
    while feed.calls < 3:
        await asyncio.sleep(0)
    await refresher.stop()
    calls = feed.calls
    await asyncio.sleep(0)

    assert feed.calls == calls


@pytest.mark.asyncio
async def test_refresher_survives_loop_errors():
    feed = CountingFeed(fail_first=True)
    refresher = FeedRefresher(feed, interval=0)

    await refresher.start()
    while feed.calls < 2:
        await asyncio.sleep(0)
    await refresher.stop()

    assert feed.calls >= 2
