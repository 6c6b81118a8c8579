from __future__ import annotations

from typing import Protocol


class FeedStore(Protocol):
    """Sorted-set capability backing the activity feed cache."""

    async def range_by_rank(self, start: int, stop: int, *, desc: bool = False) -> list[str]: ...

    async def rank_of(self, member: str) -> int | None: ...

    async def count_by_score(self, low: float, high: float) -> int: ...

    async def add_with_score(self, member: str, score: float) -> None: ...

    async def trim_by_rank(self, start: int, stop: int) -> None: ...
