from __future__ import annotations

from typing import Protocol


class AlertSink(Protocol):
    async def send(self, text: str) -> None: ...


def format_alert(title: str, detail: object, cause: str) -> str:
    """Preformatted operational alert, Slack markdown flavoured."""
    return (
        "\n"
        f"> *{title}:* ```{detail}```\n"
        f"> _Cause: {cause}_\n"
    )
