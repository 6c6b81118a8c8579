from __future__ import annotations

from datetime import datetime, timezone

MINUTE = 60
HOUR = MINUTE * 60
DAY = HOUR * 24
WEEK = DAY * 7
MONTH = DAY * 30
YEAR = DAY * 365

# (upper bound in seconds, label, divisor for the count prefix)
_CALENDAR: tuple[tuple[float, str, int | None], ...] = (
    (0.7 * MINUTE, "just now", None),
    (1.5 * MINUTE, "a minute ago", None),
    (60 * MINUTE, "minutes ago", MINUTE),
    (1.5 * HOUR, "an hour ago", None),
    (DAY, "hours ago", HOUR),
    (2 * DAY, "yesterday", None),
    (7 * DAY, "days ago", DAY),
    (1.5 * WEEK, "a week ago", None),
    (MONTH, "weeks ago", WEEK),
    (1.5 * MONTH, "a month ago", None),
    (YEAR, "months ago", MONTH),
    (1.5 * YEAR, "a year ago", None),
    (float("inf"), "years ago", YEAR),
)


def relative_date(moment: datetime, now: datetime | None = None) -> str:
    """Human phrase for how long ago `moment` was, e.g. "3 hours ago"."""
    if now is None:
        now = datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)

    elapsed = max((now - moment).total_seconds(), 0.0)
    for bound, label, divisor in _CALENDAR:
        if elapsed < bound:
            if divisor is None:
                return label
            return f"{round(elapsed / divisor)} {label}"
    return "a long time ago"  # pragma: no cover
