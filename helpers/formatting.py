"""Display helpers for durations, timestamps and tag input."""
from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional

from core.settings import TRACKER
from utils.datetime_utils import ensure_utc, utc_now

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600


def format_duration(seconds: float | int | None) -> str:
    """Format seconds as ``HH:MM:SS``; hours are not wrapped at 24."""

    total = max(0, int(seconds or 0))
    hours, rem = divmod(total, SECONDS_PER_HOUR)
    minutes, secs = divmod(rem, SECONDS_PER_MINUTE)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def parse_duration(value: str) -> int:
    """Parse ``H:MM:SS`` (or ``H:MM``) back into seconds.

    Raises ``ValueError`` for anything :func:`format_duration` would not
    produce.
    """

    parts = (value or "").strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid duration: {value!r}")
    hours = int(parts[0])
    minutes = int(parts[1])
    secs = int(parts[2]) if len(parts) == 3 else 0
    if minutes >= 60 or secs >= 60:
        raise ValueError(f"Invalid duration: {value!r}")
    return hours * SECONDS_PER_HOUR + minutes * SECONDS_PER_MINUTE + secs


def to_tracker_duration(
    total_seconds: int,
    hours_per_day: Optional[int] = None,
    days_per_week: Optional[int] = None,
) -> str:
    """Render seconds in Jira notation, e.g. ``"1w 2d 3h 4m"``.

    Only non-zero components are emitted; anything under a minute is ``"0m"``.
    """

    hours_per_day = hours_per_day or TRACKER.hours_per_day
    days_per_week = days_per_week or TRACKER.days_per_week

    seconds_per_day = SECONDS_PER_HOUR * hours_per_day
    seconds_per_week = seconds_per_day * days_per_week

    total = max(0, int(total_seconds))
    weeks = total // seconds_per_week
    days = (total % seconds_per_week) // seconds_per_day
    hours = (total % seconds_per_day) // SECONDS_PER_HOUR
    minutes = (total % SECONDS_PER_HOUR) // SECONDS_PER_MINUTE

    parts = [
        f"{value}{unit}"
        for value, unit in ((weeks, "w"), (days, "d"), (hours, "h"), (minutes, "m"))
        if value
    ]
    return " ".join(parts) or "0m"


def _local(dt: datetime) -> datetime:
    return ensure_utc(dt).astimezone()


def format_clock(dt: Optional[datetime]) -> str:
    if dt is None:
        return "—"
    return _local(dt).strftime("%H:%M")


def format_date(dt: Optional[datetime]) -> str:
    if dt is None:
        return "—"
    return _local(dt).strftime("%a, %b %d %Y")


def format_datetime(dt: Optional[datetime]) -> str:
    if dt is None:
        return "—"
    return _local(dt).strftime("%a, %b %d %Y, %H:%M")


def format_relative(dt: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Human friendly age of ``dt``: "Just now", "5 min ago", "2 hours ago"..."""

    if dt is None:
        return "—"
    current = ensure_utc(now) if now is not None else utc_now()
    diff = (current - ensure_utc(dt)).total_seconds()
    minutes = int(diff // 60)
    hours = int(diff // 3600)
    days = int(diff // 86400)

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes} min ago"
    if hours < 24:
        return f"{hours} hour{'s' if hours > 1 else ''} ago"
    if days < 7:
        return f"{days} day{'s' if days > 1 else ''} ago"
    return _local(dt).strftime("%Y-%m-%d")


def parse_tags(value: str | Iterable[str] | None) -> List[str]:
    """Split comma separated tags, dropping blanks but keeping order."""

    if not value:
        return []
    items = value.split(",") if isinstance(value, str) else list(value)
    return [tag.strip() for tag in items if tag and tag.strip()]


__all__ = [
    "format_clock",
    "format_date",
    "format_datetime",
    "format_duration",
    "format_relative",
    "parse_duration",
    "parse_tags",
    "to_tracker_duration",
]
