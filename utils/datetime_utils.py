"""Utilities for working with RFC3339 timestamps, UTC datetimes and local days."""

from __future__ import annotations

import re
from datetime import date, datetime, time, timezone
from typing import Optional

UTC = timezone.utc

_OFFSET_RE = re.compile(r"([+-])(\d{2}):?(\d{2})$")
_END_OF_DAY = time(23, 59, 59, 999000)


def utc_now() -> datetime:
    return datetime.now(UTC)


def truncate_ms(dt: datetime) -> datetime:
    """Drop sub-millisecond precision (Jira keeps milliseconds only)."""

    return dt.replace(microsecond=(dt.microsecond // 1000) * 1000)


def utc_now_ms() -> datetime:
    return truncate_ms(utc_now())


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def parse_rfc3339(s: Optional[str]) -> Optional[datetime]:
    """Parse a RFC3339/ISO string and return a timezone-aware UTC datetime.

    Accepts ``Z``, ``+00:00`` and Jira's colon-less ``+0000`` offsets and any
    number of fractional digits.
    """

    if not s:
        return None

    value = s.strip()
    if not value:
        return None

    if value[-1] in ("Z", "z"):
        value = value[:-1] + "+00:00"

    tz = ""
    match = _OFFSET_RE.search(value)
    if match and "T" in value:
        sign, hours, minutes = match.groups()
        tz = f"{sign}{hours}:{minutes}"
        value = value[: match.start()]

    if "." in value:
        head, frac = value.split(".", 1)
        frac = (frac + "000000")[:6]
        value = f"{head}.{frac}"
    value += tz

    try:
        dt = datetime.fromisoformat(value)
    except ValueError:
        return None

    return ensure_utc(dt)


def to_jira_started(dt: datetime, offset: str = "+0000") -> str:
    """Render ``dt`` as ``YYYY-MM-DDTHH:MM:SS.mmm+0000`` (UTC, milliseconds)."""

    value = ensure_utc(dt)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}" + offset


def start_of_day(day: date) -> datetime:
    """Local midnight of ``day`` as an aware datetime."""

    return datetime.combine(day, time.min).astimezone()


def end_of_day(day: date) -> datetime:
    """Local 23:59:59.999 of ``day`` as an aware datetime."""

    return datetime.combine(day, _END_OF_DAY).astimezone()


def first_of_month(day: date) -> date:
    return day.replace(day=1)


def parse_date_input(value: str | None) -> Optional[date]:
    """Parse ISO ``YYYY-MM-DD`` into a ``date`` object, ``None`` otherwise."""

    if not value:
        return None
    text = value.strip()
    if not text:
        return None

    try:
        return datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        return None


__all__ = [
    "UTC",
    "end_of_day",
    "ensure_utc",
    "first_of_month",
    "parse_date_input",
    "parse_rfc3339",
    "start_of_day",
    "to_jira_started",
    "truncate_ms",
    "utc_now",
    "utc_now_ms",
]
