"""Date-range time report.

Reports are rebuilt from scratch on every call: the window is chosen by the
user and nothing is cached between runs.
"""
from __future__ import annotations

import locale
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from core.statuses import IN_PROGRESS
from helpers.formatting import format_datetime
from models.task import Task
from services.errors import ValidationError
from utils.datetime_utils import (
    end_of_day,
    ensure_utc,
    first_of_month,
    parse_date_input,
    start_of_day,
    utc_now,
)

# The window end (23:59:59.999) is inclusive through its last millisecond.
_WINDOW_RESOLUTION = timedelta(milliseconds=1)


@dataclass(frozen=True)
class ClippedSession:
    start: datetime
    end: datetime
    duration: int
    clipped_start: datetime
    clipped_end: datetime
    clipped_duration: int
    live: bool = False


@dataclass
class ReportEntry:
    task: Task
    sessions: List[ClippedSession] = field(default_factory=list)
    total_in_range: int = 0


@dataclass(frozen=True)
class ReportSummary:
    task_count: int = 0
    session_count: int = 0
    total_time: int = 0


@dataclass
class Report:
    start_date: date
    end_date: date
    entries: List[ReportEntry]
    summary: ReportSummary
    generated_at: datetime

    @property
    def label(self) -> str:
        return (
            f"{self.start_date.isoformat()} — {self.end_date.isoformat()}, "
            f"generated {format_datetime(self.generated_at)}"
        )

    @property
    def is_empty(self) -> bool:
        return not self.entries


def report_window(start_date: date, end_date: date) -> Tuple[datetime, datetime]:
    return start_of_day(start_date), end_of_day(end_date)


def _candidate_sessions(task: Task, now: datetime) -> List[Tuple[datetime, datetime, int, bool]]:
    candidates = [
        (ensure_utc(s.start), ensure_utc(s.end), s.duration, False) for s in task.time_sessions
    ]
    if task.status == IN_PROGRESS and task.current_session_start is not None:
        start = ensure_utc(task.current_session_start)
        candidates.append((start, now, max(0, int((now - start).total_seconds())), True))
    return candidates


def clip_sessions(
    task: Task, window_start: datetime, window_end: datetime, now: datetime
) -> List[ClippedSession]:
    """Sessions of ``task`` overlapping the window, clipped to it, by start."""

    clipped: List[ClippedSession] = []
    for start, end, duration, live in _candidate_sessions(task, now):
        if end < window_start or start > window_end:
            continue
        clipped_start = max(start, window_start)
        clipped_end = min(end, window_end)
        effective_end = clipped_end + _WINDOW_RESOLUTION if end > window_end else clipped_end
        clipped.append(
            ClippedSession(
                start=start,
                end=end,
                duration=duration,
                clipped_start=clipped_start,
                clipped_end=clipped_end,
                clipped_duration=max(0, int((effective_end - clipped_start).total_seconds())),
                live=live,
            )
        )
    clipped.sort(key=lambda s: s.clipped_start)
    return clipped


def _title_key(entry: ReportEntry) -> str:
    return locale.strxfrm(entry.task.title.casefold())


def build_report(
    tasks: Iterable[Task],
    start_date: date,
    end_date: date,
    now: Optional[datetime] = None,
) -> Report:
    current = ensure_utc(now) if now is not None else utc_now()
    window_start, window_end = report_window(start_date, end_date)

    entries: List[ReportEntry] = []
    for task in tasks:
        sessions = clip_sessions(task, window_start, window_end, current)
        if not sessions:
            continue
        entries.append(
            ReportEntry(
                task=task,
                sessions=sessions,
                total_in_range=sum(s.clipped_duration for s in sessions),
            )
        )
    entries.sort(key=_title_key)

    summary = ReportSummary(
        task_count=len(entries),
        session_count=sum(len(e.sessions) for e in entries),
        total_time=sum(e.total_in_range for e in entries),
    )
    return Report(
        start_date=start_date,
        end_date=end_date,
        entries=entries,
        summary=summary,
        generated_at=current,
    )


def generate_report(
    tasks: Iterable[Task],
    start_text: Optional[str],
    end_text: Optional[str],
    now: Optional[datetime] = None,
) -> Report:
    """Validate ``YYYY-MM-DD`` inputs and build the report."""

    if not (start_text or "").strip() or not (end_text or "").strip():
        raise ValidationError("Please select both a start and end date")
    start_date = parse_date_input(start_text)
    end_date = parse_date_input(end_text)
    if start_date is None or end_date is None:
        raise ValidationError("Dates must use the YYYY-MM-DD format")
    if start_date > end_date:
        raise ValidationError("The start date cannot be after the end date")
    return build_report(tasks, start_date, end_date, now)


def default_range(today: Optional[date] = None) -> Tuple[date, date]:
    """First of the current month through today."""

    current = today or date.today()
    return first_of_month(current), current


__all__ = [
    "ClippedSession",
    "Report",
    "ReportEntry",
    "ReportSummary",
    "build_report",
    "clip_sessions",
    "default_range",
    "generate_report",
    "report_window",
]
