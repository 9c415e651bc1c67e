"""Pure projections from application state to what the pages display.

Nothing here touches flet, so every screen can be checked without a UI.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional, Tuple

from core.settings import UI
from core.statuses import DONE, IN_PROGRESS, PAUSED, TODO, status_label
from helpers.formatting import (
    format_clock,
    format_date,
    format_datetime,
    format_duration,
    format_relative,
)
from models.task import Task
from services.report import ClippedSession, Report
from services.timer import TrackerContext, live_elapsed
from utils.datetime_utils import ensure_utc, utc_now

# action name -> target status
ACTIONS: Dict[str, str] = {
    "start": IN_PROGRESS,
    "pause": PAUSED,
    "complete": DONE,
    "reopen": TODO,
}


@dataclass(frozen=True)
class TaskListItem:
    id: str
    title: str
    status: str
    status_label: str
    jira_ticket: str
    time_display: str
    is_running: bool
    is_selected: bool


@dataclass(frozen=True)
class SessionRow:
    date: str
    started: str
    ended: str
    duration: str
    live: bool = False


@dataclass(frozen=True)
class CommentRow:
    id: str
    created: str
    text: str


@dataclass(frozen=True)
class TaskDetail:
    id: str
    title: str
    status: str
    status_label: str
    jira_ticket: str
    is_recurring: bool
    created: str
    description: str
    tags: Tuple[str, ...]
    timer_display: str
    actions: Tuple[str, ...]
    can_sync: bool
    sessions: Tuple[SessionRow, ...]
    comments: Tuple[CommentRow, ...]


@dataclass(frozen=True)
class AppView:
    active: Tuple[TaskListItem, ...]
    recent: Tuple[TaskListItem, ...]
    detail: Optional[TaskDetail]
    running_title: Optional[str]


def available_actions(status: str) -> Tuple[str, ...]:
    actions = []
    if status in (TODO, PAUSED):
        actions.append("start")
    if status == IN_PROGRESS:
        actions.append("pause")
    if status != DONE:
        actions.append("complete")
    if status == DONE:
        actions.append("reopen")
    return tuple(actions)


def _elapsed(ctx: TrackerContext, task: Task, now: datetime) -> int:
    live = live_elapsed(ctx, now) if ctx.active_task_id == task.id else 0
    return task.total_time + live


def _list_item(ctx: TrackerContext, task: Task, selected_id: Optional[str], now: datetime) -> TaskListItem:
    return TaskListItem(
        id=task.id,
        title=task.title,
        status=task.status,
        status_label=status_label(task.status),
        jira_ticket=task.jira_ticket,
        time_display=format_duration(_elapsed(ctx, task, now)),
        is_running=task.is_running,
        is_selected=task.id == selected_id,
    )


def _detail(ctx: TrackerContext, task: Task, now: datetime) -> TaskDetail:
    recent = task.time_sessions[-UI.recent_sessions_limit :][::-1]
    return TaskDetail(
        id=task.id,
        title=task.title,
        status=task.status,
        status_label=status_label(task.status),
        jira_ticket=task.jira_ticket,
        is_recurring=task.is_recurring,
        created=format_relative(task.created_at, now),
        description=task.description,
        tags=tuple(task.tags),
        timer_display=format_duration(_elapsed(ctx, task, now)),
        actions=available_actions(task.status),
        can_sync=bool(task.jira_ticket),
        sessions=tuple(
            SessionRow(
                date=format_relative(s.start, now),
                started=format_clock(s.start),
                ended=format_clock(s.end),
                duration=format_duration(s.duration),
            )
            for s in recent
        ),
        comments=tuple(
            CommentRow(id=c.id, created=format_relative(c.created_at, now), text=c.text)
            for c in task.comments
        ),
    )


def render(
    ctx: TrackerContext,
    selected_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> AppView:
    current = ensure_utc(now) if now is not None else utc_now()
    active = [t for t in ctx.tasks if t.status != DONE]
    recent = [t for t in ctx.tasks if t.status == DONE][: UI.recent_done_limit]
    selected = ctx.find(selected_id)
    running = ctx.active_task
    return AppView(
        active=tuple(_list_item(ctx, t, selected_id, current) for t in active),
        recent=tuple(_list_item(ctx, t, selected_id, current) for t in recent),
        detail=_detail(ctx, selected, current) if selected is not None else None,
        running_title=running.title if running is not None else None,
    )


# ---------- report ----------
@dataclass(frozen=True)
class ReportCard:
    title: str
    status_label: str
    jira_ticket: str
    is_recurring: bool
    tags: Tuple[str, ...]
    description: str
    total: str
    rows: Tuple[SessionRow, ...]
    comments: Tuple[CommentRow, ...]


@dataclass(frozen=True)
class ReportView:
    label: str
    date_range: str
    total_time: str
    tasks_label: str
    sessions_label: str
    cards: Tuple[ReportCard, ...]
    empty_message: Optional[str] = None


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def _report_row(session: ClippedSession) -> SessionRow:
    return SessionRow(
        date=format_date(session.clipped_start),
        started=format_clock(session.clipped_start),
        ended=format_clock(session.clipped_end),
        duration=format_duration(session.clipped_duration),
        live=session.live,
    )


def report_view(report: Report) -> ReportView:
    summary = report.summary
    empty = None
    if report.is_empty:
        empty = "No tasks or time sessions found in the selected date range."
    return ReportView(
        label=report.label,
        date_range=f"{report.start_date.isoformat()} — {report.end_date.isoformat()}",
        total_time=format_duration(summary.total_time),
        tasks_label=_plural(summary.task_count, "Task"),
        sessions_label=_plural(summary.session_count, "Session"),
        cards=tuple(
            ReportCard(
                title=entry.task.title,
                status_label=status_label(entry.task.status),
                jira_ticket=entry.task.jira_ticket,
                is_recurring=entry.task.is_recurring,
                tags=tuple(entry.task.tags),
                description=entry.task.description,
                total=format_duration(entry.total_in_range),
                rows=tuple(_report_row(s) for s in entry.sessions),
                comments=tuple(
                    CommentRow(id=c.id, created=format_datetime(c.created_at), text=c.text)
                    for c in entry.task.comments
                ),
            )
            for entry in report.entries
        ),
        empty_message=empty,
    )


__all__ = [
    "ACTIONS",
    "AppView",
    "CommentRow",
    "ReportCard",
    "ReportView",
    "SessionRow",
    "TaskDetail",
    "TaskListItem",
    "available_actions",
    "render",
    "report_view",
]
