"""Task/timer state machine.

All state lives in an explicit :class:`TrackerContext` (the task collection
plus the running timer) that every operation receives. Operations mutate
tasks in memory only; persisting the collection is the caller's job.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from core.statuses import DONE, IN_PROGRESS, PAUSED, normalize_status
from helpers.formatting import format_duration
from models.task import Task, TimeSession
from services.errors import NotFound
from utils.datetime_utils import ensure_utc, truncate_ms, utc_now_ms

Confirm = Callable[[str], bool]
Notify = Callable[[str, str], None]

CONFIRM_COMPLETE = "Complete this task and stop the timer?"
CONFIRM_REOPEN = "Reopen this completed task?"


@dataclass
class TrackerContext:
    tasks: List[Task] = field(default_factory=list)
    active_task_id: Optional[str] = None
    session_start: Optional[datetime] = None

    def find(self, task_id: Optional[str]) -> Optional[Task]:
        if not task_id:
            return None
        return next((task for task in self.tasks if task.id == task_id), None)

    @property
    def active_task(self) -> Optional[Task]:
        return self.find(self.active_task_id)

    def running_tasks(self) -> List[Task]:
        return [task for task in self.tasks if task.status == IN_PROGRESS]


@dataclass
class TransitionResult:
    task: Task
    previous_status: str
    changed: bool = False
    declined: bool = False
    paused_task: Optional[Task] = None
    closed_sessions: List[TimeSession] = field(default_factory=list)


def _moment(now: Optional[datetime]) -> datetime:
    return truncate_ms(ensure_utc(now)) if now is not None else utc_now_ms()


def _notify(notify: Optional[Notify], message: str, level: str = "info") -> None:
    if notify is not None:
        notify(message, level)


def confirmation_prompt(old_status: str, new_status: str) -> Optional[str]:
    """Question the user must accept before ``old_status -> new_status``."""

    if old_status == IN_PROGRESS and new_status == DONE:
        return CONFIRM_COMPLETE
    if old_status == DONE and new_status == IN_PROGRESS:
        return CONFIRM_REOPEN
    return None


def open_session(ctx: TrackerContext, task: Task, now: datetime) -> None:
    task.status = IN_PROGRESS
    task.current_session_start = now
    task.touch(now)
    ctx.active_task_id = task.id
    ctx.session_start = now


def close_session(
    ctx: TrackerContext, task: Task, new_status: str, now: datetime
) -> Optional[TimeSession]:
    """Leave ``IN_PROGRESS``: record the open session and stop the timer."""

    session = None
    if task.current_session_start is not None:
        start = ensure_utc(task.current_session_start)
        # a clock that went backwards leaves nothing to record
        if now > start:
            session = TimeSession.closed(start, now)
            task.record_session(session)
        task.current_session_start = None
    task.status = new_status
    task.touch(now)
    if ctx.active_task_id == task.id:
        ctx.active_task_id = None
        ctx.session_start = None
    return session


def request_status(
    ctx: TrackerContext,
    task_id: str,
    new_status: Optional[str],
    *,
    confirm: Optional[Confirm] = None,
    notify: Optional[Notify] = None,
    now: Optional[datetime] = None,
) -> TransitionResult:
    """Move ``task_id`` to ``new_status`` enforcing the single running timer.

    ``confirm`` is asked for gated transitions (see :func:`confirmation_prompt`);
    when it returns False the result is ``declined`` and nothing changes.
    """

    task = ctx.find(task_id)
    if task is None:
        raise NotFound(f"Task {task_id} not found")

    old_status = task.status
    result = TransitionResult(task=task, previous_status=old_status)
    target = normalize_status(new_status)
    if target is None or target == old_status:
        return result

    prompt = confirmation_prompt(old_status, target)
    if prompt and confirm is not None and not confirm(prompt):
        result.declined = True
        return result

    moment = _moment(now)

    if target == IN_PROGRESS:
        for other in ctx.running_tasks():
            if other.id == task.id:
                continue
            session = close_session(ctx, other, PAUSED, moment)
            result.paused_task = other
            _notify(notify, f"Paused: {other.title}", "info")
            if session is not None:
                result.closed_sessions.append(session)
                _notify(notify, f"Timer stopped: {format_duration(session.duration)} recorded", "info")
        open_session(ctx, task, moment)
        _notify(notify, f"Timer started: {task.title}", "success")
    elif old_status == IN_PROGRESS:
        session = close_session(ctx, task, target, moment)
        if session is not None:
            result.closed_sessions.append(session)
            _notify(notify, f"Timer stopped: {format_duration(session.duration)} recorded", "info")
    else:
        task.status = target
        task.touch(moment)

    result.changed = True
    return result


def remove_task(
    ctx: TrackerContext, task_id: str, *, now: Optional[datetime] = None
) -> Tuple[Task, Optional[TimeSession]]:
    """Drop a task; a running timer is closed and recorded first."""

    task = ctx.find(task_id)
    if task is None:
        raise NotFound(f"Task {task_id} not found")

    session = None
    if task.status == IN_PROGRESS:
        session = close_session(ctx, task, PAUSED, _moment(now))
    ctx.tasks.remove(task)
    if ctx.active_task_id == task.id:
        ctx.active_task_id = None
        ctx.session_start = None
    return task, session


def restore_context(tasks: List[Task]) -> Tuple[TrackerContext, List[Task]]:
    """Rebuild the context from persisted tasks.

    The first running task that has a session start resumes; every other
    running task is demoted to ``PAUSED``. Returns the context and the tasks
    that had to be repaired.
    """

    ctx = TrackerContext(tasks=tasks)
    active = next(
        (t for t in tasks if t.status == IN_PROGRESS and t.current_session_start is not None),
        None,
    )
    if active is not None:
        ctx.active_task_id = active.id
        ctx.session_start = ensure_utc(active.current_session_start)

    repaired: List[Task] = []
    for task in tasks:
        if task is active:
            continue
        if task.status == IN_PROGRESS:
            task.status = PAUSED
            task.current_session_start = None
            repaired.append(task)
        elif task.current_session_start is not None:
            task.current_session_start = None
            repaired.append(task)
    return ctx, repaired


def live_elapsed(ctx: TrackerContext, now: Optional[datetime] = None) -> int:
    """Seconds accrued by the running timer, 0 when idle."""

    if ctx.session_start is None:
        return 0
    current = ensure_utc(now) if now is not None else utc_now_ms()
    return max(0, int((current - ctx.session_start).total_seconds()))


__all__ = [
    "CONFIRM_COMPLETE",
    "CONFIRM_REOPEN",
    "Confirm",
    "Notify",
    "TrackerContext",
    "TransitionResult",
    "close_session",
    "confirmation_prompt",
    "live_elapsed",
    "open_session",
    "remove_task",
    "request_status",
    "restore_context",
]
