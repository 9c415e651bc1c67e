# timekeeper/services/tasks.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

from core.settings import TASKS_LOG_PATH, UI
from core.statuses import DONE, PAUSED
from helpers.formatting import parse_tags
from models.task import Comment, Task
from services.errors import NotFound, ValidationError
from services.jira_sync import JiraSync, SyncResult
from services.task_store import TaskStore
from services.timer import (
    Confirm,
    Notify,
    TrackerContext,
    TransitionResult,
    live_elapsed,
    remove_task,
    request_status,
    restore_context,
)
from utils.log import ensure_logger


def _require_text(value: Optional[str], message: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(message)
    return text


class TaskService:
    """Application facade over the task collection.

    Owns the :class:`TrackerContext`, persists the whole collection after
    every mutation and reports outcomes through ``notify(message, level)``.
    """

    EVENTS = ("after_create", "after_update", "after_delete", "after_status")

    def __init__(self, store: Optional[TaskStore] = None, *, notify: Optional[Notify] = None):
        self.store = store or TaskStore()
        self.logger = ensure_logger("timekeeper.tasks", TASKS_LOG_PATH)
        self.notify: Notify = notify or self._log_notification
        self.ctx = TrackerContext()
        self._listeners: Dict[str, List[Callable]] = {event: [] for event in self.EVENTS}

    # ---------- listeners ----------
    def subscribe(self, event: str, callback: Callable) -> None:
        if event not in self._listeners:
            raise ValueError(f"Unsupported event: {event}")
        if callback not in self._listeners[event]:
            self._listeners[event].append(callback)

    def unsubscribe(self, event: str, callback: Callable) -> None:
        listeners = self._listeners.get(event, [])
        if callback in listeners:
            listeners.remove(callback)

    def _emit(self, event: str, *args) -> None:
        for listener in list(self._listeners.get(event, [])):
            try:
                listener(*args)
            except Exception:
                self.logger.exception("Listener for %s failed", event)

    def _log_notification(self, message: str, level: str = "info") -> None:
        self.logger.log(logging.ERROR if level == "error" else logging.INFO, message)

    def _not_found(self, what: str) -> None:
        self.logger.warning("%s", what)
        self.notify(what, "error")

    # ---------- state ----------
    @property
    def tasks(self) -> List[Task]:
        return self.ctx.tasks

    def load(self) -> TrackerContext:
        """Restore tasks and the running timer from the store."""
        self.ctx, repaired = restore_context(self.store.load_tasks())
        if repaired:
            self.logger.warning("Demoted %d stale running task(s) on restore", len(repaired))
            self._persist()
        return self.ctx

    def _persist(self) -> None:
        self.store.save_tasks(self.ctx.tasks)

    def get(self, task_id: Optional[str]) -> Optional[Task]:
        return self.ctx.find(task_id)

    def list_active(self) -> List[Task]:
        return [t for t in self.ctx.tasks if t.status != DONE]

    def list_recent_done(self, limit: Optional[int] = None) -> List[Task]:
        done = [t for t in self.ctx.tasks if t.status == DONE]
        return done[: limit or UI.recent_done_limit]

    def elapsed(self, task_id: str, now: Optional[datetime] = None) -> int:
        """Recorded seconds plus the live timer when ``task_id`` is running."""
        task = self.get(task_id)
        if task is None:
            return 0
        live = live_elapsed(self.ctx, now) if self.ctx.active_task_id == task.id else 0
        return task.total_time + live

    # ---------- tasks ----------
    def create_task(
        self,
        title: str,
        *,
        description: str = "",
        jira_ticket: str = "",
        tags: str | Iterable[str] | None = None,
        is_recurring: bool = False,
    ) -> Task:
        task = Task(
            title=_require_text(title, "Task title is required"),
            description=(description or "").strip(),
            jira_ticket=(jira_ticket or "").strip(),
            tags=parse_tags(tags),
            is_recurring=bool(is_recurring),
        )
        self.ctx.tasks.append(task)
        self._persist()
        self.logger.info("Task created: %s", task.id)
        self.notify("Task created successfully", "success")
        self._emit("after_create", task.id)
        return task

    def update_task(
        self,
        task_id: str,
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
        jira_ticket: Optional[str] = None,
        tags: str | Iterable[str] | None = None,
        is_recurring: Optional[bool] = None,
    ) -> Optional[Task]:
        clean_title = _require_text(title, "Task title is required") if title is not None else None
        task = self.get(task_id)
        if task is None:
            self._not_found("Task not found")
            return None
        if clean_title is not None:
            task.title = clean_title
        if description is not None:
            task.description = description.strip()
        if jira_ticket is not None:
            task.jira_ticket = jira_ticket.strip()
        if tags is not None:
            task.tags = parse_tags(tags)
        if is_recurring is not None:
            task.is_recurring = bool(is_recurring)
        task.touch()
        self._persist()
        self.notify("Task updated successfully", "success")
        self._emit("after_update", task.id)
        return task

    def delete_task(self, task_id: str) -> Optional[Task]:
        try:
            task, session = remove_task(self.ctx, task_id)
        except NotFound:
            self._not_found("Task not found")
            return None
        if session is not None:
            self.logger.info("Closed %ss session of deleted task %s", session.duration, task.id)
        self._persist()
        self.notify("Task deleted successfully", "success")
        self._emit("after_delete", task.id)
        return task

    # ---------- comments ----------
    def add_comment(self, task_id: str, text: str) -> Optional[Comment]:
        body = _require_text(text, "Please enter a comment")
        task = self.get(task_id)
        if task is None:
            self._not_found("Task not found")
            return None
        comment = Comment(text=body)
        task.comments.append(comment)
        self._persist()
        self.notify("Comment added", "success")
        return comment

    def delete_comment(self, task_id: str, comment_id: str) -> bool:
        task = self.get(task_id)
        if task is None:
            self._not_found("Task not found")
            return False
        remaining = [c for c in task.comments if c.id != comment_id]
        if len(remaining) == len(task.comments):
            self._not_found("Comment not found")
            return False
        task.comments = remaining
        self._persist()
        self.notify("Comment deleted", "success")
        return True

    # ---------- status ----------
    def set_status(
        self,
        task_id: str,
        status: Optional[str],
        *,
        confirm: Optional[Confirm] = None,
        now: Optional[datetime] = None,
    ) -> Optional[TransitionResult]:
        try:
            result = request_status(
                self.ctx, task_id, status, confirm=confirm, notify=self.notify, now=now
            )
        except NotFound:
            self._not_found("Task not found")
            return None
        if result.changed:
            self._persist()
            self.logger.info("Task %s: %s -> %s", task_id, result.previous_status, result.task.status)
            self._emit("after_status", task_id, result.previous_status, result.task.status)
        return result

    def start_new_task_draft(self) -> None:
        """Pause the running timer before a new task form is opened."""
        active = self.ctx.active_task
        if active is not None:
            self.set_status(active.id, PAUSED)

    # ---------- Jira ----------
    def sync_task(self, task_id: str, reconciler: JiraSync) -> Optional[SyncResult]:
        """Reconcile ``task_id`` with Jira and persist the collection.

        ``NotConfigured`` and ``RemoteFetchError`` propagate with the task
        untouched; push failures are reported inside the result.
        """
        task = self.get(task_id)
        if task is None:
            self._not_found("Task not found")
            return None
        result = reconciler.reconcile(task)
        self._persist()
        self.notify(result.message(), "success" if result.ok else "error")
        self._emit("after_update", task.id)
        return result


__all__ = ["TaskService"]
