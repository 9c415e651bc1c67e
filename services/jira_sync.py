"""Two-way reconciliation of a task's time sessions with Jira worklogs."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Tuple

from core.settings import JIRA, SYNC_LOG_PATH
from helpers.formatting import to_tracker_duration
from models.settings import JiraCredentials
from models.task import Task, TimeSession
from services.errors import NotConfigured, RemoteFetchError, RemotePushError
from services.jira_client import JiraClient
from services.timer import Notify
from utils.datetime_utils import ensure_utc, parse_rfc3339, to_jira_started
from utils.log import ensure_logger


def _iter_text(node: Any) -> Iterator[str]:
    if not isinstance(node, dict):
        return
    if "text" in node:
        yield node.get("text") or ""
    for child in node.get("content") or []:
        yield from _iter_text(child)


def flatten_description(value: Any) -> str:
    """Flatten an Atlassian document into plain text.

    Text nodes inside a top-level block are joined with line breaks, blocks
    are separated by a blank line. Plain strings (API v2) pass through.
    """

    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if not isinstance(value, dict):
        return ""
    blocks = ["\n".join(_iter_text(block)) for block in value.get("content") or []]
    return "\n\n".join(blocks).strip()


@dataclass
class SyncResult:
    pushed: List[TimeSession] = field(default_factory=list)
    pulled: List[TimeSession] = field(default_factory=list)
    failures: List[RemotePushError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def message(self) -> str:
        text = f"Synced with Jira: {len(self.pushed)} pushed, {len(self.pulled)} pulled"
        if self.failures:
            text += f", {len(self.failures)} failed"
        return text


class JiraSync:
    """Reconciles one task at a time against its Jira issue.

    Local sessions and remote worklogs are matched by the exact start instant;
    there is no tolerance window.
    """

    def __init__(
        self,
        credentials: JiraCredentials,
        *,
        client: Optional[JiraClient] = None,
        notify: Optional[Notify] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        self.credentials = credentials
        self._client = client
        self.notify = notify
        self.max_workers = max(1, max_workers or JIRA.push_workers)
        self.logger = ensure_logger("timekeeper.sync", SYNC_LOG_PATH)

    def _ensure_configured(self, task: Task) -> str:
        key = (task.jira_ticket or "").strip()
        if not key or not self.credentials.is_configured:
            raise NotConfigured("Jira credentials not configured")
        return key

    def _emit(self, message: str, level: str) -> None:
        if self.notify is not None:
            self.notify(message, level)

    # ------------------------------------------------------------------
    # Public API
    def reconcile(self, task: Task, *, now: Optional[datetime] = None) -> SyncResult:
        key = self._ensure_configured(task)
        client = self._client or JiraClient(self.credentials)
        try:
            try:
                issue = client.get_issue(key)
                worklogs = client.get_worklogs(key)
            except RemoteFetchError as exc:
                self.logger.error("Fetch for %s failed: %s", key, exc)
                raise
            self._apply_issue(task, issue, now)
            result = self._merge_worklogs(client, task, key, worklogs)
        finally:
            if self._client is None:
                client.close()

        self.logger.info(
            "Reconciled %s: pushed=%d pulled=%d failed=%d",
            key,
            len(result.pushed),
            len(result.pulled),
            len(result.failures),
        )
        return result

    # ------------------------------------------------------------------
    # Steps
    def _apply_issue(self, task: Task, issue: Dict[str, Any], now: Optional[datetime]) -> None:
        fields = issue.get("fields") or {}
        summary = (fields.get("summary") or "").strip()
        if summary:
            task.title = summary
        description = flatten_description(fields.get("description"))
        if description:
            task.description = description
        task.touch(now)

    def _index_worklogs(self, worklogs: List[Dict[str, Any]]) -> Dict[datetime, Dict[str, Any]]:
        indexed: Dict[datetime, Dict[str, Any]] = {}
        for entry in worklogs:
            started = parse_rfc3339(entry.get("started"))
            if started is None:
                self.logger.warning("Skipping worklog without a valid start: %s", entry.get("id"))
                continue
            # a later duplicate replaces an earlier one
            indexed[started] = entry
        return indexed

    def _push_one(self, client: JiraClient, key: str, session: TimeSession) -> None:
        client.add_worklog(
            key,
            time_spent=to_tracker_duration(session.duration),
            started=to_jira_started(session.start, JIRA.started_offset),
        )

    def _pull(self, task: Task, pending: List[Tuple[datetime, Dict[str, Any]]]) -> List[TimeSession]:
        pulled: List[TimeSession] = []
        for started, entry in pending:
            seconds = int(entry.get("timeSpentSeconds") or 0)
            if seconds <= 0:
                self.logger.warning("Skipping empty worklog %s", entry.get("id"))
                continue
            session = TimeSession.from_duration(started, seconds)
            task.record_session(session)
            pulled.append(session)
        return pulled

    def _merge_worklogs(
        self,
        client: JiraClient,
        task: Task,
        key: str,
        worklogs: List[Dict[str, Any]],
    ) -> SyncResult:
        remote_by_started = self._index_worklogs(worklogs)
        local_starts = {ensure_utc(session.start) for session in task.time_sessions}

        to_push = [s for s in task.time_sessions if ensure_utc(s.start) not in remote_by_started]
        to_pull = [(started, entry) for started, entry in remote_by_started.items() if started not in local_starts]

        result = SyncResult()
        if not to_push:
            result.pulled = self._pull(task, to_pull)
            return result

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = {pool.submit(self._push_one, client, key, s): s for s in to_push}
            # pull only touches local state, it does not wait for the pushes
            result.pulled = self._pull(task, to_pull)
            for future in as_completed(futures):
                session = futures[future]
                try:
                    future.result()
                except RemotePushError as exc:
                    exc.session = session
                    result.failures.append(exc)
                    self.logger.warning("Worklog push for %s at %s failed: %s", key, session.start, exc)
                    self._emit(f"Failed to sync worklog with Jira: {exc}", "error")
                else:
                    result.pushed.append(session)
        return result


__all__ = ["JiraSync", "SyncResult", "flatten_description"]
