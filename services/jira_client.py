"""Minimal Jira REST client used by the synchronisation service."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import httpx

from core.settings import JIRA
from models.settings import JiraCredentials
from services.errors import NotConfigured, RemoteFetchError, RemotePushError, ValidationError


class JiraClient:
    """Thin wrapper over ``httpx.Client``.

    A malformed URL raises :class:`NotConfigured`. Every transport failure,
    non-2xx status or undecodable body is converted into
    :class:`RemoteFetchError` (reads) or :class:`RemotePushError` (worklog
    writes); ``httpx`` exceptions never leak to callers.
    """

    def __init__(
        self,
        credentials: JiraCredentials,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.credentials = credentials
        try:
            self._client = httpx.Client(
                base_url=credentials.base_url + JIRA.api_prefix,
                auth=httpx.BasicAuth(credentials.jira_email.strip(), credentials.jira_token.strip()),
                headers={"Accept": "application/json", "Content-Type": "application/json"},
                timeout=httpx.Timeout(timeout or JIRA.request_timeout_sec),
                transport=transport,
            )
        except httpx.InvalidURL as exc:
            raise NotConfigured("Invalid Jira URL") from exc

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "JiraClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Reads
    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            response = self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            raise RemoteFetchError(f"GET {path} failed", body=str(exc)) from exc
        if not response.is_success:
            raise RemoteFetchError(
                f"Jira API error on GET {path}",
                status=response.status_code,
                body=response.text,
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise RemoteFetchError(
                f"Invalid JSON from GET {path}",
                status=response.status_code,
                body=response.text,
            ) from exc
        return data if isinstance(data, dict) else {}

    def get_issue(self, issue_key: str) -> Dict[str, Any]:
        return self._get(f"/issue/{issue_key}")

    def get_worklogs(self, issue_key: str) -> List[Dict[str, Any]]:
        """Return every worklog of ``issue_key``, following pagination."""

        worklogs: List[Dict[str, Any]] = []
        start_at = 0
        while True:
            data = self._get(
                f"/issue/{issue_key}/worklog",
                params={"startAt": start_at, "maxResults": JIRA.worklog_page_size},
            )
            page = data.get("worklogs") or []
            worklogs.extend(page)
            start_at += len(page)
            total = data.get("total")
            if not page or total is None or start_at >= int(total):
                break
        return worklogs

    def myself(self) -> Dict[str, Any]:
        return self._get("/myself")

    # ------------------------------------------------------------------
    # Writes
    def add_worklog(self, issue_key: str, *, time_spent: str, started: str) -> Dict[str, Any]:
        path = f"/issue/{issue_key}/worklog"
        try:
            response = self._client.post(
                path,
                json={"timeSpent": time_spent, "started": started},
                headers={"X-Atlassian-Token": "no-check"},
            )
        except httpx.HTTPError as exc:
            raise RemotePushError(f"POST {path} failed", body=str(exc)) from exc
        if not response.is_success:
            raise RemotePushError(
                f"Jira API error on POST {path}",
                status=response.status_code,
                body=response.text,
            )
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}


def check_connection(
    credentials: JiraCredentials,
    *,
    transport: Optional[httpx.BaseTransport] = None,
) -> Tuple[bool, str]:
    """Validate credentials with ``GET /myself``. Never raises."""

    if not credentials.is_configured:
        return False, "Please fill in all Jira credentials"
    try:
        with JiraClient(credentials, transport=transport) as client:
            client.myself()
    except ValidationError as exc:
        return False, str(exc)
    except RemoteFetchError as exc:
        if exc.status in (401, 403):
            return False, "Authentication failed"
        return False, str(exc)
    return True, "Connection successful"


__all__ = ["JiraClient", "check_connection"]
