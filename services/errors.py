"""Error kinds surfaced to the UI layer."""
from __future__ import annotations

from typing import Optional


class TrackerError(Exception):
    """Base class for all errors raised by Timekeeper services."""


class ValidationError(TrackerError):
    """Invalid user input; raised before any state is mutated."""


class NotConfigured(ValidationError):
    """The task has no Jira ticket or the Jira credentials are incomplete."""


class NotFound(TrackerError):
    """A task or comment id is absent from the collection."""


class RemoteError(TrackerError):
    def __init__(self, message: str, *, status: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body

    def __str__(self) -> str:
        base = super().__str__()
        if self.status is None:
            return f"{base}: {self.body}" if self.body else base
        return f"{base}: {self.status} - {self.body}"


class RemoteFetchError(RemoteError):
    """A GET against Jira failed; the whole reconcile is aborted."""


class RemotePushError(RemoteError):
    """A single worklog POST failed; siblings and the pull phase continue."""

    def __init__(self, message: str, *, status: Optional[int] = None, body: str = "", session=None):
        super().__init__(message, status=status, body=body)
        self.session = session


__all__ = [
    "NotConfigured",
    "NotFound",
    "RemoteError",
    "RemoteFetchError",
    "RemotePushError",
    "TrackerError",
    "ValidationError",
]
