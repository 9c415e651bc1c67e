"""Jira connection settings stored under the ``settings`` key."""
from __future__ import annotations

from sqlmodel import SQLModel


class JiraCredentials(SQLModel):
    jira_url: str = ""
    jira_email: str = ""
    jira_token: str = ""

    @property
    def base_url(self) -> str:
        return (self.jira_url or "").strip().rstrip("/")

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url and (self.jira_email or "").strip() and (self.jira_token or "").strip())


__all__ = ["JiraCredentials"]
