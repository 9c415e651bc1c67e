# timekeeper/models/task.py
from __future__ import annotations

import uuid
from datetime import datetime, timedelta
from typing import List, Optional

from sqlmodel import Field, SQLModel

from core.statuses import DEFAULT_STATUS, IN_PROGRESS
from utils.datetime_utils import ensure_utc, utc_now_ms


def new_id() -> str:
    return uuid.uuid4().hex


class TimeSession(SQLModel):
    """A closed interval of tracked time. Never mutated after it is recorded."""

    start: datetime
    end: datetime
    duration: int = 0

    @classmethod
    def closed(cls, start: datetime, end: datetime) -> "TimeSession":
        start = ensure_utc(start)
        end = ensure_utc(end)
        return cls(start=start, end=end, duration=int((end - start).total_seconds()))

    @classmethod
    def from_duration(cls, start: datetime, seconds: int) -> "TimeSession":
        start = ensure_utc(start)
        return cls(start=start, end=start + timedelta(seconds=seconds), duration=int(seconds))


class Comment(SQLModel):
    id: str = Field(default_factory=new_id)
    text: str
    created_at: datetime = Field(default_factory=utc_now_ms)


class Task(SQLModel):
    id: str = Field(default_factory=new_id)
    title: str
    description: str = ""
    jira_ticket: str = ""
    tags: List[str] = Field(default_factory=list)
    is_recurring: bool = False
    status: str = DEFAULT_STATUS
    created_at: datetime = Field(default_factory=utc_now_ms)
    updated_at: datetime = Field(default_factory=utc_now_ms)
    current_session_start: Optional[datetime] = None
    time_sessions: List[TimeSession] = Field(default_factory=list)
    total_time: int = 0
    comments: List[Comment] = Field(default_factory=list)

    @property
    def is_running(self) -> bool:
        return self.status == IN_PROGRESS

    def touch(self, now: Optional[datetime] = None) -> None:
        self.updated_at = ensure_utc(now) if now is not None else utc_now_ms()

    def record_session(self, session: TimeSession) -> None:
        # total_time is a cached aggregate: always moved together with the list
        self.time_sessions.append(session)
        self.total_time += session.duration


__all__ = ["Comment", "Task", "TimeSession", "new_id"]
