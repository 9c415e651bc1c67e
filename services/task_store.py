"""Persistence adapter for the ``tasks`` collection and the ``settings`` record."""
from __future__ import annotations

from typing import List

from models.settings import JiraCredentials
from models.task import Task
from storage.store import KeyValueStore

TASKS_KEY = "tasks"
SETTINGS_KEY = "settings"


class TaskStore:
    def __init__(self, store: KeyValueStore | None = None):
        self.store = store or KeyValueStore()

    def load_tasks(self) -> List[Task]:
        raw = self.store.get(TASKS_KEY) or []
        return [Task.model_validate(item) for item in raw if isinstance(item, dict)]

    def save_tasks(self, tasks: List[Task]) -> None:
        # whole collection re-serialized on every write
        self.store.set(TASKS_KEY, [task.model_dump(mode="json") for task in tasks])

    def load_settings(self) -> JiraCredentials:
        raw = self.store.get(SETTINGS_KEY)
        if not isinstance(raw, dict):
            return JiraCredentials()
        return JiraCredentials.model_validate(raw)

    def save_settings(self, credentials: JiraCredentials) -> None:
        self.store.set(SETTINGS_KEY, credentials.model_dump(mode="json"))

    def clear_settings(self) -> None:
        self.store.delete(SETTINGS_KEY)


__all__ = ["SETTINGS_KEY", "TASKS_KEY", "TaskStore"]
