"""Models exposed by the Timekeeper application."""
from .settings import JiraCredentials
from .store_entry import StoreEntry
from .task import Comment, Task, TimeSession

__all__ = ["Comment", "JiraCredentials", "StoreEntry", "Task", "TimeSession"]
