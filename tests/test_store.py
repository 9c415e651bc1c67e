from datetime import datetime
from pathlib import Path
import sys

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models.settings import JiraCredentials
from models.task import Comment, Task, TimeSession
from services.task_store import SETTINGS_KEY, TASKS_KEY
from utils.datetime_utils import UTC


def test_missing_key_returns_default(kv_store):
    assert kv_store.get("nope") is None
    assert kv_store.get("nope", []) == []


def test_set_replaces_whole_document(kv_store):
    kv_store.set("tasks", [{"id": "a"}, {"id": "b"}])
    kv_store.set("tasks", [{"id": "c"}])
    assert kv_store.get("tasks") == [{"id": "c"}]
    assert kv_store.keys() == ["tasks"]


def test_delete_is_idempotent(kv_store):
    kv_store.set("settings", {"jira_url": "x"})
    kv_store.delete("settings")
    kv_store.delete("settings")
    assert kv_store.get("settings") is None


def test_task_collection_persists_sessions_and_comments(task_store, kv_store):
    start = datetime(2024, 1, 15, 9, 0, tzinfo=UTC)
    task = Task(title="Write report", jira_ticket="ABC-1", tags=["docs"])
    task.record_session(TimeSession.from_duration(start, 1800))
    task.comments.append(Comment(text="halfway"))

    task_store.save_tasks([task])
    raw = kv_store.get(TASKS_KEY)
    assert raw[0]["time_sessions"][0]["duration"] == 1800

    (loaded,) = task_store.load_tasks()
    assert loaded.id == task.id
    assert loaded.jira_ticket == "ABC-1"
    assert loaded.time_sessions[0].start == start
    assert loaded.total_time == 1800
    assert loaded.comments[0].text == "halfway"


def test_load_tasks_on_empty_store(task_store):
    assert task_store.load_tasks() == []


def test_settings_default_and_save(task_store, kv_store):
    empty = task_store.load_settings()
    assert (empty.jira_url, empty.jira_email, empty.jira_token) == ("", "", "")
    assert not empty.is_configured

    creds = JiraCredentials(
        jira_url="https://team.atlassian.net/",
        jira_email="me@example.com",
        jira_token="secret",
    )
    task_store.save_settings(creds)
    assert kv_store.get(SETTINGS_KEY)["jira_email"] == "me@example.com"

    loaded = task_store.load_settings()
    assert loaded.base_url == "https://team.atlassian.net"
    assert loaded.is_configured

    task_store.clear_settings()
    assert not task_store.load_settings().is_configured
