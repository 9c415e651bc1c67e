from datetime import datetime, timedelta
from pathlib import Path
import sys

sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest

from core.statuses import DONE, IN_PROGRESS, PAUSED
from models.settings import JiraCredentials
from models.task import Task
from services.errors import NotConfigured, ValidationError
from services.jira_sync import JiraSync, SyncResult
from services.tasks import TaskService
from utils.datetime_utils import UTC

T0 = datetime(2024, 1, 15, 9, 0, tzinfo=UTC)


@pytest.fixture
def messages():
    return []


@pytest.fixture
def svc(task_store, messages):
    service = TaskService(task_store, notify=lambda m, level="info": messages.append((m, level)))
    service.load()
    return service


def _reload(task_store):
    fresh = TaskService(task_store, notify=lambda m, level="info": None)
    fresh.load()
    return fresh


def test_create_task_persists_and_notifies(svc, task_store, messages):
    task = svc.create_task("  Write docs ", jira_ticket=" DOC-1 ", tags="docs, writing")

    assert task.title == "Write docs"
    assert task.jira_ticket == "DOC-1"
    assert task.tags == ["docs", "writing"]
    assert messages[-1] == ("Task created successfully", "success")
    assert [t.id for t in _reload(task_store).tasks] == [task.id]


def test_create_task_requires_title(svc, task_store):
    with pytest.raises(ValidationError, match="Task title is required"):
        svc.create_task("   ")
    assert task_store.load_tasks() == []


def test_update_task_changes_only_given_fields(svc, task_store):
    task = svc.create_task("Old", description="keep me")

    svc.update_task(task.id, title="New", is_recurring=True)

    stored = _reload(task_store).get(task.id)
    assert stored.title == "New"
    assert stored.description == "keep me"
    assert stored.is_recurring


def test_update_missing_task_reports_not_found(svc, messages):
    assert svc.update_task("missing", title="x") is None
    assert messages[-1] == ("Task not found", "error")


def test_update_with_blank_title_is_rejected(svc):
    task = svc.create_task("Title")
    with pytest.raises(ValidationError):
        svc.update_task(task.id, title=" ")
    assert svc.get(task.id).title == "Title"


def test_set_status_persists_and_emits(svc, task_store):
    task = svc.create_task("Work")
    events = []
    svc.subscribe("after_status", lambda *args: events.append(args))

    svc.set_status(task.id, IN_PROGRESS, now=T0)
    svc.set_status(task.id, PAUSED, now=T0 + timedelta(minutes=15))

    assert events == [(task.id, "TODO", IN_PROGRESS), (task.id, IN_PROGRESS, PAUSED)]
    stored = _reload(task_store).get(task.id)
    assert stored.status == PAUSED
    assert stored.total_time == 900


def test_declined_status_change_is_not_persisted(svc, task_store):
    task = svc.create_task("Work")
    svc.set_status(task.id, IN_PROGRESS, now=T0)

    result = svc.set_status(task.id, DONE, confirm=lambda _: False, now=T0 + timedelta(minutes=1))

    assert result.declined
    assert _reload(task_store).get(task.id).status == IN_PROGRESS


def test_set_status_missing_task(svc, messages):
    assert svc.set_status("missing", IN_PROGRESS) is None
    assert messages[-1] == ("Task not found", "error")


def test_failing_listener_does_not_break_the_operation(svc):
    svc.subscribe("after_create", lambda *_: 1 / 0)
    task = svc.create_task("Still created")
    assert svc.get(task.id) is task


def test_unknown_event_is_rejected(svc):
    with pytest.raises(ValueError):
        svc.subscribe("before_everything", lambda: None)


def test_delete_running_task_records_its_session(svc, task_store, messages):
    task = svc.create_task("Doomed")
    svc.set_status(task.id, IN_PROGRESS)

    removed = svc.delete_task(task.id)

    assert removed is task
    assert task.status == PAUSED
    assert svc.ctx.active_task_id is None
    assert _reload(task_store).tasks == []
    assert messages[-1] == ("Task deleted successfully", "success")


def test_delete_missing_task(svc, messages):
    assert svc.delete_task("missing") is None
    assert messages[-1] == ("Task not found", "error")


def test_comments(svc, task_store):
    task = svc.create_task("Discuss")
    comment = svc.add_comment(task.id, "  first  ")
    assert comment.text == "first"

    with pytest.raises(ValidationError, match="Please enter a comment"):
        svc.add_comment(task.id, "")

    assert svc.delete_comment(task.id, "nope") is False
    assert svc.delete_comment(task.id, comment.id) is True
    assert _reload(task_store).get(task.id).comments == []


def test_load_repairs_stale_running_tasks(task_store):
    a = Task(title="A", status=IN_PROGRESS, current_session_start=T0)
    b = Task(title="B", status=IN_PROGRESS, current_session_start=T0)
    task_store.save_tasks([a, b])

    service = _reload(task_store)

    assert service.ctx.active_task_id == a.id
    assert [t.status for t in task_store.load_tasks()] == [IN_PROGRESS, PAUSED]


def test_elapsed_includes_live_timer(svc):
    task = svc.create_task("Timed")
    svc.set_status(task.id, IN_PROGRESS, now=T0)
    assert svc.elapsed(task.id, T0 + timedelta(seconds=90)) == 90
    assert svc.elapsed("missing") == 0


def test_start_new_task_draft_pauses_running_timer(svc):
    task = svc.create_task("Running")
    svc.set_status(task.id, IN_PROGRESS)

    svc.start_new_task_draft()

    assert task.status == PAUSED
    assert svc.ctx.active_task_id is None


def test_lists(svc):
    first = svc.create_task("First")
    second = svc.create_task("Second")
    svc.set_status(second.id, DONE)

    assert svc.list_active() == [first]
    assert svc.list_recent_done() == [second]
    assert svc.list_recent_done(limit=1) == [second]


class _FakeReconciler:
    def __init__(self, result):
        self.result = result
        self.tasks = []

    def reconcile(self, task):
        self.tasks.append(task)
        task.title = "From Jira"
        return self.result


def test_sync_task_persists_and_reports(svc, task_store, messages):
    task = svc.create_task("Local", jira_ticket="ABC-1")
    reconciler = _FakeReconciler(SyncResult())

    result = svc.sync_task(task.id, reconciler)

    assert result is reconciler.result
    assert reconciler.tasks == [task]
    assert _reload(task_store).get(task.id).title == "From Jira"
    assert messages[-1] == ("Synced with Jira: 0 pushed, 0 pulled", "success")


def test_sync_task_without_credentials_raises(svc, task_store):
    task = svc.create_task("Local", jira_ticket="ABC-1")

    with pytest.raises(NotConfigured, match="Jira credentials not configured"):
        svc.sync_task(task.id, JiraSync(JiraCredentials()))

    assert _reload(task_store).get(task.id).title == "Local"


def test_unsubscribed_listener_is_not_called(svc):
    calls = []
    listener = lambda *args: calls.append(args)
    svc.subscribe("after_create", listener)
    svc.subscribe("after_create", listener)
    svc.unsubscribe("after_create", listener)

    svc.create_task("Quiet")

    assert calls == []
