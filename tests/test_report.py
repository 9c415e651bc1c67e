from datetime import date, datetime, timedelta
from pathlib import Path
import sys

sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest

from core.statuses import IN_PROGRESS
from models.task import Task, TimeSession
from services.errors import ValidationError
from services.report import build_report, default_range, generate_report, report_window

DAY = date(2024, 1, 15)


def _local(day, hour, minute=0):
    return datetime(day.year, day.month, day.day, hour, minute).astimezone()


def _task(title, *spans):
    task = Task(title=title)
    for start, end in spans:
        task.record_session(TimeSession.closed(start, end))
    return task


def test_window_is_local_midnight_to_last_millisecond():
    start, end = report_window(DAY, DAY)
    assert start == _local(DAY, 0)
    assert end - start == timedelta(days=1) - timedelta(milliseconds=1)


def test_sessions_inside_window_count_fully():
    task = _task("Work", (_local(DAY, 9), _local(DAY, 10, 30)))

    report = build_report([task], DAY, DAY)

    assert report.summary.total_time == 5400
    assert report.summary.session_count == 1
    assert report.entries[0].total_in_range == 5400


def test_session_crossing_midnight_is_clipped_on_both_days():
    previous = DAY - timedelta(days=1)
    task = _task("Late", (_local(previous, 23), _local(DAY, 1)))

    first_day = build_report([task], previous, previous)
    second_day = build_report([task], DAY, DAY)
    both = build_report([task], previous, DAY)

    assert first_day.summary.total_time == 3600
    assert second_day.summary.total_time == 3600
    assert both.summary.total_time == 7200
    clipped = second_day.entries[0].sessions[0]
    assert clipped.clipped_start == _local(DAY, 0)
    assert clipped.duration == 7200


def test_tasks_without_sessions_in_range_are_left_out():
    inside = _task("Inside", (_local(DAY, 9), _local(DAY, 10)))
    outside = _task("Outside", (_local(DAY + timedelta(days=3), 9), _local(DAY + timedelta(days=3), 10)))
    empty = Task(title="Empty")

    report = build_report([inside, outside, empty], DAY, DAY)

    assert [e.task.title for e in report.entries] == ["Inside"]
    assert report.summary.task_count == 1


def test_entries_sorted_by_title_case_insensitively():
    span = (_local(DAY, 9), _local(DAY, 10))
    tasks = [_task("beta", span), _task("Alpha", span), _task("gamma", span)]

    report = build_report(tasks, DAY, DAY)

    assert [e.task.title for e in report.entries] == ["Alpha", "beta", "gamma"]


def test_sessions_sorted_by_start_within_entry():
    task = _task(
        "Work",
        (_local(DAY, 14), _local(DAY, 15)),
        (_local(DAY, 9), _local(DAY, 10)),
    )

    sessions = build_report([task], DAY, DAY).entries[0].sessions

    assert [s.clipped_start for s in sessions] == [_local(DAY, 9), _local(DAY, 14)]


def test_running_session_is_included_up_to_now():
    task = Task(title="Live", status=IN_PROGRESS, current_session_start=_local(DAY, 9))

    report = build_report([task], DAY, DAY, now=_local(DAY, 9, 45))

    session = report.entries[0].sessions[0]
    assert session.live
    assert session.clipped_duration == 45 * 60
    assert task.time_sessions == []


def test_empty_report():
    report = build_report([], DAY, DAY)
    assert report.is_empty
    assert report.summary.total_time == 0
    assert report.label.startswith("2024-01-15 — 2024-01-15, generated ")


def test_generate_report_validates_input():
    with pytest.raises(ValidationError, match="Please select both a start and end date"):
        generate_report([], "", "2024-01-15")
    with pytest.raises(ValidationError, match="YYYY-MM-DD"):
        generate_report([], "15/01/2024", "2024-01-15")
    with pytest.raises(ValidationError, match="cannot be after"):
        generate_report([], "2024-01-16", "2024-01-15")


def test_generate_report_parses_dates():
    task = _task("Work", (_local(DAY, 9), _local(DAY, 10)))
    report = generate_report([task], "2024-01-15", "2024-01-15")
    assert (report.start_date, report.end_date) == (DAY, DAY)
    assert report.summary.total_time == 3600


def test_default_range_is_month_to_date():
    assert default_range(date(2024, 5, 17)) == (date(2024, 5, 1), date(2024, 5, 17))


def test_late_session_on_new_years_day_counts_one_hour():
    task = _task("Late", (_local(date(2024, 1, 1), 23), _local(date(2024, 1, 2), 1)))

    report = build_report([task], date(2024, 1, 1), date(2024, 1, 1))

    assert report.summary.total_time == 3600
