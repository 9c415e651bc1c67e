from datetime import datetime, timedelta
from pathlib import Path
import sys

sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest

from helpers.formatting import (
    format_clock,
    format_duration,
    format_relative,
    parse_duration,
    parse_tags,
    to_tracker_duration,
)
from utils.datetime_utils import UTC


def test_format_duration_pads_and_does_not_wrap_hours():
    assert format_duration(0) == "00:00:00"
    assert format_duration(3661) == "01:01:01"
    assert format_duration(25 * 3600 + 5) == "25:00:05"
    assert format_duration(123 * 3600) == "123:00:00"


def test_format_duration_clamps_negative_and_floors_fractions():
    assert format_duration(-30) == "00:00:00"
    assert format_duration(None) == "00:00:00"
    assert format_duration(59.9) == "00:00:59"


def test_parse_duration_accepts_formatted_values():
    assert parse_duration("01:01:01") == 3661
    assert parse_duration("123:00:00") == 123 * 3600
    assert parse_duration("1:30") == 5400


@pytest.mark.parametrize("value", ["", "abc", "1:60:00", "1:00:60", "1", "1:2:3:4"])
def test_parse_duration_rejects_invalid(value):
    with pytest.raises(ValueError):
        parse_duration(value)


def test_to_tracker_duration_components():
    assert to_tracker_duration(3600) == "1h"
    assert to_tracker_duration(90 * 60) == "1h 30m"
    assert to_tracker_duration(9000) == "2h 30m"
    assert to_tracker_duration(8 * 3600) == "1d"
    assert to_tracker_duration(5 * 8 * 3600) == "1w"
    week, day = 5 * 8 * 3600, 8 * 3600
    assert to_tracker_duration(week + 2 * day + 3 * 3600 + 4 * 60) == "1w 2d 3h 4m"


def test_to_tracker_duration_under_a_minute_is_zero():
    assert to_tracker_duration(0) == "0m"
    assert to_tracker_duration(59) == "0m"
    assert to_tracker_duration(-10) == "0m"


def test_to_tracker_duration_custom_calendar():
    assert to_tracker_duration(24 * 3600, hours_per_day=24, days_per_week=7) == "1d"
    assert to_tracker_duration(7 * 24 * 3600, hours_per_day=24, days_per_week=7) == "1w"


def test_format_relative_buckets():
    now = datetime(2024, 1, 15, 12, 0, tzinfo=UTC)
    assert format_relative(now - timedelta(seconds=30), now) == "Just now"
    assert format_relative(now - timedelta(minutes=5), now) == "5 min ago"
    assert format_relative(now - timedelta(hours=1), now) == "1 hour ago"
    assert format_relative(now - timedelta(hours=3), now) == "3 hours ago"
    assert format_relative(now - timedelta(days=2), now) == "2 days ago"
    assert format_relative(None, now) == "—"


def test_format_relative_old_dates_show_calendar_date():
    now = datetime(2024, 1, 15, 12, 0, tzinfo=UTC)
    old = now - timedelta(days=30)
    assert format_relative(old, now) == old.astimezone().strftime("%Y-%m-%d")


def test_format_clock_uses_local_time():
    dt = datetime(2024, 1, 15, 9, 5, tzinfo=UTC)
    assert format_clock(dt) == dt.astimezone().strftime("%H:%M")
    assert format_clock(None) == "—"


def test_parse_tags():
    assert parse_tags("backend, urgent , ,ops") == ["backend", "urgent", "ops"]
    assert parse_tags(["a", " b ", ""]) == ["a", "b"]
    assert parse_tags(None) == []


def test_format_duration_round_trips_through_parse():
    for seconds in (0, 59, 3600, 86399, 360000 + 7):
        text = format_duration(seconds)
        assert parse_duration(text) == seconds
        assert format_duration(parse_duration(text)) == text
