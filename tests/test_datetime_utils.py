from datetime import date, datetime, timedelta, timezone
from pathlib import Path
import sys

sys.path.append(str(Path(__file__).resolve().parents[1]))

from utils.datetime_utils import (
    UTC,
    end_of_day,
    ensure_utc,
    first_of_month,
    parse_date_input,
    parse_rfc3339,
    start_of_day,
    to_jira_started,
    truncate_ms,
)


def test_parse_date_input_iso_only():
    assert parse_date_input("2023-12-01").isoformat() == "2023-12-01"
    assert parse_date_input("01.12.2023") is None
    assert parse_date_input("  2023-12-01 ") == date(2023, 12, 1)


def test_parse_date_input_rejects_garbage():
    assert parse_date_input("") is None
    assert parse_date_input(None) is None
    assert parse_date_input("12/01/2023") is None
    assert parse_date_input("2023-02-30") is None


def test_parse_rfc3339_jira_offset_without_colon():
    parsed = parse_rfc3339("2024-01-15T09:30:00.000+0000")
    assert parsed == datetime(2024, 1, 15, 9, 30, tzinfo=UTC)


def test_parse_rfc3339_converts_offsets_to_utc():
    parsed = parse_rfc3339("2024-01-15T11:30:00.250+0200")
    assert parsed == datetime(2024, 1, 15, 9, 30, 0, 250000, tzinfo=UTC)
    assert parse_rfc3339("2024-01-15T09:30:00Z") == datetime(2024, 1, 15, 9, 30, tzinfo=UTC)
    assert parse_rfc3339("2024-01-15T04:30:00-05:00") == datetime(2024, 1, 15, 9, 30, tzinfo=UTC)


def test_parse_rfc3339_long_fraction_and_invalid():
    parsed = parse_rfc3339("2024-01-15T09:30:00.123456789Z")
    assert parsed.microsecond == 123456
    assert parse_rfc3339("not a date") is None
    assert parse_rfc3339("") is None


def test_to_jira_started_uses_milliseconds_and_utc():
    dt = datetime(2024, 1, 15, 11, 30, 5, 987654, tzinfo=timezone(timedelta(hours=2)))
    assert to_jira_started(dt) == "2024-01-15T09:30:05.987+0000"


def test_jira_started_round_trips_through_parser():
    dt = truncate_ms(datetime(2024, 1, 15, 9, 30, 5, 987654, tzinfo=UTC))
    assert parse_rfc3339(to_jira_started(dt)) == dt


def test_ensure_utc_treats_naive_as_utc():
    naive = datetime(2024, 1, 15, 9, 30)
    assert ensure_utc(naive) == datetime(2024, 1, 15, 9, 30, tzinfo=UTC)
    assert ensure_utc(None) is None


def test_day_bounds_are_local_and_inclusive():
    day = date(2024, 1, 15)
    start = start_of_day(day)
    end = end_of_day(day)
    assert start.tzinfo is not None
    assert (start.hour, start.minute, start.second) == (0, 0, 0)
    assert (end.hour, end.minute, end.second, end.microsecond) == (23, 59, 59, 999000)
    assert start.date() == end.date() == day


def test_first_of_month():
    assert first_of_month(date(2024, 5, 17)) == date(2024, 5, 1)
