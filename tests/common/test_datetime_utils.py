from datetime import date, datetime, timedelta, timezone

import pytest

from src.timekeeping.timekeeping.common.datetime_utils import (
    minutes_between,
    night_overlap_hours,
    parse_iso_datetime,
    parse_shift_time,
    shift_window,
)
from src.timekeeping.timekeeping.core.exceptions import DataInvariantError, ValidationError


def test_shift_window_rolls_overnight_end_to_next_day():
    start, end = shift_window(date(2025, 1, 6), "22:00:00", "06:00:00")

    assert start == datetime(2025, 1, 6, 22, 0)
    assert end == datetime(2025, 1, 7, 6, 0)


def test_shift_time_accepts_driver_timedelta():
    assert parse_shift_time(timedelta(hours=8, minutes=30)).strftime("%H:%M") == "08:30"


@pytest.mark.parametrize("value", [None, "", "8", "25:00:00", "08:00:00:00", "eight"])
def test_bad_shift_times_are_data_errors(value):
    with pytest.raises(DataInvariantError):
        parse_shift_time(value)


def test_started_minute_counts_as_a_full_minute():
    start = datetime(2025, 1, 6, 9, 5)

    assert minutes_between(start, datetime(2025, 1, 6, 9, 15)) == 10
    assert minutes_between(start, datetime(2025, 1, 6, 9, 15, 1)) == 11
    assert minutes_between(start, start) == 0


@pytest.mark.parametrize(
    "start, end, hours",
    [
        (datetime(2025, 1, 6, 8, 0), datetime(2025, 1, 6, 17, 0), 0.0),
        (datetime(2025, 1, 6, 20, 0), datetime(2025, 1, 6, 23, 0), 1.0),
        (datetime(2025, 1, 6, 21, 30), datetime(2025, 1, 6, 22, 20), 0.33),
        (datetime(2025, 1, 6, 22, 0), datetime(2025, 1, 7, 6, 0), 8.0),
        (datetime(2025, 1, 7, 4, 0), datetime(2025, 1, 7, 9, 0), 2.0),
        (datetime(2025, 1, 6, 18, 0), datetime(2025, 1, 8, 0, 0), 10.0),
    ],
)
def test_night_overlap(start, end, hours):
    assert night_overlap_hours(start, end) == hours


def local_naive(value):
    return value.astimezone().replace(tzinfo=None)


@pytest.mark.parametrize("text", ["2025-01-06T09:00:00+00:00", "2025-01-06T09:00:00Z"])
def test_utc_timestamps_become_local_naive_time(text):
    parsed = parse_iso_datetime(text)

    assert parsed.tzinfo is None
    assert parsed == local_naive(datetime(2025, 1, 6, 9, 0, tzinfo=timezone.utc))


def test_offset_timestamps_keep_their_instant():
    parsed = parse_iso_datetime("2025-01-06T17:00:00+08:00")

    assert parsed == local_naive(datetime(2025, 1, 6, 9, 0, tzinfo=timezone.utc))


def test_naive_timestamps_are_taken_as_local():
    assert parse_iso_datetime("2025-01-06T09:00:00") == datetime(2025, 1, 6, 9, 0)
    assert parse_iso_datetime(datetime(2025, 1, 6, 9, 0)) == datetime(2025, 1, 6, 9, 0)


def test_aware_datetimes_are_normalised_too():
    aware = datetime(2025, 1, 6, 9, 0, tzinfo=timezone.utc)

    assert parse_iso_datetime(aware) == local_naive(aware)


def test_garbage_timestamp_is_a_validation_error():
    with pytest.raises(ValidationError):
        parse_iso_datetime("yesterday at nine")
