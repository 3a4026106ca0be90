from datetime import datetime

import pytest

from care_schedule.utils.date_helper import (
    day_of_week, days_in_month, is_date_locked, make_ts, month_week_index_map,
    next_month, normalize_ts, parse_ts, prev_month, shift_ts, ts_hhmm, week_dates, week_first_day,
    week_start,
)


def test_day_of_week_starts_on_sunday():
    assert day_of_week("2025-08-03") == 0
    assert day_of_week("2025-08-01") == 5
    assert day_of_week("2025-08-02") == 6


def test_days_in_month_handles_leap_year():
    assert len(days_in_month(2024, 2)) == 29
    assert len(days_in_month(2025, 2)) == 28


def test_is_date_locked():
    assert is_date_locked("2025-08-09", "2025-08-10")
    assert not is_date_locked("2025-08-10", "2025-08-10")
    assert not is_date_locked("2025-08-01", None)


def test_parse_ts_converts_offsets_to_naive_local():
    expected = datetime.fromisoformat("2025-08-05T10:00:00+00:00").astimezone().replace(tzinfo=None)
    assert parse_ts("2025-08-05T10:00:00+00:00") == expected
    assert parse_ts("2025-08-05T10:00:00").tzinfo is None
    assert normalize_ts("2025-08-05T07:00") == "2025-08-05T07:00:00"


def test_make_ts_and_shift():
    assert make_ts("2025-08-31", "19:00", 1) == "2025-09-01T19:00:00"
    assert shift_ts("2025-08-05T07:00:00", -5) == "2025-07-31T07:00:00"
    assert ts_hhmm("2025-08-05T19:30:00") == "19:30"


def test_week_helpers():
    assert week_start("2025-08-06") == "2025-08-03"
    assert week_dates("2025-08-01") == [
        "2025-07-27", "2025-07-28", "2025-07-29", "2025-07-30", "2025-07-31", "2025-08-01", "2025-08-02",
    ]


def test_month_week_index_map_sunday_weeks():
    m = month_week_index_map(2025, 8)
    assert m["2025-08-01"] == 1
    assert m["2025-08-02"] == 1
    assert m["2025-08-03"] == 2
    assert m["2025-08-31"] == 6
    assert max(month_week_index_map(2026, 2).values()) == 4    # 2026-02-01 = 일요일


def test_week_first_day():
    assert week_first_day(2025, 8, 1) == "2025-08-01"
    assert week_first_day(2025, 8, 2) == "2025-08-03"
    assert week_first_day(2025, 8, 6) == "2025-08-31"
    with pytest.raises(ValueError):
        week_first_day(2025, 8, 7)



def test_prev_next_month_wrap_year():
    assert prev_month(2025, 1) == (2024, 12)
    assert next_month(2025, 12) == (2026, 1)
    assert next_month(2025, 8) == (2025, 9)
