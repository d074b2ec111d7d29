from datetime import date, datetime, timedelta

import pytest

from utiltrack.errors import ValidationError
from utiltrack.models import WeekClass
from utiltrack.utils.dates import (week_start, week_end, weeks_in_range, classify_week, default_date_range,
                                   business_days, parse_iso_date, group_weeks_by_month)


@pytest.mark.parametrize('day, expected', [
    (date(2026, 1, 11), date(2026, 1, 11)),  # Sunday
    (date(2026, 1, 14), date(2026, 1, 11)),  # Wednesday
    (date(2026, 1, 17), date(2026, 1, 11)),  # Saturday
    (date(2026, 1, 1), date(2025, 12, 28)),  # crosses the year
])
def test_week_start_is_previous_or_same_sunday(day, expected):
    assert week_start(day) == expected


def test_week_start_accepts_datetime():
    assert week_start(datetime(2026, 1, 14, 23, 30)) == date(2026, 1, 11)


def test_week_end_is_saturday():
    assert week_end(date(2026, 1, 11)) == date(2026, 1, 17)
    assert week_end(date(2026, 1, 17)) == date(2026, 1, 17)


def test_weeks_in_range_single_day():
    assert weeks_in_range(date(2026, 1, 14), date(2026, 1, 14)) == [date(2026, 1, 11)]


def test_weeks_in_range_partial_weeks_at_both_ends():
    weeks = weeks_in_range(date(2026, 1, 15), date(2026, 1, 19))
    assert weeks == [date(2026, 1, 11), date(2026, 1, 18)]


def test_weeks_in_range_properties():
    anchor = date(2025, 12, 1)
    for offset in range(0, 10):
        for length in range(0, 40, 3):
            start = anchor + timedelta(days=offset)
            end = start + timedelta(days=length)
            weeks = weeks_in_range(start, end)

            assert all(w.weekday() == 6 for w in weeks)
            assert all(a < b for a, b in zip(weeks, weeks[1:]))
            assert weeks[0] <= start <= weeks[0] + timedelta(days=6)
            assert weeks[-1] <= end <= weeks[-1] + timedelta(days=6)
            assert all(b - a == timedelta(weeks=1) for a, b in zip(weeks, weeks[1:]))


def test_weeks_in_range_rejects_reversed_range():
    with pytest.raises(ValidationError):
        weeks_in_range(date(2026, 1, 20), date(2026, 1, 10))


@pytest.mark.parametrize('week, expected', [
    (date(2026, 1, 10), WeekClass.PAST),   # Saturday of the previous week
    (date(2026, 1, 11), WeekClass.CURRENT),
    (date(2026, 1, 17), WeekClass.CURRENT),
    (date(2026, 1, 18), WeekClass.FUTURE),
])
def test_classify_week(week, expected):
    assert classify_week(week, date(2026, 1, 14)) == expected


def test_default_date_range_spans_four_weeks_back_eight_ahead():
    start, end = default_date_range(date(2026, 1, 14))
    assert start == date(2025, 12, 14)
    assert end == date(2026, 3, 14)
    assert len(weeks_in_range(start, end)) == 13


def test_business_days_skip_weekends():
    days = business_days(date(2026, 1, 9), date(2026, 1, 13))
    assert days == [date(2026, 1, 9), date(2026, 1, 12), date(2026, 1, 13)]


def test_parse_iso_date():
    assert parse_iso_date('2026-01-14') == date(2026, 1, 14)
    with pytest.raises(ValidationError):
        parse_iso_date('01/14/2026')
    with pytest.raises(ValidationError):
        parse_iso_date(None)


def test_group_weeks_by_month():
    grouped = group_weeks_by_month(weeks_in_range(date(2026, 1, 20), date(2026, 2, 10)))
    assert list(grouped) == ['2026-01', '2026-02']
    assert grouped['2026-01'] == [date(2026, 1, 18), date(2026, 1, 25)]
    assert grouped['2026-02'] == [date(2026, 2, 1), date(2026, 2, 8)]
