from datetime import date

import pytest

from firms_prebake.firms import (
    days_in_month,
    month_range,
    parse_month_key,
    parse_month_list,
    plan_windows,
)


def test_31_day_month():
    windows = plan_windows(2021, 8, 10)
    assert [w.span for w in windows] == [10, 10, 10, 1]
    assert [w.start.day for w in windows] == [1, 11, 21, 31]


def test_28_day_month():
    windows = plan_windows(2021, 2, 10)
    assert [w.span for w in windows] == [10, 10, 8]


def test_leap_february():
    assert days_in_month(2020, 2) == 29
    assert days_in_month(1900, 2) == 28
    assert [w.span for w in plan_windows(2020, 2)] == [10, 10, 9]


def test_windows_cover_month_in_order():
    windows = plan_windows(2021, 4, 7)
    assert windows[0].start == date(2021, 4, 1)
    assert sum(w.span for w in windows) == 30
    assert [w.start for w in windows] == sorted(w.start for w in windows)
    assert windows[1].start_iso == "2021-04-08"


@pytest.mark.parametrize("span", [0, 11])
def test_span_outside_api_limit(span):
    with pytest.raises(ValueError):
        plan_windows(2021, 1, span)


def test_month_range_crosses_year():
    assert month_range("2020-11", "2021-02") == [(2020, 11), (2020, 12), (2021, 1), (2021, 2)]


def test_month_range_end_before_start_is_empty():
    assert month_range("2021-03", "2021-01") == []


def test_month_list_keeps_order():
    assert parse_month_list("2001-06, 2001-04,") == [(2001, 6), (2001, 4)]


@pytest.mark.parametrize("value", ["2021", "2021-13", "21-01", "2021/01"])
def test_bad_month_keys(value):
    with pytest.raises(ValueError):
        parse_month_key(value)
