from __future__ import annotations

from datetime import date, timedelta

import pytest

from shootcal.models import ShootDay
from shootcal.weeks import group_days_into_weeks, week_dates, weekday_slot

from .conftest import WEDNESDAY, make_days


def _all_dates(weeks):
    return [d for week in weeks for d in week_dates(week)]


def test_empty_input_gives_no_weeks():
    assert group_days_into_weeks([]) == []


def test_weekday_slot_is_sunday_first():
    sunday = date(2025, 10, 5)
    assert weekday_slot(sunday) == 0
    assert weekday_slot(sunday + timedelta(days=6)) == 6
    assert weekday_slot(WEDNESDAY) == 3


def test_wednesday_scenario():
    days = make_days(WEDNESDAY, 10, [0, 0, 0, 1, 1, 1, 1, 1, 1, 1])
    weeks = group_days_into_weeks(days)

    assert len(weeks) == 2
    first, second = weeks
    assert first[:3] == [None, None, None]
    assert [d.date for d in first[3:]] == [WEDNESDAY + timedelta(days=i) for i in range(4)]
    assert [len(d.scenes) for d in first[3:]] == [0, 0, 0, 1]
    assert [d.date for d in second[:6]] == [WEDNESDAY + timedelta(days=i) for i in range(4, 10)]
    assert second[6] is None
    for week in weeks:
        for slot, day in enumerate(week):
            if day is not None:
                assert weekday_slot(day.date) == slot


def test_input_days_are_reused_not_copied():
    days = make_days(WEDNESDAY, 5)
    weeks = group_days_into_weeks(days)
    placed = [d for week in weeks for d in week if d is not None]
    assert all(a is b for a, b in zip(placed, days))


def test_gaps_are_filled_with_placeholders():
    days = [ShootDay(date=WEDNESDAY), ShootDay(date=WEDNESDAY + timedelta(days=9))]
    weeks = group_days_into_weeks(days)
    dates = _all_dates(weeks)
    assert dates == [WEDNESDAY + timedelta(days=i) for i in range(10)]
    filler = weeks[0][4]
    assert filler.date == WEDNESDAY + timedelta(days=1)
    assert filler.is_empty


def test_range_ending_on_saturday_has_no_extra_row():
    saturday = date(2025, 10, 11)
    days = make_days(date(2025, 10, 5), 7)
    assert days[-1].date == saturday
    weeks = group_days_into_weeks(days)
    assert len(weeks) == 1
    assert None not in weeks[0]


def test_duplicate_dates_are_dropped():
    days = make_days(WEDNESDAY, 3)
    days.insert(1, ShootDay(date=WEDNESDAY))
    dates = _all_dates(group_days_into_weeks(days))
    assert dates == [WEDNESDAY + timedelta(days=i) for i in range(3)]


@pytest.mark.parametrize("start_offset", range(7))
@pytest.mark.parametrize("length", [1, 6, 7, 8, 30, 45])
def test_every_date_exactly_once_in_seven_slot_rows(start_offset, length):
    start = WEDNESDAY + timedelta(days=start_offset)
    # drop every third day to exercise gaps
    days = [d for i, d in enumerate(make_days(start, length)) if i % 3 != 1 or i == length - 1]
    weeks = group_days_into_weeks(days)

    assert all(len(week) == 7 for week in weeks)
    assert _all_dates(weeks) == [start + timedelta(days=i) for i in range(length)]
