# ------------------------------------------------------------
# shootcal.weeks
# ------------------------------------------------------------
# Groups shoot days into Sunday-first, 7-slot week rows.
# ------------------------------------------------------------

from __future__ import annotations

from datetime import date, timedelta
from typing import List, Optional, Sequence

from .models import ShootDay

Week = List[Optional[ShootDay]]

SATURDAY = 6


def weekday_slot(day: date) -> int:
    """Column for a date, 0 = Sunday .. 6 = Saturday."""
    return (day.weekday() + 1) % 7


def group_days_into_weeks(days: Sequence[ShootDay]) -> List[Week]:
    """Lay shoot days out as calendar week rows.

    Every date from the first day to the last appears exactly once;
    dates without a ShootDay get an empty placeholder. Slots before
    the first date and after the last date stay None.
    """
    if not days:
        return []

    weeks: List[Week] = []
    current_week: Week = [None] * 7
    current = days[0].date
    end = days[-1].date
    idx = 0

    while current <= end:
        # entries for dates already walked past (duplicates) are dropped
        while idx < len(days) and days[idx].date < current:
            idx += 1

        slot = weekday_slot(current)
        if idx < len(days) and days[idx].date == current:
            current_week[slot] = days[idx]
            idx += 1
        else:
            current_week[slot] = ShootDay.placeholder(current)

        if slot == SATURDAY or current == end:
            weeks.append(current_week)
            current_week = [None] * 7

        current += timedelta(days=1)

    return weeks


def week_dates(week: Week) -> List[date]:
    return [day.date for day in week if day is not None]
