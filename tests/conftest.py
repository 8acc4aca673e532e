from __future__ import annotations

from datetime import date, timedelta

import pytest

from shootcal.models import DayNight, Project, Scene, ShootDay, generate_days

# 2025-10-01 is a Wednesday
WEDNESDAY = date(2025, 10, 1)


def make_scene(title="Scene", duration=8, minutes=60, night=False) -> Scene:
    return Scene.create(title, duration, minutes, DayNight.NIGHT if night else DayNight.DAY)


def make_days(start: date, count: int, scenes_per_day=()) -> list[ShootDay]:
    """`count` contiguous days; scenes_per_day[i] scenes on day i (0 when missing)."""
    days = generate_days(start, start + timedelta(days=count - 1))
    for i, day in enumerate(days):
        n = scenes_per_day[i] if i < len(scenes_per_day) else 0
        day.scenes = [make_scene(f"D{i} S{j}") for j in range(n)]
    return days


@pytest.fixture
def project() -> Project:
    days = make_days(WEDNESDAY, 10, [0, 0, 0, 1, 1, 1, 1, 1, 1, 1])
    return Project(
        unscheduled=[make_scene("Pool A"), make_scene("Pool B", night=True)],
        shoot_days=days,
        title="Night Shift",
    )
