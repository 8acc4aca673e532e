# ------------------------------------------------------------
# shootcal.models
# ------------------------------------------------------------
# Scene, ShootDay and Project. A scene lives in exactly one
# place: the unscheduled pool or one shoot day's scene list.
# Every Project mutation validates first and mutates last, so a
# failed call leaves the project untouched.
# ------------------------------------------------------------

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import List, Optional, Tuple

from loguru import logger

from .constants import DEFAULTS
from .errors import ScheduleError


def _new_id() -> str:
    return str(uuid.uuid4()).upper()


class DayNight(str, Enum):
    DAY = "DAY"
    NIGHT = "NIGHT"

    @property
    def display_name(self) -> str:
        return self.value


# ------------------------
# Scene
# ------------------------
@dataclass
class Scene:
    title: str
    duration: int = 0          # eighths of a page
    estimated_time: int = 0    # minutes
    day_night: DayNight = DayNight.DAY
    id: str = field(default_factory=_new_id)

    def __post_init__(self):
        if self.duration < 0:
            raise ScheduleError(f"scene duration must be >= 0, got {self.duration}")
        if self.estimated_time < 0:
            raise ScheduleError(f"scene estimated time must be >= 0, got {self.estimated_time}")
        self.day_night = DayNight(self.day_night)

    @classmethod
    def create(cls, title, duration=0, estimated_time=0, day_night=DayNight.DAY) -> "Scene":
        return cls(title=title, duration=duration, estimated_time=estimated_time, day_night=day_night)

    def duplicate(self) -> "Scene":
        return replace(self, title=f"{self.title} (Copy)", id=_new_id())

    @property
    def is_night(self) -> bool:
        return self.day_night is DayNight.NIGHT


# ------------------------
# ShootDay
# ------------------------
@dataclass
class ShootDay:
    date: date
    scenes: List[Scene] = field(default_factory=list)
    id: str = field(default_factory=_new_id)

    @classmethod
    def placeholder(cls, day: date) -> "ShootDay":
        return cls(date=day)

    @property
    def is_empty(self) -> bool:
        return not self.scenes

    @property
    def total_duration(self) -> int:
        return sum(s.duration for s in self.scenes)

    @property
    def total_estimated_time(self) -> int:
        return sum(s.estimated_time for s in self.scenes)

    @property
    def day_scenes(self) -> List[Scene]:
        return [s for s in self.scenes if s.day_night is DayNight.DAY]

    @property
    def night_scenes(self) -> List[Scene]:
        return [s for s in self.scenes if s.day_night is DayNight.NIGHT]

    @property
    def total_day_duration(self) -> int:
        return sum(s.duration for s in self.day_scenes)

    @property
    def total_night_duration(self) -> int:
        return sum(s.duration for s in self.night_scenes)

    @property
    def total_day_estimated_time(self) -> int:
        return sum(s.estimated_time for s in self.day_scenes)

    @property
    def total_night_estimated_time(self) -> int:
        return sum(s.estimated_time for s in self.night_scenes)


def generate_days(start: date, end: date) -> List[ShootDay]:
    """One empty ShootDay per calendar date from start to end inclusive."""
    days = []
    current = start
    while current <= end:
        days.append(ShootDay.placeholder(current))
        current += timedelta(days=1)
    return days


def sanitize_filename(name: str) -> str:
    cleaned = re.sub(r'[\\/:*?"<>|\x00-\x1f]', "_", name.strip())
    cleaned = cleaned.replace(" ", "_")
    return cleaned or "MovieSchedule"


# ------------------------
# Project
# ------------------------
@dataclass
class Project:
    unscheduled: List[Scene] = field(default_factory=list)
    shoot_days: List[ShootDay] = field(default_factory=list)
    title: str = DEFAULTS["project_title"]
    created: datetime = field(default_factory=lambda: datetime.now(timezone.utc).replace(microsecond=0))
    shift_mode: bool = False

    @classmethod
    def new(cls, start: Optional[date] = None, end: Optional[date] = None, title=None) -> "Project":
        today = date.today()
        start = start or today - timedelta(days=DEFAULTS["days_before_today"])
        end = end or today + timedelta(days=DEFAULTS["days_after_today"])
        return cls(shoot_days=generate_days(start, end), title=title or DEFAULTS["project_title"])

    # --------------------------------------------------------
    # Lookups
    # --------------------------------------------------------
    @property
    def display_title(self) -> str:
        return self.title.strip() or DEFAULTS["project_title"]

    @property
    def start_date(self) -> Optional[date]:
        return self.shoot_days[0].date if self.shoot_days else None

    @property
    def end_date(self) -> Optional[date]:
        return self.shoot_days[-1].date if self.shoot_days else None

    def day_by_id(self, day_id: str) -> ShootDay:
        for day in self.shoot_days:
            if day.id == day_id:
                return day
        raise ScheduleError(f"unknown shoot day: {day_id}")

    def day_for_date(self, day: date) -> Optional[ShootDay]:
        for shoot_day in self.shoot_days:
            if shoot_day.date == day:
                return shoot_day
        return None

    def find_scene(self, scene_id: str) -> Tuple[Optional[ShootDay], int]:
        """Locate a scene. Returns (day, index); day is None for the pool."""
        for i, scene in enumerate(self.unscheduled):
            if scene.id == scene_id:
                return None, i
        for day in self.shoot_days:
            for i, scene in enumerate(day.scenes):
                if scene.id == scene_id:
                    return day, i
        raise ScheduleError(f"unknown scene: {scene_id}")

    def all_scenes(self) -> List[Scene]:
        scenes = list(self.unscheduled)
        for day in self.shoot_days:
            scenes.extend(day.scenes)
        return scenes

    # --------------------------------------------------------
    # Statistics
    # --------------------------------------------------------
    @property
    def scheduled_days(self) -> List[ShootDay]:
        return [d for d in self.shoot_days if d.scenes]

    @property
    def total_scenes(self) -> int:
        return sum(len(d.scenes) for d in self.scheduled_days)

    @property
    def total_duration(self) -> int:
        return sum(d.total_duration for d in self.scheduled_days)

    @property
    def total_estimated_time(self) -> int:
        return sum(d.total_estimated_time for d in self.scheduled_days)

    # --------------------------------------------------------
    # Scene pool operations
    # --------------------------------------------------------
    def add_scene(self, scene: Scene) -> Scene:
        if any(s.id == scene.id for s in self.all_scenes()):
            raise ScheduleError(f"scene already in project: {scene.id}")
        self.unscheduled.append(scene)
        return scene

    def duplicate_scene(self, scene_id: str) -> Scene:
        day, index = self.find_scene(scene_id)
        source = self.unscheduled[index] if day is None else day.scenes[index]
        copy = source.duplicate()
        self.unscheduled.append(copy)
        return copy

    def delete_scene(self, scene_id: str) -> Scene:
        day, index = self.find_scene(scene_id)
        container = self.unscheduled if day is None else day.scenes
        return container.pop(index)

    def update_scene(self, updated: Scene) -> None:
        day, index = self.find_scene(updated.id)
        container = self.unscheduled if day is None else day.scenes
        container[index] = updated

    def clear_all_scenes(self) -> None:
        """Delete every scene, scheduled or not. Days are kept."""
        self.unscheduled.clear()
        for day in self.shoot_days:
            day.scenes.clear()
        logger.debug("Cleared all scenes from {}", self.display_title)

    # --------------------------------------------------------
    # Moves: remove from source and insert at destination as one step
    # --------------------------------------------------------
    def move_scene(self, scene_id: str, target_day_id: Optional[str] = None,
                   position: Optional[int] = None) -> None:
        """Move a scene to a day (or to the pool when target_day_id is None).

        The position is clamped to the destination; None appends. Unknown
        ids raise ScheduleError before anything is changed.
        """
        source_day, source_index = self.find_scene(scene_id)
        target = self.unscheduled if target_day_id is None else self.day_by_id(target_day_id).scenes
        source = self.unscheduled if source_day is None else source_day.scenes

        scene = source.pop(source_index)
        if position is None:
            target.append(scene)
            return
        if source is target and source_index < position:
            position -= 1
        position = min(max(0, position), len(target))
        target.insert(position, scene)

    def assign(self, scene_id: str, day_id: str) -> None:
        self.move_scene(scene_id, day_id)

    def unschedule(self, scene_id: str) -> None:
        self.move_scene(scene_id, None)

    # --------------------------------------------------------
    # Date range edits (shift vs. lock)
    # --------------------------------------------------------
    def update_date_range(self, start: date, end: date) -> None:
        """Regenerate the day list for [start, end].

        Shift mode slides each old day's scenes by the change in start
        date. Lock mode keeps scenes pinned to their calendar dates. In
        both modes scenes whose day falls outside the new range go back
        to the unscheduled pool.
        """
        if end < start:
            raise ScheduleError(f"end date {end} is before start date {start}")

        old_start = self.start_date or start
        offset = timedelta(days=(start - old_start).days)
        existing = {d.date: d for d in self.shoot_days}

        updated = []
        carried = set()
        current = start
        while current <= end:
            key = current - offset if self.shift_mode else current
            old = existing.get(key)
            if old is None:
                updated.append(ShootDay.placeholder(current))
            elif self.shift_mode:
                updated.append(ShootDay(date=current, scenes=old.scenes))
                carried.add(key)
            else:
                updated.append(old)
                carried.add(key)
            current += timedelta(days=1)

        orphaned = []
        for old_date, old_day in existing.items():
            if old_date not in carried:
                orphaned.extend(old_day.scenes)

        self.shoot_days = updated
        self.unscheduled.extend(orphaned)
        logger.debug(
            "Date range now {} to {} ({} mode, offset {} days, {} scenes returned to pool)",
            start, end, "shift" if self.shift_mode else "lock", offset.days, len(orphaned),
        )
