# ------------------------------------------------------------
# shootcal.storage
# ------------------------------------------------------------
# JSON project files, the auto-save slot and user settings.
#
# Project files use camelCase keys and dates formatted as
# "%Y-%m-%dT%H:%M:%S%z". Decoding tries, in order:
#   1. the current shape with formatted dates
#   2. the current shape with lenient dates (ISO strings, or
#      seconds since 2001-01-01 UTC as older files stored them)
#   3. the legacy shape ({allScenes, shootDays} only)
# If all three fail, the legacy error is raised and the message
# also names the current-format error. Decoded projects must
# have distinct day dates and unique scene ids.
# ------------------------------------------------------------

from __future__ import annotations

import json
import os
from datetime import date, datetime, time, timedelta, timezone

from loguru import logger

from .constants import AUTOSAVE_FILE, DATE_FORMAT, DEFAULTS, SETTINGS_FILE
from .errors import ProjectFileError, ShootcalError
from .models import DayNight, Project, Scene, ShootDay

REFERENCE_DATE = datetime(2001, 1, 1, tzinfo=timezone.utc)

_DECODE_ERRORS = (KeyError, ValueError, TypeError, AttributeError, OverflowError, ShootcalError)


# ------------------------
# Dates
# ------------------------
def format_day(day: date) -> str:
    return datetime.combine(day, time(0, 0), tzinfo=timezone.utc).strftime(DATE_FORMAT)


def format_timestamp(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.strftime(DATE_FORMAT)


def parse_formatted(value) -> datetime:
    if not isinstance(value, str):
        raise TypeError(f"expected a formatted date string, got {type(value).__name__}")
    return datetime.strptime(value, DATE_FORMAT)


def parse_lenient(value) -> datetime:
    """Accept ISO dates/datetimes or reference-date seconds."""
    if isinstance(value, bool):
        raise TypeError("boolean is not a date")
    if isinstance(value, (int, float)):
        return REFERENCE_DATE + timedelta(seconds=value)
    if isinstance(value, str):
        try:
            return parse_formatted(value)
        except ValueError:
            pass
        text = value.replace("Z", "+00:00")
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return datetime.combine(date.fromisoformat(value[:10]), time(0, 0))
    raise TypeError(f"unsupported date value: {value!r}")


# ------------------------
# Encoding
# ------------------------
def scene_to_dict(scene: Scene) -> dict:
    return {
        "id": scene.id,
        "title": scene.title,
        "duration": scene.duration,
        "estimatedTime": scene.estimated_time,
        "dayNightType": scene.day_night.value,
    }


def day_to_dict(day: ShootDay) -> dict:
    return {
        "id": day.id,
        "date": format_day(day.date),
        "scenes": [scene_to_dict(s) for s in day.scenes],
    }


def project_to_dict(project: Project) -> dict:
    return {
        "allScenes": [scene_to_dict(s) for s in project.unscheduled],
        "shootDays": [day_to_dict(d) for d in project.shoot_days],
        "projectTitle": project.title,
        "createdDate": format_timestamp(project.created),
        "isShiftModeEnabled": project.shift_mode,
    }


# ------------------------
# Decoding
# ------------------------
def scene_from_dict(data: dict) -> Scene:
    return Scene(
        id=str(data["id"]),
        title=str(data["title"]),
        duration=int(data["duration"]),
        estimated_time=int(data["estimatedTime"]),
        day_night=DayNight(data.get("dayNightType", DayNight.DAY.value)),
    )


def _calendar_day(value, parse_date) -> date:
    moment = parse_date(value)
    if isinstance(value, (int, float)):
        # nearest midnight, so values stored as local midnight keep their calendar day
        moment += timedelta(hours=12)
    return moment.date()


def day_from_dict(data: dict, parse_date) -> ShootDay:
    return ShootDay(
        id=str(data["id"]),
        date=_calendar_day(data["date"], parse_date),
        scenes=[scene_from_dict(s) for s in data.get("scenes", [])],
    )


def _decode_lists(payload: dict, parse_date):
    scenes = [scene_from_dict(s) for s in payload["allScenes"]]
    days = sorted((day_from_dict(d, parse_date) for d in payload["shootDays"]), key=lambda d: d.date)
    return scenes, days


def _decode_current(payload: dict, parse_date) -> Project:
    scenes, days = _decode_lists(payload, parse_date)
    created = parse_date(payload["createdDate"])
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return Project(
        unscheduled=scenes,
        shoot_days=days,
        title=str(payload["projectTitle"]),
        created=created,
        shift_mode=bool(payload.get("isShiftModeEnabled") or False),
    )


def _decode_legacy(payload: dict) -> Project:
    scenes, days = _decode_lists(payload, parse_lenient)
    return Project(unscheduled=scenes, shoot_days=days, title=DEFAULTS["legacy_title"], shift_mode=False)


def _decode(payload: dict) -> Project:
    try:
        return _decode_current(payload, parse_formatted)
    except _DECODE_ERRORS as e:
        first_error = e
        logger.debug("Primary decode failed: {}", e)
    try:
        project = _decode_current(payload, parse_lenient)
        logger.warning("Project decoded with lenient date parsing")
        return project
    except _DECODE_ERRORS as e:
        logger.debug("Lenient decode failed: {}", e)
    try:
        project = _decode_legacy(payload)
        logger.warning("Project decoded from the legacy format")
        return project
    except _DECODE_ERRORS as e:
        last_error = e
    raise ProjectFileError(
        f"Unrecognised project data: {last_error!r} (current format: {first_error!r})"
    ) from last_error


def _check_unique(project: Project) -> None:
    dates = set()
    for day in project.shoot_days:
        if day.date in dates:
            raise ProjectFileError(f"More than one shoot day dated {day.date.isoformat()}")
        dates.add(day.date)

    scene_ids = set()
    for scene in project.all_scenes():
        if scene.id in scene_ids:
            raise ProjectFileError(f"Scene {scene.id} appears more than once")
        scene_ids.add(scene.id)


def _fill_gaps(project: Project) -> None:
    """Insert empty days so the day list covers every date in its range."""
    filled = []
    for day in project.shoot_days:
        if filled:
            current = filled[-1].date + timedelta(days=1)
            while current < day.date:
                filled.append(ShootDay.placeholder(current))
                current += timedelta(days=1)
        filled.append(day)
    if len(filled) != len(project.shoot_days):
        logger.warning("Filled {} missing dates between shoot days", len(filled) - len(project.shoot_days))
        project.shoot_days = filled


def project_from_dict(payload) -> Project:
    """Decode a project and check that days and scenes are unambiguous.

    Shoot days must have distinct dates and every scene id may appear
    once, in the pool or on one day. Missing dates inside the range
    are filled with empty days.
    """
    if not isinstance(payload, dict):
        raise ProjectFileError("project file must contain a JSON object")

    project = _decode(payload)
    _check_unique(project)
    _fill_gaps(project)
    return project


# ------------------------
# Files
# ------------------------
def save_project(project: Project, path) -> None:
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(project_to_dict(project), f, indent=2)
    except OSError as e:
        raise ProjectFileError(f"Failed to save schedule to {path}: {e}") from e
    logger.info("Saved project '{}' to {}", project.display_title, path)


def load_project(path) -> Project:
    try:
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except OSError as e:
        raise ProjectFileError(f"Failed to load project from {path}: {e}") from e
    except ValueError as e:
        raise ProjectFileError(f"{path} is not a valid project file: {e}") from e

    project = project_from_dict(payload)
    logger.info(
        "Loaded project '{}': {} unscheduled scenes, {} days",
        project.display_title, len(project.unscheduled), len(project.shoot_days),
    )
    return project


# ------------------------
# Auto-save slot
# ------------------------
def save_default_project(project: Project, path=AUTOSAVE_FILE) -> bool:
    try:
        save_project(project, path)
    except ProjectFileError as e:
        logger.warning("Auto-save failed: {}", e)
        return False
    return True


def load_default_project(path=AUTOSAVE_FILE):
    if not os.path.exists(path):
        logger.debug("No auto-saved project at {}", path)
        return None
    try:
        return load_project(path)
    except ProjectFileError as e:
        logger.warning("Could not restore auto-saved project: {}", e)
        return None


# ------------------------
# SETTINGS: load/save preferences
# ------------------------
def load_settings(path=SETTINGS_FILE) -> dict:
    settings = {
        "last_dir": DEFAULTS["last_dir"],
        "autosave_delay_ms": DEFAULTS["autosave_delay_ms"],
    }
    if not os.path.exists(path):
        return settings

    try:
        with open(path, "r", encoding="utf-8") as f:
            s = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable settings file {}: {}", path, e)
        return settings
    if not isinstance(s, dict):
        return settings

    if isinstance(s.get("last_dir"), str) and s["last_dir"]:
        settings["last_dir"] = s["last_dir"]
    try:
        delay = int(s.get("autosave_delay_ms", settings["autosave_delay_ms"]))
        if delay > 0:
            settings["autosave_delay_ms"] = delay
    except (TypeError, ValueError):
        pass
    return settings


def save_settings(settings: dict, path=SETTINGS_FILE) -> bool:
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(settings, f, indent=2)
    except OSError as e:
        logger.warning("Could not save settings to {}: {}", path, e)
        return False
    return True
