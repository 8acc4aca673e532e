from __future__ import annotations

import json
from datetime import date, datetime, timedelta, timezone

import pytest

from shootcal.errors import ProjectFileError
from shootcal.models import DayNight
from shootcal.storage import (
    REFERENCE_DATE, load_default_project, load_project, load_settings, project_from_dict,
    project_to_dict, save_default_project, save_project, save_settings,
)


def _scene(id_="S1", title="Opening", duration=12, minutes=45, kind="DAY"):
    return {"id": id_, "title": title, "duration": duration, "estimatedTime": minutes, "dayNightType": kind}


def _seconds(moment: datetime) -> float:
    return (moment - REFERENCE_DATE).total_seconds()


def _write(path, payload):
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_round_trip(tmp_path, project):
    project.shift_mode = True
    path = tmp_path / "night.json"
    save_project(project, path)

    loaded = load_project(path)

    assert project_to_dict(loaded) == project_to_dict(project)
    assert loaded.title == "Night Shift"
    assert loaded.shift_mode is True
    assert loaded.created == project.created
    assert [d.date for d in loaded.shoot_days] == [d.date for d in project.shoot_days]


def test_written_keys_are_camel_case(tmp_path, project):
    path = tmp_path / "p.json"
    save_project(project, path)
    data = json.loads(path.read_text(encoding="utf-8"))

    assert set(data) == {"allScenes", "shootDays", "projectTitle", "createdDate", "isShiftModeEnabled"}
    assert set(data["allScenes"][0]) == {"id", "title", "duration", "estimatedTime", "dayNightType"}
    assert data["shootDays"][0]["date"] == "2025-10-01T00:00:00+0000"


def test_offset_dates_keep_their_calendar_day():
    payload = {
        "allScenes": [],
        "shootDays": [{"id": "D1", "date": "2025-10-01T00:00:00-0700", "scenes": [_scene(kind="NIGHT")]}],
        "projectTitle": "Pacific",
        "createdDate": "2025-09-20T09:30:00-0700",
        "isShiftModeEnabled": False,
    }
    project = project_from_dict(payload)

    assert project.shoot_days[0].date == date(2025, 10, 1)
    assert project.shoot_days[0].scenes[0].day_night is DayNight.NIGHT
    assert project.created.utcoffset().total_seconds() == -7 * 3600


@pytest.mark.parametrize("utc_hour, day_shift", [(0, 0), (7, 0), (15, -1)])
def test_reference_seconds_dates(utc_hour, day_shift):
    # local midnight of Oct 1 stored from UTC, UTC-7 and UTC+9
    day = datetime(2025, 10, 1, utc_hour, tzinfo=timezone.utc) + timedelta(days=day_shift)
    payload = {
        "allScenes": [_scene()],
        "shootDays": [{"id": "D1", "date": _seconds(day), "scenes": []}],
        "projectTitle": "Numeric",
        "createdDate": _seconds(datetime(2025, 9, 1, 12, tzinfo=timezone.utc)),
    }
    project = project_from_dict(payload)

    assert project.shoot_days[0].date == date(2025, 10, 1)
    assert project.created == datetime(2025, 9, 1, 12, tzinfo=timezone.utc)
    assert project.shift_mode is False


def test_iso_dates():
    payload = {
        "allScenes": [],
        "shootDays": [
            {"id": "D2", "date": "2025-10-02", "scenes": []},
            {"id": "D1", "date": "2025-10-01T00:00:00Z", "scenes": []},
        ],
        "projectTitle": "ISO",
        "createdDate": "2025-09-01T10:00:00Z",
    }
    project = project_from_dict(payload)

    assert [d.id for d in project.shoot_days] == ["D1", "D2"]
    assert project.created.tzinfo is not None


def test_legacy_shape():
    payload = {
        "allScenes": [_scene(), _scene("S2", "Chase")],
        "shootDays": [{"id": "D1", "date": "2025-10-01T00:00:00+0000", "scenes": []}],
    }
    project = project_from_dict(payload)

    assert project.title == "Loaded Project"
    assert project.shift_mode is False
    assert [s.title for s in project.unscheduled] == ["Opening", "Chase"]


def test_missing_day_night_defaults_to_day():
    scene = _scene()
    del scene["dayNightType"]
    project = project_from_dict({"allScenes": [scene], "shootDays": []})
    assert project.unscheduled[0].day_night is DayNight.DAY


@pytest.mark.parametrize("payload", [
    {"foo": 1},
    [],
    {"allScenes": [{"title": "no id"}], "shootDays": []},
    {"allScenes": [], "shootDays": [{"id": "D1", "date": "not a date", "scenes": []}]},
    {"allScenes": [_scene(duration=-3)], "shootDays": []},
])
def test_unrecognised_data_raises(payload):
    with pytest.raises(ProjectFileError):
        project_from_dict(payload)


def test_failure_reports_the_legacy_error_and_names_the_first():
    with pytest.raises(ProjectFileError) as excinfo:
        project_from_dict({"projectTitle": "No lists"})
    assert isinstance(excinfo.value.__cause__, KeyError)
    assert "current format" in str(excinfo.value)


def test_numeric_date_out_of_range():
    payload = {"allScenes": [], "shootDays": [{"id": "D1", "date": 1e300, "scenes": []}]}
    with pytest.raises(ProjectFileError):
        project_from_dict(payload)


def test_infinite_duration_in_file(tmp_path):
    payload = {"allScenes": [_scene(duration=float("inf"))], "shootDays": []}
    path = _write(tmp_path / "inf.json", payload)
    assert "Infinity" in path.read_text(encoding="utf-8")
    with pytest.raises(ProjectFileError):
        load_project(path)


def test_duplicate_day_dates_rejected():
    payload = {
        "allScenes": [],
        "shootDays": [
            {"id": "D1", "date": "2025-10-01T00:00:00+0000", "scenes": []},
            {"id": "D2", "date": "2025-10-01T00:00:00+0000", "scenes": [_scene(title="Lost")]},
        ],
    }
    with pytest.raises(ProjectFileError, match="2025-10-01"):
        project_from_dict(payload)


def test_scene_in_pool_and_on_a_day_rejected():
    payload = {
        "allScenes": [_scene("S1")],
        "shootDays": [{"id": "D1", "date": "2025-10-01T00:00:00+0000", "scenes": [_scene("S1")]}],
    }
    with pytest.raises(ProjectFileError, match="S1"):
        project_from_dict(payload)


def test_scene_on_two_days_rejected():
    payload = {
        "allScenes": [],
        "shootDays": [
            {"id": "D1", "date": "2025-10-01T00:00:00+0000", "scenes": [_scene("S1")]},
            {"id": "D2", "date": "2025-10-02T00:00:00+0000", "scenes": [_scene("S1")]},
        ],
    }
    with pytest.raises(ProjectFileError):
        project_from_dict(payload)


def test_missing_dates_are_filled_with_empty_days():
    payload = {
        "allScenes": [],
        "shootDays": [
            {"id": "D1", "date": "2025-10-01T00:00:00+0000", "scenes": [_scene("S1")]},
            {"id": "D4", "date": "2025-10-04T00:00:00+0000", "scenes": [_scene("S2")]},
        ],
    }
    project = project_from_dict(payload)

    assert [d.date.day for d in project.shoot_days] == [1, 2, 3, 4]
    assert [d.id for d in (project.shoot_days[0], project.shoot_days[3])] == ["D1", "D4"]
    assert project.shoot_days[1].is_empty and project.shoot_days[2].is_empty
    assert project.total_scenes == 2


def test_non_json_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ProjectFileError):
        load_project(path)


def test_missing_file(tmp_path):
    with pytest.raises(ProjectFileError):
        load_project(tmp_path / "nope.json")


def test_save_to_missing_directory(tmp_path, project):
    with pytest.raises(ProjectFileError):
        save_project(project, tmp_path / "missing" / "p.json")


# ------------------------
# Auto-save slot
# ------------------------
def test_default_slot(tmp_path, project):
    slot = tmp_path / "autosave.json"
    assert load_default_project(slot) is None

    assert save_default_project(project, slot) is True
    restored = load_default_project(slot)
    assert project_to_dict(restored) == project_to_dict(project)


def test_default_slot_failures_are_quiet(tmp_path, project):
    assert save_default_project(project, tmp_path / "missing" / "a.json") is False
    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("[]", encoding="utf-8")
    assert load_default_project(corrupt) is None


# ------------------------
# Settings
# ------------------------
def test_settings_defaults_when_absent_or_corrupt(tmp_path):
    missing = load_settings(tmp_path / "none.json")
    assert missing["autosave_delay_ms"] == 2000

    corrupt = tmp_path / "settings.json"
    corrupt.write_text("{{{", encoding="utf-8")
    assert load_settings(corrupt) == missing


def test_settings_round_trip_and_validation(tmp_path):
    path = tmp_path / "settings.json"
    assert save_settings({"last_dir": "/projects", "autosave_delay_ms": 500}, path)
    assert load_settings(path) == {"last_dir": "/projects", "autosave_delay_ms": 500}

    _write(path, {"last_dir": "", "autosave_delay_ms": -1})
    settings = load_settings(path)
    assert settings["autosave_delay_ms"] == 2000
    assert settings["last_dir"] != ""
