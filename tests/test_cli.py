from __future__ import annotations

import pytest
from loguru import logger

from shootcal.cli import main
from shootcal.storage import save_project


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    logger.remove()


@pytest.fixture
def project_file(tmp_path, project):
    path = tmp_path / "night.json"
    save_project(project, path)
    return path


def test_summary(project_file, capsys):
    assert main(["summary", str(project_file)]) == 0

    out = capsys.readouterr().out
    assert "Title: Night Shift" in out
    assert "Range: 2025-10-01 to 2025-10-10" in out
    assert "Shoot days: 7 of 10" in out
    assert "Scheduled scenes: 7" in out
    assert "Unscheduled scenes: 2" in out
    assert "Pages: 7\n" in out
    assert "Estimated time: 7 hr" in out


def test_export_with_explicit_output(project_file, tmp_path, capsys):
    out_pdf = tmp_path / "cal.pdf"
    assert main(["export", str(project_file), "--out", str(out_pdf)]) == 0
    assert out_pdf.read_bytes().startswith(b"%PDF")
    assert "OK: 1 page(s) written to" in capsys.readouterr().out


def test_export_default_name_beside_project(project_file, tmp_path):
    assert main(["-v", "export", str(project_file)]) == 0
    assert (tmp_path / "Night_Shift_calendar.pdf").exists()


def test_missing_project_reports_error(tmp_path, capsys):
    assert main(["summary", str(tmp_path / "missing.json")]) == 1
    assert capsys.readouterr().out.startswith("ERROR:")
