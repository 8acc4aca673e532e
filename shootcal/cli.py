"""shootcal command-line entry point."""
from __future__ import annotations

import argparse
import os
import sys

from loguru import logger

from .errors import ShootcalError
from .models import sanitize_filename
from .parsers import format_eighths, format_minutes


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shootcal",
        description="Shoot-day calendar planner with PDF calendar export",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    gui_parser = sub.add_parser("gui", help="Open the desktop editor (default)")
    gui_parser.add_argument("project", nargs="?", metavar="PROJECT.json", help="Project file to open")

    export_parser = sub.add_parser("export", help="Export a project's calendar to PDF")
    export_parser.add_argument("project", metavar="PROJECT.json", help="Path to a project file")
    export_parser.add_argument(
        "--out", metavar="FILE.pdf",
        help="Destination PDF (default: <title>_calendar.pdf next to the project)",
    )

    summary_parser = sub.add_parser("summary", help="Print a project's schedule totals")
    summary_parser.add_argument("project", metavar="PROJECT.json", help="Path to a project file")
    return parser


def _export(args) -> int:
    from .pdf_export import export_calendar_pdf
    from .storage import load_project

    project = load_project(args.project)
    out = args.out or os.path.join(
        os.path.dirname(os.path.abspath(args.project)),
        sanitize_filename(project.title) + "_calendar.pdf",
    )
    pages = export_calendar_pdf(project, out)
    print(f"OK: {pages} page(s) written to {out}")
    return 0


def _summary(args) -> int:
    from .storage import load_project

    project = load_project(args.project)
    print(f"Title: {project.display_title}")
    if project.start_date:
        print(f"Range: {project.start_date.isoformat()} to {project.end_date.isoformat()}")
    print(f"Shoot days: {len(project.scheduled_days)} of {len(project.shoot_days)}")
    print(f"Scheduled scenes: {project.total_scenes}")
    print(f"Unscheduled scenes: {len(project.unscheduled)}")
    print(f"Pages: {format_eighths(project.total_duration)}")
    print(f"Estimated time: {format_minutes(project.total_estimated_time)}")
    return 0


def main(argv=None) -> int:
    args = _build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        if args.command == "export":
            return _export(args)
        if args.command == "summary":
            return _summary(args)
        from .app import run
        return run(getattr(args, "project", None))
    except ShootcalError as e:
        print(f"ERROR: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
