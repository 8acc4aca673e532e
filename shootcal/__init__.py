"""Shoot-day calendar planning: scenes, shoot days and a paginated PDF calendar."""

from .errors import LayoutError, ParseError, ProjectFileError, ScheduleError, ShootcalError
from .models import DayNight, Project, Scene, ShootDay, generate_days
from .parsers import format_eighths, format_minutes, parse_duration, parse_time

__version__ = "0.21.0"

__all__ = [
    "DayNight",
    "LayoutError",
    "ParseError",
    "Project",
    "ProjectFileError",
    "Scene",
    "ScheduleError",
    "ShootDay",
    "ShootcalError",
    "format_eighths",
    "format_minutes",
    "generate_days",
    "parse_duration",
    "parse_time",
]
