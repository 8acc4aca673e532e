# ------------------------------------------------------------
# shootcal.errors
# ------------------------------------------------------------
# Exceptions raised by the scheduling core. None of them are
# fatal: the GUI and CLI catch ShootcalError and report it.
# ------------------------------------------------------------


class ShootcalError(Exception):
    """Base class for every error the core reports outward."""


class ParseError(ShootcalError, ValueError):
    """Free-text duration or time could not be parsed."""


class ScheduleError(ShootcalError):
    """Invalid scene/day operation (unknown id, bad value)."""


class LayoutError(ShootcalError):
    pass


class ProjectFileError(ShootcalError):
    """A project file could not be read, written or decoded."""
