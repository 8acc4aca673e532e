# ------------------------------------------------------------
# shootcal.parsers
# ------------------------------------------------------------
# Free-text page lengths ("1 7/8") and shoot times ("2:30")
# to canonical integers (eighths of a page, minutes) and back.
# ------------------------------------------------------------

from __future__ import annotations

import functools
import math
import re

from .errors import ParseError

DURATION_PLACEHOLDER = "e.g. 15, 1 7/8, 7/8"
TIME_PLACEHOLDER = "e.g. 4 (4hr), 15 (15min), 2:30 (2hr 30min)"

# Integers at or below this many are hours, above are minutes
TIME_INT_HOURS_LIMIT = 10
# Decimals at or below this many are hours, above are minutes
TIME_DECIMAL_HOURS_LIMIT = 14

_INT_RE = re.compile(r"^\d+$")
_DECIMAL_RE = re.compile(r"^(\d+\.\d*|\.\d+)$")
_FRACTION_RE = re.compile(r"^(\d+)/(\d+)$")
_MIXED_RE = re.compile(r"^(\d+)\s+(\d+/\d+)$")
_CLOCK_RE = re.compile(r"^(\d+):(\d+)$")
_WORDS_RE = re.compile(r"^(?:(\d+)\s*hrs?)?\s*(?:(\d+)\s*mins?)?$")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _parser(func):
    """Report numbers too large to convert as ParseError."""
    @functools.wraps(func)
    def wrapper(text):
        try:
            return func(text)
        except ParseError:
            raise
        except (OverflowError, ValueError) as e:
            raise ParseError(f"number out of range in {text[:24]!r}: {e}") from e
    return wrapper


# ------------------------
# Page length (eighths)
# ------------------------
def _parse_fraction(text: str) -> int:
    match = _FRACTION_RE.match(text)
    if not match:
        raise ParseError(f"not a fraction: {text!r}")
    numerator, denominator = int(match.group(1)), int(match.group(2))
    if denominator <= 0:
        raise ParseError(f"zero denominator in {text!r}")
    return (numerator * 8) // denominator


@_parser
def parse_duration(text: str) -> int:
    """Parse a page length into eighths.

    Accepts a plain integer (already eighths), a decimal page count
    ("2.5"), a fraction ("7/8") or a mixed number ("1 7/8").
    Raises ParseError for anything else.
    """
    trimmed = (text or "").strip()
    if not trimmed:
        raise ParseError("empty page length")

    if _INT_RE.match(trimmed):
        return int(trimmed)

    if _DECIMAL_RE.match(trimmed):
        return _round_half_up(float(trimmed) * 8)

    mixed = _MIXED_RE.match(trimmed)
    if mixed:
        return int(mixed.group(1)) * 8 + _parse_fraction(mixed.group(2))

    if "/" in trimmed:
        return _parse_fraction(trimmed)

    raise ParseError(f"unrecognised page length: {text!r}")


def format_eighths(eighths: int) -> str:
    if eighths < 0:
        return "-" + format_eighths(-eighths)
    whole, remainder = divmod(eighths, 8)
    if whole == 0 and remainder == 0:
        return "0"
    if whole == 0:
        return f"{remainder}/8"
    if remainder == 0:
        return f"{whole}"
    return f"{whole} {remainder}/8"


# ------------------------
# Shoot time (minutes)
# ------------------------
@_parser
def parse_time(text: str) -> int:
    """Parse a shoot time into minutes.

    "H:MM" is explicit. A bare integer up to 10 is hours, above that
    minutes; a decimal up to 14 is hours, above that minutes. The
    formatted form ("2 hr 30 min") is accepted as well.
    """
    trimmed = (text or "").strip()
    if not trimmed:
        raise ParseError("empty time")

    if ":" in trimmed:
        clock = _CLOCK_RE.match(trimmed)
        if not clock:
            raise ParseError(f"expected H:MM, got {text!r}")
        hours, minutes = int(clock.group(1)), int(clock.group(2))
        if minutes > 59:
            raise ParseError(f"minutes out of range in {text!r}")
        return hours * 60 + minutes

    if _INT_RE.match(trimmed):
        value = int(trimmed)
        if value <= TIME_INT_HOURS_LIMIT:
            return value * 60
        return value

    if _DECIMAL_RE.match(trimmed):
        value = float(trimmed)
        if value <= TIME_DECIMAL_HOURS_LIMIT:
            return _round_half_up(value * 60)
        return int(value)

    words = _WORDS_RE.match(trimmed)
    if words and (words.group(1) or words.group(2)):
        return int(words.group(1) or 0) * 60 + int(words.group(2) or 0)

    raise ParseError(f"unrecognised time: {text!r}")


def format_minutes(minutes: int) -> str:
    if minutes < 0:
        return "-" + format_minutes(-minutes)
    hours, mins = divmod(minutes, 60)
    if hours == 0 and mins == 0:
        return "0 min"
    if hours == 0:
        return f"{mins} min"
    if mins == 0:
        return f"{hours} hr"
    return f"{hours} hr {mins} min"


# ------------------------
# Input hints for form fields
# ------------------------
def duration_hint(text: str) -> str | None:
    try:
        return "= " + format_eighths(parse_duration(text))
    except ValueError:
        return None


def time_hint(text: str) -> str | None:
    try:
        return "= " + format_minutes(parse_time(text))
    except ValueError:
        return None
