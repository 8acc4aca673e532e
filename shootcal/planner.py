# ------------------------------------------------------------
# shootcal.planner
# ------------------------------------------------------------
# Row heights for week rows. ideal_row_heights() is the organic
# per-row height used for pagination; fit_row_heights() stretches
# or squeezes those heights into one fixed-height area.
# ------------------------------------------------------------

from __future__ import annotations

from typing import List, Sequence

from loguru import logger

from .constants import ROW_HEIGHT_BUCKETS, ROW_MAX_HEIGHT, ROW_MIN_HEIGHT
from .weeks import Week


def max_scenes_in_week(week: Week) -> int:
    return max((len(day.scenes) for day in week if day is not None), default=0)


def row_height_for(max_scenes: int) -> float:
    for upper, height in ROW_HEIGHT_BUCKETS:
        if max_scenes <= upper:
            return float(height)
    return float(ROW_MAX_HEIGHT)


def ideal_row_heights(weeks: Sequence[Week]) -> List[float]:
    return [row_height_for(max_scenes_in_week(week)) for week in weeks]


def fit_row_heights(weeks: Sequence[Week], available: float) -> List[float]:
    """Fit the ideal heights to one area of the given height.

    Over budget: scale every row by available/total, never below the
    minimum row height (so the result can still exceed `available`).
    Under budget: hand out the slack in proportion to each row.
    """
    heights = ideal_row_heights(weeks)
    total = sum(heights)
    if not heights or total <= 0:
        return heights

    if total > available:
        scale = available / total
        fitted = [max(float(ROW_MIN_HEIGHT), h * scale) for h in heights]
    elif total < available:
        extra = available - total
        fitted = [h + extra * (h / total) for h in heights]
    else:
        fitted = heights

    logger.debug("Fitted {} rows: naive {:.1f}pt into {:.1f}pt", len(heights), total, available)
    return fitted


def estimated_page_count(weeks: Sequence[Week], page_available: float) -> int:
    """Rough page count from the ideal heights; pagination has the final say."""
    total = sum(ideal_row_heights(weeks))
    if total <= 0 or page_available <= 0:
        return 0
    pages, remainder = divmod(total, page_available)
    return int(pages) + (1 if remainder else 0)
