# ------------------------------------------------------------
# shootcal.grid
# ------------------------------------------------------------
# Separator lines for the rows placed on one page. Vertical
# lines span only the rows actually drawn, never the whole page.
# ------------------------------------------------------------

from __future__ import annotations

from typing import List, Sequence

from .constants import COLUMNS
from .geometry import Line
from .paginate import PageGeometry, PagePlan


def grid_lines(horizontal_ys: Sequence[float], left: float, right: float,
               columns: int = COLUMNS) -> List[Line]:
    if not horizontal_ys:
        return []

    top = horizontal_ys[0]
    bottom = horizontal_ys[-1]
    column_width = (right - left) / columns

    lines = [
        Line(left + i * column_width, bottom, left + i * column_width, top)
        for i in range(columns + 1)
    ]
    lines.extend(Line(left, y, right, y) for y in horizontal_ys)
    return lines


def page_grid_lines(page: PagePlan, geometry: PageGeometry) -> List[Line]:
    return grid_lines(page.horizontal_lines, geometry.content_left,
                      geometry.content_right, geometry.columns)
