# ------------------------------------------------------------
# shootcal.paginate
# ------------------------------------------------------------
# Splits height-planned week rows across fixed-size pages.
# Rows are never split; a row that does not fit below the cursor
# moves to the next page, except the first row of a page, which
# is always placed so that pagination always terminates.
# ------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from loguru import logger

from .constants import (
    COLUMNS, HEADER_GAP, HEADER_HEIGHT, PAGE_HEIGHT, PAGE_MARGIN, PAGE_WIDTH, SAFETY_MARGIN,
)
from .errors import LayoutError
from .geometry import Rect
from .weeks import Week


@dataclass(frozen=True)
class PageGeometry:
    width: float = PAGE_WIDTH
    height: float = PAGE_HEIGHT
    margin_top: float = PAGE_MARGIN
    margin_bottom: float = PAGE_MARGIN
    margin_left: float = PAGE_MARGIN
    margin_right: float = PAGE_MARGIN
    header_height: float = HEADER_HEIGHT
    header_gap: float = HEADER_GAP
    safety_margin: float = SAFETY_MARGIN
    columns: int = COLUMNS

    @property
    def content_left(self) -> float:
        return self.margin_left

    @property
    def content_right(self) -> float:
        return self.width - self.margin_right

    @property
    def content_top(self) -> float:
        return self.height - self.margin_top

    @property
    def content_bottom(self) -> float:
        return self.margin_bottom

    @property
    def content_width(self) -> float:
        return self.content_right - self.content_left

    @property
    def content_height(self) -> float:
        return self.content_top - self.content_bottom

    @property
    def column_width(self) -> float:
        return self.content_width / self.columns

    @property
    def usable_bottom(self) -> float:
        return self.content_bottom + self.safety_margin

    def header_rect(self) -> Rect:
        return Rect(self.content_left, self.content_top - self.header_height,
                    self.content_width, self.header_height)

    def first_row_top(self, with_header: bool) -> float:
        if with_header:
            return self.content_top - self.header_height - self.header_gap
        return self.content_top


@dataclass
class PlacedRow:
    index: int
    week: Week
    top: float
    height: float
    left: float
    column_width: float

    @property
    def bottom(self) -> float:
        return self.top - self.height

    @property
    def rect(self) -> Rect:
        return Rect(self.left, self.bottom, self.column_width * len(self.week), self.height)

    def cell_rect(self, col: int) -> Rect:
        return Rect(self.left + col * self.column_width, self.bottom, self.column_width, self.height)


@dataclass
class PagePlan:
    number: int
    has_header: bool
    rows: List[PlacedRow] = field(default_factory=list)
    horizontal_lines: List[float] = field(default_factory=list)

    @property
    def row_indexes(self) -> List[int]:
        return [row.index for row in self.rows]


def paginate(weeks: Sequence[Week], heights: Sequence[float],
             geometry: PageGeometry = PageGeometry(), header: bool = True) -> List[PagePlan]:
    """Place week rows onto pages, top to bottom, in order.

    `heights` are the organic per-row heights (ideal_row_heights).
    The header band is reserved on page 1 only, when `header` is set.
    """
    if len(heights) != len(weeks):
        raise LayoutError(f"{len(weeks)} week rows but {len(heights)} row heights")
    if not weeks:
        return []

    pages: List[PagePlan] = []
    week_index = 0

    while week_index < len(weeks):
        with_header = header and not pages
        page = PagePlan(number=len(pages) + 1, has_header=with_header)
        current_y = geometry.first_row_top(with_header)
        page.horizontal_lines.append(current_y)

        while week_index < len(weeks):
            row_height = heights[week_index]
            if current_y - row_height < geometry.usable_bottom:
                if page.rows:
                    break
                logger.warning(
                    "Week row {} ({:.0f}pt) is taller than the page; placing it anyway",
                    week_index, row_height,
                )

            page.rows.append(PlacedRow(
                index=week_index,
                week=weeks[week_index],
                top=current_y,
                height=row_height,
                left=geometry.content_left,
                column_width=geometry.column_width,
            ))
            current_y -= row_height
            page.horizontal_lines.append(current_y)
            week_index += 1

        logger.debug("Page {}: rows {}", page.number, page.row_indexes)
        pages.append(page)

    return pages
