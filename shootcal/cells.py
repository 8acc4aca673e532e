# ------------------------------------------------------------
# shootcal.cells
# ------------------------------------------------------------
# Layout of a single day cell: date label at the top, scene boxes
# stacked below it, a "+N more" marker when they do not all fit,
# and the day's totals at the bottom.
# ------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from .constants import (
    CELL_PADDING, DATE_BAND_HEIGHT, DATE_LABEL_HEIGHT, FOOTER_BAND_HEIGHT, SCENE_BOX_HEIGHT,
    SCENE_FONT_SIZE,
)
from .geometry import Rect
from .models import Scene, ShootDay
from .parsers import format_eighths, format_minutes


@dataclass(frozen=True)
class SceneBox:
    scene: Scene
    rect: Rect

    @property
    def title(self) -> str:
        return self.scene.title

    @property
    def is_night(self) -> bool:
        return self.scene.is_night


@dataclass
class CellLayout:
    date_label: str
    date_rect: Rect
    boxes: List[SceneBox] = field(default_factory=list)
    hidden: int = 0
    more_text: Optional[str] = None
    more_rect: Optional[Rect] = None
    footer_lines: List[str] = field(default_factory=list)
    footer_rect: Optional[Rect] = None

    @property
    def shown(self) -> int:
        return len(self.boxes)


def format_day_label(day: date) -> str:
    """Short cell label, e.g. "Wed Oct 7"."""
    return f"{day:%a %b} {day.day}"


def max_visible_scenes(cell_height: float, has_scenes: bool) -> int:
    inner_height = cell_height - 2 * CELL_PADDING
    footer = FOOTER_BAND_HEIGHT if has_scenes else 0
    usable = max(0.0, inner_height - DATE_BAND_HEIGHT - footer)
    return int(usable // SCENE_BOX_HEIGHT)


def layout_day_cell(day: ShootDay, rect: Rect) -> CellLayout:
    content = rect.inset(CELL_PADDING, CELL_PADDING)
    layout = CellLayout(
        date_label=format_day_label(day.date),
        date_rect=Rect(content.min_x, content.max_y - DATE_LABEL_HEIGHT,
                       content.width, DATE_LABEL_HEIGHT),
    )

    count = len(day.scenes)
    if count == 0:
        return layout

    capacity = max_visible_scenes(rect.height, has_scenes=True)
    if count <= capacity:
        shown = count
    else:
        # the marker takes the slot of the last box that would fit
        shown = max(0, capacity - 1)

    y_offset = DATE_BAND_HEIGHT
    for scene in day.scenes[:shown]:
        box = Rect(content.min_x, content.max_y - y_offset - SCENE_BOX_HEIGHT,
                   content.width, SCENE_BOX_HEIGHT)
        layout.boxes.append(SceneBox(scene=scene, rect=box))
        y_offset += SCENE_BOX_HEIGHT

    layout.hidden = count - shown
    if layout.hidden > 0:
        layout.more_text = f"+{layout.hidden} more"
        layout.more_rect = Rect(content.min_x, content.max_y - y_offset - SCENE_FONT_SIZE,
                                content.width, SCENE_FONT_SIZE)

    layout.footer_lines = [
        f"Total: {format_eighths(day.total_duration)}",
        f"Est: {format_minutes(day.total_estimated_time)}",
    ]
    layout.footer_rect = Rect(content.min_x, content.min_y, content.width, 20)
    return layout
