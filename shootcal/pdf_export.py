# ------------------------------------------------------------
# shootcal.pdf_export
# ------------------------------------------------------------
# Draws the paginated calendar onto a reportlab canvas. Layout is
# decided by weeks/planner/paginate/cells/grid; this module only
# turns that geometry into canvas calls, one page at a time.
# ------------------------------------------------------------

from __future__ import annotations

import os

from loguru import logger
from reportlab.lib import colors
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from .cells import layout_day_cell
from .constants import (
    BOX_LINE_WIDTH, BOX_RADIUS, DATE_FONT_SIZE, FONT_BOLD, FONT_REGULAR, FOOTER_FONT_SIZE,
    GRID_LINE_WIDTH, NIGHT_FILL_GRAY, SCENE_FONT_SIZE, SUBTITLE_FONT_SIZE, TITLE_FONT_SIZE,
)
from .errors import ProjectFileError
from .grid import page_grid_lines
from .paginate import PageGeometry, paginate
from .planner import estimated_page_count, ideal_row_heights
from .weeks import group_days_into_weeks


# ------------------------
# Helper: clip text to a width with an ellipsis
# ------------------------
def fit_text(text, font_name, font_size, max_width):
    if pdfmetrics.stringWidth(text, font_name, font_size) <= max_width:
        return text
    ellipsis = "..."
    while text and pdfmetrics.stringWidth(text + ellipsis, font_name, font_size) > max_width:
        text = text[:-1]
    return text + ellipsis if text else ""


# ------------------------
# Header (page 1 only)
# ------------------------
def draw_header(c, rect, project):
    c.setFillColor(colors.black)
    c.setFont(FONT_BOLD, TITLE_FONT_SIZE)
    c.drawString(rect.min_x, rect.max_y - TITLE_FONT_SIZE,
                 fit_text(project.display_title, FONT_BOLD, TITLE_FONT_SIZE, rect.width))

    c.setFillColor(colors.grey)
    c.setFont(FONT_REGULAR, SUBTITLE_FONT_SIZE)
    c.drawString(rect.min_x, rect.max_y - 40, f"Shoot Days: {len(project.scheduled_days)}")


# ------------------------
# Day cell
# ------------------------
def draw_day(c, day, rect):
    cell = layout_day_cell(day, rect)

    c.setFillColor(colors.black)
    c.setFont(FONT_BOLD, DATE_FONT_SIZE)
    c.drawString(cell.date_rect.min_x, cell.date_rect.min_y + 2,
                 fit_text(cell.date_label, FONT_BOLD, DATE_FONT_SIZE, cell.date_rect.width))

    for box in cell.boxes:
        r = box.rect
        if box.is_night:
            c.setFillGray(NIGHT_FILL_GRAY)
        else:
            c.setFillColor(colors.white)
        c.setStrokeColor(colors.lightgrey)
        c.setLineWidth(BOX_LINE_WIDTH)
        c.roundRect(r.x, r.y, r.width, r.height, BOX_RADIUS, stroke=1, fill=1)

        c.setFillColor(colors.black)
        c.setFont(FONT_REGULAR, SCENE_FONT_SIZE)
        c.drawString(r.min_x + 3, r.min_y + 2.5,
                     fit_text(box.title, FONT_REGULAR, SCENE_FONT_SIZE, r.width - 6))

    if cell.more_text:
        c.setFillColor(colors.black)
        c.setFont(FONT_REGULAR, SCENE_FONT_SIZE)
        c.drawString(cell.more_rect.min_x, cell.more_rect.min_y, cell.more_text)

    if cell.footer_lines:
        c.setFillColor(colors.grey)
        c.setFont(FONT_REGULAR, FOOTER_FONT_SIZE)
        leading = FOOTER_FONT_SIZE + 2
        top = cell.footer_rect.max_y - FOOTER_FONT_SIZE
        for i, text in enumerate(cell.footer_lines):
            c.drawString(cell.footer_rect.min_x, top - i * leading,
                         fit_text(text, FONT_REGULAR, FOOTER_FONT_SIZE, cell.footer_rect.width))


def draw_grid(c, lines):
    if not lines:
        return
    c.setStrokeColor(colors.lightgrey)
    c.setLineWidth(GRID_LINE_WIDTH)
    c.lines([(ln.x1, ln.y1, ln.x2, ln.y2) for ln in lines])


# ------------------------
# Export entry point
# ------------------------
def export_calendar_pdf(project, path, geometry=None) -> int:
    """Write the project's calendar to `path` and return the page count.

    The project must not be mutated while this runs; callers pass a
    snapshot. An empty schedule still produces one header-only page.
    """
    geometry = geometry or PageGeometry()
    weeks = group_days_into_weeks(project.shoot_days)
    heights = ideal_row_heights(weeks)
    pages = paginate(weeks, heights, geometry, header=True)

    logger.debug(
        "Exporting {} weeks; estimated {} page(s)",
        len(weeks), estimated_page_count(weeks, geometry.content_height - geometry.safety_margin),
    )

    try:
        c = canvas.Canvas(os.fspath(path), pagesize=(geometry.width, geometry.height))
        c.setTitle(project.display_title)

        if not pages:
            draw_header(c, geometry.header_rect(), project)
            c.showPage()

        for page in pages:
            if page.has_header:
                draw_header(c, geometry.header_rect(), project)
            for row in page.rows:
                for col, day in enumerate(row.week):
                    if day is not None:
                        draw_day(c, day, row.cell_rect(col))
            draw_grid(c, page_grid_lines(page, geometry))
            c.showPage()

        c.save()
    except OSError as e:
        raise ProjectFileError(f"Could not write PDF to {path}: {e}") from e

    written = max(1, len(pages))
    logger.info("Exported {} page(s) to {}", written, path)
    return written
