# ------------------------------------------------------------
# shootcal.constants
# ------------------------------------------------------------
# Defaults, page geometry and drawing constants shared by the
# layout engine, the PDF exporter and the desktop shell.
# ------------------------------------------------------------

import os

# ------------------------
# Defaults and UI constants
# ------------------------
DEFAULTS = {
    "project_title": "Untitled Movie",     # title used when none is set
    "legacy_title": "Loaded Project",      # title given to legacy files
    "days_before_today": 3,                # fresh project range start offset
    "days_after_today": 30,                # fresh project range end offset
    "autosave_delay_ms": 2000,             # debounce for the auto-save timer
    "last_dir": os.path.expanduser("~/Documents"),
}

SETTINGS_FILE = os.path.join(os.path.expanduser("~"), ".shootcal_settings.json")
AUTOSAVE_FILE = os.path.join(os.path.expanduser("~"), ".shootcal_autosave.json")

# Date format written into project files
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

# ------------------------
# Page geometry (points, US Letter landscape)
# ------------------------
PAGE_WIDTH = 792
PAGE_HEIGHT = 612
PAGE_MARGIN = 40
HEADER_HEIGHT = 50
HEADER_GAP = 10
SAFETY_MARGIN = 10
COLUMNS = 7

# ------------------------
# Row height buckets: (upper bound of max scenes per day, height)
# ------------------------
ROW_MIN_HEIGHT = 60
ROW_HEIGHT_BUCKETS = (
    (0, ROW_MIN_HEIGHT),
    (2, 80),
    (4, 120),
    (7, 170),
    (10, 200),
)
ROW_MAX_HEIGHT = 220

# ------------------------
# Day cell metrics
# ------------------------
CELL_PADDING = 8
DATE_BAND_HEIGHT = 16
DATE_LABEL_HEIGHT = 12
FOOTER_BAND_HEIGHT = 25
SCENE_BOX_HEIGHT = 11
SCENE_FONT_SIZE = 8
DATE_FONT_SIZE = 10
FOOTER_FONT_SIZE = 7

# ------------------------
# PDF styling
# ------------------------
FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
TITLE_FONT_SIZE = 14
SUBTITLE_FONT_SIZE = 10
GRID_LINE_WIDTH = 0.5
BOX_LINE_WIDTH = 0.5
BOX_RADIUS = 2
NIGHT_FILL_GRAY = 0.9
