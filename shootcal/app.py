# ------------------------------------------------------------
# shootcal.app
# ------------------------------------------------------------
# PyQt6 desktop shell: scene pool, calendar board, open/save,
# PDF export and a debounced auto-save. All scheduling rules
# live in shootcal.models; the calendar board uses the same
# week grouping, row planning and cell layout as the PDF.
# ------------------------------------------------------------

import copy
import os
import sys
from datetime import datetime

from loguru import logger
from PyQt6.QtCore import QDate, Qt, QTimer
from PyQt6.QtGui import QBrush, QColor, QFont
from PyQt6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QPushButton,
    QTableWidget, QTableWidgetItem, QComboBox, QLabel, QLineEdit, QCheckBox,
    QMessageBox, QFileDialog, QGraphicsDropShadowEffect, QFrame, QListWidget,
    QListWidgetItem, QDateEdit, QHeaderView,
)

from .cells import layout_day_cell
from .errors import ParseError, ShootcalError
from .geometry import Rect
from .models import DayNight, Project, Scene, sanitize_filename
from .parsers import (
    DURATION_PLACEHOLDER, TIME_PLACEHOLDER, duration_hint, format_eighths, format_minutes,
    parse_duration, parse_time, time_hint,
)
from .pdf_export import export_calendar_pdf
from .planner import fit_row_heights, ideal_row_heights
from .storage import (
    load_default_project, load_project, load_settings, save_default_project, save_project,
    save_settings,
)
from .weeks import group_days_into_weeks

# ------------------------
# UI constants
# ------------------------
CARD_BG = "#f8f9fb"
CARD_PADDING = 6
CARD_RADIUS = 6
CARD_SHADOW_BLUR = 12
CARD_SHADOW_OFFSET = (0, 3)
SCHEDULED_CELL_BG = "#fff4e0"
NIGHT_PREFIX = "(N) "
BOARD_CELL_WIDTH = 140
WEEKDAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
SCENE_ID_ROLE = Qt.ItemDataRole.UserRole


# ------------------------------------------------------------
# Main application window
# ------------------------------------------------------------
class ShootcalWindow(QMainWindow):
    """Main window: edits a Project and hands snapshots to the exporter."""

    def __init__(self, project=None):
        super().__init__()
        self.setWindowTitle("Shoot Calendar")
        self.resize(1400, 900)

        # Internal application state
        self.settings = load_settings()
        self.project = project or load_default_project() or Project.new()
        self.current_path = ""
        self._weeks = []

        # Debounced auto-save: every mutation restarts the timer
        self.autosave_timer = QTimer(self)
        self.autosave_timer.setSingleShot(True)
        self.autosave_timer.setInterval(self.settings["autosave_delay_ms"])
        self.autosave_timer.timeout.connect(self._autosave)

        self._build_ui()
        self._load_project_into_form()
        self.refresh()

    # --------------------------------------------------------
    # Cross-platform system UI font helper
    # --------------------------------------------------------
    def _system_ui_font(self, size=12, bold=False, italic=False):
        if sys.platform.startswith("win"):
            family = "Segoe UI"
        elif sys.platform == "darwin":
            family = ".AppleSystemUIFont"
        else:
            family = "Noto Sans"

        font = QFont(family, size)
        font.setBold(bold)
        font.setItalic(italic)
        font.setStyleStrategy(QFont.StyleStrategy.PreferAntialias)
        return font

    # --------------------------------------------------------
    # Helper: create a card-styled QFrame with drop shadow
    # --------------------------------------------------------
    def _make_card(self):
        frame = QFrame()
        frame.setFrameShape(QFrame.Shape.StyledPanel)
        frame.setStyleSheet(
            f"""
            QFrame {{
                background-color: {CARD_BG};
                border-radius: {CARD_RADIUS}px;
                padding: {CARD_PADDING}px;
            }}
            """
        )

        shadow = QGraphicsDropShadowEffect()
        shadow.setBlurRadius(CARD_SHADOW_BLUR)
        shadow.setOffset(*CARD_SHADOW_OFFSET)
        shadow.setColor(QColor(0, 0, 0, 60))
        frame.setGraphicsEffect(shadow)
        return frame

    def _label(self, text, bold=True):
        lbl = QLabel(text)
        lbl.setFont(self._system_ui_font(12, bold=bold))
        return lbl

    def _button(self, text, slot):
        btn = QPushButton(text)
        btn.setFont(self._system_ui_font(12, bold=True))
        btn.clicked.connect(slot)
        return btn

    # --------------------------------------------------------
    # UI builder: constructs and arranges all widgets
    # --------------------------------------------------------
    def _build_ui(self):
        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        layout.setSpacing(6)

        top_row = QHBoxLayout()
        layout.addLayout(top_row)

        # Project card - title, range, shift/lock
        self.card_project = self._make_card()
        project_layout = QHBoxLayout(self.card_project)
        top_row.addWidget(self.card_project)

        project_layout.addWidget(self._label("Movie Title:"))
        self.title_input = QLineEdit()
        self.title_input.setFont(self._system_ui_font(12))
        self.title_input.textEdited.connect(self.title_changed)
        project_layout.addWidget(self.title_input)

        project_layout.addWidget(self._label("From:"))
        self.start_input = QDateEdit()
        self.start_input.setCalendarPopup(True)
        project_layout.addWidget(self.start_input)
        project_layout.addWidget(self._label("To:"))
        self.end_input = QDateEdit()
        self.end_input.setCalendarPopup(True)
        project_layout.addWidget(self.end_input)
        project_layout.addWidget(self._button("Apply Range", self.apply_date_range))

        self.shift_toggle = QCheckBox("Shift scenes with range")
        self.shift_toggle.setFont(self._system_ui_font(12))
        self.shift_toggle.stateChanged.connect(self.shift_mode_changed)
        project_layout.addWidget(self.shift_toggle)

        # Actions card
        self.card_actions = self._make_card()
        act_layout = QHBoxLayout(self.card_actions)
        top_row.addWidget(self.card_actions)
        act_layout.addWidget(self._button("Open", self.open_project))
        act_layout.addWidget(self._button("Save", self.save_project_as))
        act_layout.addWidget(self._button("Export PDF", self.export_pdf))
        act_layout.addWidget(self._button("Clear All", self.clear_all))

        # New scene card
        self.card_scene = self._make_card()
        scene_layout = QHBoxLayout(self.card_scene)
        layout.addWidget(self.card_scene)

        scene_layout.addWidget(self._label("Scene:"))
        self.scene_title_input = QLineEdit()
        self.scene_title_input.setPlaceholderText("Scene title")
        scene_layout.addWidget(self.scene_title_input)

        scene_layout.addWidget(self._label("Pages:"))
        self.duration_input = QLineEdit()
        self.duration_input.setPlaceholderText(DURATION_PLACEHOLDER)
        self.duration_input.textChanged.connect(self._update_hints)
        scene_layout.addWidget(self.duration_input)
        self.duration_hint_label = self._label("", bold=False)
        scene_layout.addWidget(self.duration_hint_label)

        scene_layout.addWidget(self._label("Time:"))
        self.time_input = QLineEdit()
        self.time_input.setPlaceholderText(TIME_PLACEHOLDER)
        self.time_input.textChanged.connect(self._update_hints)
        scene_layout.addWidget(self.time_input)
        self.time_hint_label = self._label("", bold=False)
        scene_layout.addWidget(self.time_hint_label)

        self.day_night_input = QComboBox()
        self.day_night_input.addItems([dn.display_name for dn in DayNight])
        scene_layout.addWidget(self.day_night_input)
        scene_layout.addWidget(self._button("Add Scene", self.add_scene))

        # Middle row - pool, board, selected day
        mid_row = QHBoxLayout()
        layout.addLayout(mid_row, stretch=1)

        pool_col = QVBoxLayout()
        mid_row.addLayout(pool_col, stretch=1)
        pool_col.addWidget(self._label("Unscheduled Scenes"))
        self.pool_list = QListWidget()
        self.pool_list.setFont(self._system_ui_font(11))
        pool_col.addWidget(self.pool_list)
        pool_col.addWidget(self._button("Assign to Selected Day", self.assign_selected))
        pool_col.addWidget(self._button("Duplicate", self.duplicate_selected))
        pool_col.addWidget(self._button("Delete", self.delete_selected))

        board_col = QVBoxLayout()
        mid_row.addLayout(board_col, stretch=4)
        self.fit_toggle = QCheckBox("Fit to window")
        self.fit_toggle.setFont(self._system_ui_font(12))
        self.fit_toggle.stateChanged.connect(lambda _state: self.refresh_board())
        board_col.addWidget(self.fit_toggle)
        self.board = QTableWidget()
        self.board.setColumnCount(7)
        self.board.setHorizontalHeaderLabels(WEEKDAY_LABELS)
        self.board.setFont(self._system_ui_font(10))
        self.board.setWordWrap(True)
        self.board.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
        self.board.itemSelectionChanged.connect(self.refresh_day_panel)
        board_col.addWidget(self.board)

        day_col = QVBoxLayout()
        mid_row.addLayout(day_col, stretch=1)
        self.day_label = self._label("Selected Day")
        day_col.addWidget(self.day_label)
        self.day_list = QListWidget()
        self.day_list.setFont(self._system_ui_font(11))
        day_col.addWidget(self.day_list)
        day_col.addWidget(self._button("Move Up", lambda: self.reorder_selected(-1)))
        day_col.addWidget(self._button("Move Down", lambda: self.reorder_selected(1)))
        day_col.addWidget(self._button("Return to Pool", self.unschedule_selected))

        # Bottom row
        bottom_row = QHBoxLayout()
        layout.addLayout(bottom_row)
        self.stats_label = self._label("", bold=False)
        bottom_row.addWidget(self.stats_label)
        bottom_row.addStretch()
        self.last_saved_label = QLabel("Last auto-saved: --:--:--")
        self.last_saved_label.setFont(self._system_ui_font(12, italic=True))
        bottom_row.addWidget(self.last_saved_label)

    # ------------------------
    # Form <- project
    # ------------------------
    def _load_project_into_form(self):
        self.title_input.setText(self.project.title)
        self.shift_toggle.blockSignals(True)
        self.shift_toggle.setChecked(self.project.shift_mode)
        self.shift_toggle.blockSignals(False)
        if self.project.start_date:
            start, end = self.project.start_date, self.project.end_date
            self.start_input.setDate(QDate(start.year, start.month, start.day))
            self.end_input.setDate(QDate(end.year, end.month, end.day))

    # ------------------------
    # Refresh views from the project
    # ------------------------
    def refresh(self):
        self.refresh_pool()
        self.refresh_board()
        self.refresh_day_panel()
        self.refresh_stats()

    def refresh_pool(self):
        self.pool_list.clear()
        for scene in self.project.unscheduled:
            item = QListWidgetItem(self._scene_text(scene))
            item.setData(SCENE_ID_ROLE, scene.id)
            self.pool_list.addItem(item)

    def refresh_board(self):
        self._weeks = group_days_into_weeks(self.project.shoot_days)
        if self.fit_toggle.isChecked():
            heights = fit_row_heights(self._weeks, self.board.viewport().height())
        else:
            heights = ideal_row_heights(self._weeks)

        self.board.clearContents()
        self.board.setRowCount(len(self._weeks))
        for r, week in enumerate(self._weeks):
            self.board.setRowHeight(r, int(heights[r]))
            for c, day in enumerate(week):
                if day is None:
                    item = QTableWidgetItem("")
                    item.setFlags(Qt.ItemFlag.NoItemFlags)
                    self.board.setItem(r, c, item)
                    continue
                cell = layout_day_cell(day, Rect(0, 0, BOARD_CELL_WIDTH, heights[r]))
                lines = [cell.date_label]
                lines += [(NIGHT_PREFIX if box.is_night else "") + box.title for box in cell.boxes]
                if cell.more_text:
                    lines.append(cell.more_text)
                lines += cell.footer_lines
                item = QTableWidgetItem("\n".join(lines))
                item.setTextAlignment(Qt.AlignmentFlag.AlignTop | Qt.AlignmentFlag.AlignLeft)
                item.setFlags(Qt.ItemFlag.ItemIsEnabled | Qt.ItemFlag.ItemIsSelectable)
                if day.scenes:
                    item.setBackground(QBrush(QColor(SCHEDULED_CELL_BG)))
                self.board.setItem(r, c, item)

    def refresh_day_panel(self):
        self.day_list.clear()
        day = self._selected_day()
        if day is None:
            self.day_label.setText("Selected Day")
            return
        self.day_label.setText(f"{day.date:%A %b} {day.date.day}")
        for scene in day.scenes:
            item = QListWidgetItem(self._scene_text(scene))
            item.setData(SCENE_ID_ROLE, scene.id)
            self.day_list.addItem(item)

    def refresh_stats(self):
        p = self.project
        text = (
            f"Shoot Days: {len(p.scheduled_days)}   Scenes: {p.total_scenes}   "
            f"Pages: {format_eighths(p.total_duration)}   Est: {format_minutes(p.total_estimated_time)}"
        )
        if p.start_date:
            text += f"   From {p.start_date:%a %b} {p.start_date.day} to {p.end_date:%a %b} {p.end_date.day}"
        self.stats_label.setText(text)

    def _scene_text(self, scene):
        return (
            f"{NIGHT_PREFIX if scene.is_night else ''}{scene.title}  "
            f"[{format_eighths(scene.duration)} pgs, {format_minutes(scene.estimated_time)}]"
        )

    def resizeEvent(self, event):
        super().resizeEvent(event)
        fit_toggle = getattr(self, "fit_toggle", None)
        if fit_toggle is not None and fit_toggle.isChecked():
            self.refresh_board()

    # ------------------------
    # Selection helpers
    # ------------------------
    def _selected_day(self):
        items = self.board.selectedItems()
        if not items:
            return None
        r, c = items[0].row(), items[0].column()
        if r >= len(self._weeks):
            return None
        day = self._weeks[r][c]
        if day is None:
            return None
        # placeholders are only for display; act on the project's own day
        return self.project.day_for_date(day.date)

    @staticmethod
    def _selected_scene_id(list_widget):
        item = list_widget.currentItem()
        return item.data(SCENE_ID_ROLE) if item else None

    # ------------------------
    # Mutations (each one schedules an auto-save)
    # ------------------------
    def _changed(self):
        self.refresh()
        self.autosave_timer.start()

    def _run(self, action, *args):
        try:
            action(*args)
        except ShootcalError as e:
            QMessageBox.warning(self, "Schedule", str(e))
            return False
        self._changed()
        return True

    def title_changed(self, text):
        self.project.title = text
        self.autosave_timer.start()

    def shift_mode_changed(self, state):
        self.project.shift_mode = bool(state)
        self.autosave_timer.start()

    def apply_date_range(self):
        start = self.start_input.date().toPyDate()
        end = self.end_input.date().toPyDate()
        self._run(self.project.update_date_range, start, end)

    def _update_hints(self):
        self.duration_hint_label.setText(duration_hint(self.duration_input.text()) or "")
        self.time_hint_label.setText(time_hint(self.time_input.text()) or "")

    def add_scene(self):
        title = self.scene_title_input.text().strip()
        if not title:
            QMessageBox.warning(self, "New Scene", "Enter a scene title.")
            return
        try:
            duration = parse_duration(self.duration_input.text())
            minutes = parse_time(self.time_input.text())
        except ParseError as e:
            QMessageBox.warning(self, "New Scene", f"Invalid input: {e}")
            return

        scene = Scene.create(title, duration, minutes, DayNight(self.day_night_input.currentText()))
        if self._run(self.project.add_scene, scene):
            self.scene_title_input.clear()
            self.duration_input.clear()
            self.time_input.clear()

    def assign_selected(self):
        scene_id = self._selected_scene_id(self.pool_list)
        day = self._selected_day()
        if scene_id is None or day is None:
            QMessageBox.information(self, "Assign", "Select a scene and a day first.")
            return
        self._run(self.project.assign, scene_id, day.id)

    def duplicate_selected(self):
        scene_id = self._selected_scene_id(self.pool_list)
        if scene_id is not None:
            self._run(self.project.duplicate_scene, scene_id)

    def delete_selected(self):
        scene_id = self._selected_scene_id(self.pool_list)
        if scene_id is not None:
            self._run(self.project.delete_scene, scene_id)

    def reorder_selected(self, step):
        scene_id = self._selected_scene_id(self.day_list)
        day = self._selected_day()
        if scene_id is None or day is None:
            return
        row = self.day_list.currentRow()
        # move_scene adjusts for the removed source slot when moving down
        target = row + step if step < 0 else row + step + 1
        if self._run(self.project.move_scene, scene_id, day.id, target):
            self.day_list.setCurrentRow(min(max(0, row + step), self.day_list.count() - 1))

    def unschedule_selected(self):
        scene_id = self._selected_scene_id(self.day_list)
        if scene_id is not None:
            self._run(self.project.unschedule, scene_id)

    def clear_all(self):
        reply = QMessageBox.question(
            self,
            "Clear All Scenes",
            "This deletes every scene, scheduled or not. Continue?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        )
        if reply == QMessageBox.StandardButton.Yes:
            self._run(self.project.clear_all_scenes)

    # ------------------------
    # Auto-save
    # ------------------------
    def _autosave(self):
        if save_default_project(copy.deepcopy(self.project)):
            now = datetime.now().strftime("%H:%M:%S")
            self.last_saved_label.setText(f"Last auto-saved: {now}")

    # ------------------------
    # Files: open / save / export
    # ------------------------
    def _start_dir(self):
        last_dir = self.settings["last_dir"]
        return last_dir if os.path.isdir(last_dir) else os.path.expanduser("~")

    def _remember_dir(self, path):
        self.settings["last_dir"] = os.path.dirname(path)
        save_settings(self.settings)

    def open_project(self):
        path, _ = QFileDialog.getOpenFileName(self, "Open Schedule", self._start_dir(), "Schedule Files (*.json)")
        if not path:
            return
        try:
            self.project = load_project(path)
        except ShootcalError as e:
            QMessageBox.critical(self, "File Error", str(e))
            return
        self.current_path = path
        self._remember_dir(path)
        self._load_project_into_form()
        self._changed()

    def save_project_as(self):
        default_name = os.path.join(self._start_dir(), sanitize_filename(self.project.title) + ".json")
        path, _ = QFileDialog.getSaveFileName(self, "Save Schedule", default_name, "Schedule Files (*.json)")
        if not path:
            return
        try:
            save_project(copy.deepcopy(self.project), path)
        except ShootcalError as e:
            QMessageBox.critical(self, "Save Error", str(e))
            return
        self.current_path = path
        self._remember_dir(path)
        QMessageBox.information(self, "Saved", f"Schedule saved successfully to: {os.path.basename(path)}")

    def export_pdf(self):
        default_name = os.path.join(self._start_dir(), sanitize_filename(self.project.title) + "_calendar.pdf")
        path, _ = QFileDialog.getSaveFileName(self, "Export Calendar PDF", default_name, "PDF Files (*.pdf)")
        if not path:
            return
        try:
            pages = export_calendar_pdf(copy.deepcopy(self.project), path)
        except ShootcalError as e:
            QMessageBox.critical(self, "Export Error", f"Failed to export PDF: {e}")
            return
        self._remember_dir(path)
        QMessageBox.information(
            self, "Export Complete",
            f"PDF calendar exported to: {os.path.basename(path)} ({pages} page{'s' if pages != 1 else ''})",
        )

    def closeEvent(self, event):
        if self.autosave_timer.isActive():
            self.autosave_timer.stop()
            self._autosave()
        super().closeEvent(event)


# ------------------------------------------------------------
# Application entry point
# ------------------------------------------------------------
def run(project_path=None) -> int:
    QApplication.setHighDpiScaleFactorRoundingPolicy(Qt.HighDpiScaleFactorRoundingPolicy.PassThrough)
    app = QApplication(sys.argv)
    project = load_project(project_path) if project_path else None
    window = ShootcalWindow(project)
    if project_path:
        window.current_path = project_path
    window.show()
    logger.debug("Desktop shell started")
    return app.exec()
