# -*- coding: utf-8 -*-
"""Plot window for the recorded angle history.

Features:
- Oscilloscope: the three angles and the seat-pan difference over the last 30 s
- Phase charts: angle1/angle2, angle1/angle3, angle3/angle2 with the saved positions marked;
  a marker can be dragged to edit that position on the chart's two axes
- Export SVG and CSV
"""

from __future__ import annotations

import csv
import math
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple

from PyQt6.QtCore import QTimer
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QPushButton,
    QFileDialog, QMessageBox, QCheckBox
)

from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.figure import Figure

from ..core.settings import POSITION_NAMES
from ..utils.constants import POSITION_COLORS

if TYPE_CHECKING:
    from ..core.controller import ZFrameController

# (display key, x field, y field)
PHASE_CHARTS: List[Tuple[str, str, str]] = [
    ("show_graph12", "angle1", "angle2"),
    ("show_graph13", "angle1", "angle3"),
    ("show_graph32", "angle3", "angle2"),
]

REFRESH_MS = 250
PICK_RADIUS_PX = 10.0


class PlotWindow(QMainWindow):
    def __init__(self, ctrl: "ZFrameController", on_positions_edited: Optional[Callable[[], None]] = None):
        super().__init__()
        self.ctrl = ctrl
        self._on_positions_edited = on_positions_edited
        # axes -> (x field, y field), rebuilt by plot()
        self._chart_axes: Dict[object, Tuple[str, str]] = {}
        # (position name, x field, y field) while a marker is held
        self._dragging: Optional[Tuple[str, str, str]] = None
        self.setWindowTitle("Angle history")
        self.resize(1000, 650)

        root = QWidget(self)
        self.setCentralWidget(root)
        layout = QVBoxLayout(root)

        bar = QHBoxLayout()
        self.chk_live = QCheckBox("Live")
        self.chk_live.setChecked(True)
        self.btn_export_svg = QPushButton("Export SVG")
        self.btn_export_csv = QPushButton("Export CSV")
        bar.addWidget(self.chk_live)
        bar.addStretch(1)
        bar.addWidget(self.btn_export_svg)
        bar.addWidget(self.btn_export_csv)
        layout.addLayout(bar)

        self.fig = Figure(figsize=(8, 5))
        self.canvas = FigureCanvas(self.fig)
        layout.addWidget(self.canvas, 1)

        self.btn_export_svg.clicked.connect(self.export_svg)
        self.btn_export_csv.clicked.connect(self.export_csv)
        self.canvas.mpl_connect("button_press_event", self._on_press)
        self.canvas.mpl_connect("motion_notify_event", self._on_motion)
        self.canvas.mpl_connect("button_release_event", self._on_release)

        self._timer = QTimer(self)
        self._timer.timeout.connect(self._on_tick)
        self._timer.start(REFRESH_MS)
        self.plot()

    def _on_tick(self):
        if self.chk_live.isChecked() and self.isVisible() and self._dragging is None:
            self.plot()

    def _phase_charts(self) -> List[Tuple[str, str]]:
        display = self.ctrl.settings.display
        return [(x, y) for key, x, y in PHASE_CHARTS if display.get(key, False)]

    def plot(self):
        data = self.ctrl.recorder.as_arrays()
        show_scope = self.ctrl.settings.display.get("show_oscilloscope", False)
        charts = self._phase_charts()
        # Always show something: fall back to the oscilloscope alone.
        if not charts and not show_scope:
            show_scope = True
        n = len(charts) + (1 if show_scope else 0)

        self.fig.clear()
        self._chart_axes = {}
        idx = 1
        if show_scope:
            ax = self.fig.add_subplot(n, 1, idx)
            idx += 1
            t = data["time_ms"] / 1000.0
            for key in ("angle1", "angle2", "angle3", "seat_pan_difference"):
                ax.plot(t, data[key], label=key)
            ax.set_xlabel("Time (s)")
            ax.set_ylabel("deg")
            ax.legend(loc="upper left", fontsize="small")
            ax.grid(True)

        for x_key, y_key in charts:
            ax = self.fig.add_subplot(n, 1, idx)
            idx += 1
            self._chart_axes[ax] = (x_key, y_key)
            ax.plot(data[x_key], data[y_key], color="0.4", linewidth=1.0)
            for name in POSITION_NAMES:
                pos = self.ctrl.settings.position(name)
                ax.plot(
                    getattr(pos, x_key), getattr(pos, y_key), "o",
                    color=POSITION_COLORS[name].name(), label=name,
                )
            ax.plot(self.ctrl.angles.get(int(x_key[-1])), self.ctrl.angles.get(int(y_key[-1])), "kx")
            lim_x = self.ctrl.limits.get(int(x_key[-1]))
            lim_y = self.ctrl.limits.get(int(y_key[-1]))
            ax.set_xlim(lim_x.min, lim_x.max)
            ax.set_ylim(lim_y.min, lim_y.max)
            ax.set_xlabel(x_key)
            ax.set_ylabel(y_key)
            ax.grid(True)

        self.fig.tight_layout()
        self.canvas.draw_idle()

    # --- saved-position markers ----------------------------------------

    def _pick_marker(self, ax, x_key: str, y_key: str, px: float, py: float) -> Optional[str]:
        best, best_d = None, PICK_RADIUS_PX
        for name in POSITION_NAMES:
            pos = self.ctrl.settings.position(name)
            mx, my = ax.transData.transform((getattr(pos, x_key), getattr(pos, y_key)))
            d = math.hypot(mx - px, my - py)
            if d <= best_d:
                best, best_d = name, d
        return best

    def _on_press(self, event):
        if event.button != 1 or event.inaxes not in self._chart_axes:
            return
        x_key, y_key = self._chart_axes[event.inaxes]
        name = self._pick_marker(event.inaxes, x_key, y_key, event.x, event.y)
        if name is not None:
            self._dragging = (name, x_key, y_key)

    def _on_motion(self, event):
        if self._dragging is None or event.xdata is None or event.ydata is None:
            return
        name, x_key, y_key = self._dragging
        if self._chart_axes.get(event.inaxes) != (x_key, y_key):
            return
        self.ctrl.move_saved_position(name, {int(x_key[-1]): event.xdata, int(y_key[-1]): event.ydata})
        self.plot()

    def _on_release(self, event):
        if self._dragging is None:
            return
        self._dragging = None
        if self._on_positions_edited is not None:
            self._on_positions_edited()

    def export_svg(self):
        path, _ = QFileDialog.getSaveFileName(self, "Export SVG", "", "SVG (*.svg)")
        if not path:
            return
        if not path.lower().endswith(".svg"):
            path += ".svg"
        try:
            self.fig.savefig(path, format="svg")
        except Exception as e:
            QMessageBox.critical(self, "Export failed", str(e))

    def export_csv(self):
        samples = self.ctrl.recorder.samples
        if not samples:
            QMessageBox.information(self, "Export", "No data to export.")
            return
        path, _ = QFileDialog.getSaveFileName(self, "Export CSV", "", "CSV (*.csv)")
        if not path:
            return
        if not path.lower().endswith(".csv"):
            path += ".csv"
        try:
            with open(path, "w", newline="", encoding="utf-8") as f:
                w = csv.writer(f)
                w.writerow(["time_ms", "angle1", "angle2", "angle3", "seat_pan_difference", "control"])
                for s in samples:
                    w.writerow([s.time_ms, s.angle1, s.angle2, s.angle3, s.seat_pan_difference, s.control_label or ""])
        except Exception as e:
            QMessageBox.critical(self, "Export failed", str(e))

    def closeEvent(self, e):
        self._timer.stop()
        super().closeEvent(e)
