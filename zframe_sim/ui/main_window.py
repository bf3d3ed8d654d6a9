# -*- coding: utf-8 -*-
"""Main window + menus."""

from __future__ import annotations

import time
import traceback
from typing import Optional

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import QMainWindow, QDockWidget, QStatusBar, QMessageBox

from ..core.controller import ZFrameController
from ..core.session_log import SessionDebugLogger
from ..core.settings import ZFrameSettings, load_settings, save_settings
from ..utils.constants import TICK_INTERVAL_MS
from .panel import ControlPanel
from .plot_window import PlotWindow
from .settings_dialog import SettingsDialog
from .view import FrameView


def _now_ms() -> float:
    return time.monotonic() * 1000.0


class MainWindow(QMainWindow):
    def __init__(self, settings_path: Optional[str] = None):
        super().__init__()
        self.setWindowTitle("Z-Frame Simulator")
        self.resize(1200, 800)
        self.settings_path = settings_path
        self.ctrl = ZFrameController(load_settings(settings_path), start_ms=_now_ms(), on_change=self._refresh)
        self.view = FrameView(self.ctrl)
        self.setCentralWidget(self.view)
        self.dock = QDockWidget("Controls", self)
        self.panel = ControlPanel(self.ctrl)
        self.dock.setWidget(self.panel)
        self.addDockWidget(Qt.DockWidgetArea.RightDockWidgetArea, self.dock)
        self.setStatusBar(QStatusBar())
        self.plot_window: Optional[PlotWindow] = None
        self._last_label: Optional[str] = ""
        self._build_menus()

        self._timer = QTimer(self)
        self._timer.timeout.connect(self._on_tick)
        self._timer.start(TICK_INTERVAL_MS)

    def _build_menus(self):
        mb = self.menuBar()
        m_file = mb.addMenu("&File")
        act_settings = QAction("Settings...", self)
        act_settings.triggered.connect(self.open_settings)
        m_file.addAction(act_settings)
        act_defaults = QAction("Reset settings to defaults", self)
        act_defaults.triggered.connect(self.reset_settings)
        m_file.addAction(act_defaults)
        m_file.addSeparator()
        act_exit = QAction("Exit", self)
        act_exit.setShortcut(QKeySequence.StandardKey.Quit)
        act_exit.triggered.connect(self.close)
        m_file.addAction(act_exit)

        m_sim = mb.addMenu("&Simulation")
        act_reset = QAction("Reset angles", self)
        act_reset.setShortcut(QKeySequence("Ctrl+R"))
        act_reset.triggered.connect(lambda: self.ctrl.reset())
        m_sim.addAction(act_reset)
        act_clear = QAction("Clear history", self)
        act_clear.triggered.connect(lambda: self.ctrl.clear_history(_now_ms()))
        m_sim.addAction(act_clear)
        act_stop = QAction("Stop animation", self)
        act_stop.setShortcut(QKeySequence("Esc"))
        act_stop.triggered.connect(lambda: self.ctrl.cancel_animation())
        m_sim.addAction(act_stop)

        m_view = mb.addMenu("&View")
        act_plot = QAction("Plot...", self)
        act_plot.triggered.connect(self.open_plot)
        m_view.addAction(act_plot)
        self.act_debug = QAction("Debug log", self)
        self.act_debug.setCheckable(True)
        self.act_debug.toggled.connect(self.set_debug_log)
        m_view.addAction(self.act_debug)

    def _on_tick(self):
        try:
            self.ctrl.tick(_now_ms())
        except Exception:
            traceback.print_exc()
            self._timer.stop()
            QMessageBox.critical(self, "Simulation", "Simulation stopped after an internal error.")
            return
        label = self.ctrl.control_label()
        if label != self._last_label:
            self._last_label = label
            self.statusBar().showMessage(label or "Idle")

    def _refresh(self):
        if hasattr(self, "view"):
            self.view.update()
        if hasattr(self, "panel"):
            self.panel.refresh()

    def open_settings(self):
        dlg = SettingsDialog(self.ctrl.settings, self)
        if dlg.exec():
            self._apply_settings(dlg.result_settings())

    def reset_settings(self):
        self._apply_settings(ZFrameSettings.defaults())

    def _apply_settings(self, settings: ZFrameSettings):
        self.ctrl.apply_settings(settings)
        self.ctrl.resize(self.view.width(), self.view.height())
        self.panel.sync_from_settings()
        self._save_settings()

    def _save_settings(self):
        try:
            save_settings(self.ctrl.settings, self.settings_path)
        except OSError as e:
            QMessageBox.warning(self, "Settings", f"Could not save settings:\n{e}")

    def open_plot(self):
        if self.plot_window is None:
            self.plot_window = PlotWindow(self.ctrl, on_positions_edited=self._save_settings)
        self.plot_window.show()
        self.plot_window.raise_()

    def set_debug_log(self, enabled: bool):
        self.ctrl.logger.close()
        self.ctrl.logger = SessionDebugLogger(enabled=enabled)
        if enabled and not self.ctrl.logger.enabled:
            QMessageBox.warning(self, "Debug log", "Could not open the debug log file.")
            self.act_debug.setChecked(False)
        elif enabled:
            self.statusBar().showMessage(f"Logging to {self.ctrl.logger.log_path}", 3000)

    def closeEvent(self, e):
        self._timer.stop()
        try:
            save_settings(self.ctrl.settings, self.settings_path)
        except OSError:
            traceback.print_exc()
        self.ctrl.logger.close()
        if self.plot_window is not None:
            self.plot_window.close()
        super().closeEvent(e)
