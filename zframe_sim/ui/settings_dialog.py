# -*- coding: utf-8 -*-
"""Settings dialog: joint limits, saved positions, link lengths and display toggles."""

from __future__ import annotations

import copy
from typing import Dict, Tuple

from PyQt6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QGridLayout,
    QGroupBox,
    QCheckBox,
    QDoubleSpinBox,
    QLabel,
    QLineEdit,
    QMessageBox,
    QVBoxLayout,
)

from ..core.expression_service import eval_number_expression
from ..core.kinematics import LinkGeometry
from ..core.limits import JOINTS, JointLimit
from ..core.settings import DISPLAY_TOGGLES, POSITION_NAMES, SavedPosition, ZFrameSettings

DISPLAY_LABELS = {
    "show_graph12": "Angle1 / Angle2 chart",
    "show_graph13": "Angle1 / Angle3 chart",
    "show_graph32": "Angle3 / Angle2 chart",
    "draw_chair": "Draw chair outline",
    "show_oscilloscope": "Oscilloscope",
    "show_seat_pan_trails": "Seat-pan trails",
}


def _fmt(value: float) -> str:
    return f"{value:g}"


class SettingsDialog(QDialog):
    def __init__(self, settings: ZFrameSettings, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self._settings = settings
        self._result: ZFrameSettings = settings

        layout = QVBoxLayout(self)

        lim_box = QGroupBox("Joint limits (deg)")
        ll = QGridLayout(lim_box)
        ll.addWidget(QLabel("min"), 0, 1)
        ll.addWidget(QLabel("max"), 0, 2)
        self.ed_limits: Dict[int, Tuple[QLineEdit, QLineEdit]] = {}
        for row, j in enumerate(JOINTS, start=1):
            lim = settings.limits[j]
            ed_lo, ed_hi = QLineEdit(_fmt(lim.min)), QLineEdit(_fmt(lim.max))
            ll.addWidget(QLabel(f"angle{j}"), row, 0)
            ll.addWidget(ed_lo, row, 1)
            ll.addWidget(ed_hi, row, 2)
            self.ed_limits[j] = (ed_lo, ed_hi)
        layout.addWidget(lim_box)

        pos_box = QGroupBox("Saved positions")
        pl = QGridLayout(pos_box)
        for col, j in enumerate(JOINTS):
            pl.addWidget(QLabel(f"angle{j}"), 0, 1 + 2 * col, 1, 2)
        self.ed_positions: Dict[str, Dict[int, Tuple[QLineEdit, QCheckBox]]] = {}
        for row, name in enumerate(POSITION_NAMES, start=1):
            pos = settings.position(name)
            pl.addWidget(QLabel(f"Pos{row}"), row, 0)
            fields: Dict[int, Tuple[QLineEdit, QCheckBox]] = {}
            for col, j in enumerate(JOINTS):
                chk = QCheckBox()
                chk.setChecked(getattr(pos, f"angle{j}_enabled"))
                ed = QLineEdit(_fmt(getattr(pos, f"angle{j}")))
                ed.setMaximumWidth(70)
                chk.toggled.connect(ed.setEnabled)
                ed.setEnabled(chk.isChecked())
                pl.addWidget(chk, row, 1 + 2 * col)
                pl.addWidget(ed, row, 2 + 2 * col)
                fields[j] = (ed, chk)
            self.ed_positions[name] = fields
        layout.addWidget(pos_box)

        geom_box = QGroupBox("Link lengths (px)")
        gl = QFormLayout(geom_box)
        g = settings.geometry
        self.spin_middle = self._length_spin(g.middle_length)
        self.spin_seat = self._length_spin(g.seat_pan_length)
        self.spin_back = self._length_spin(g.backrest_length)
        gl.addRow("Middle", self.spin_middle)
        gl.addRow("Seat pan", self.spin_seat)
        gl.addRow("Backrest", self.spin_back)
        layout.addWidget(geom_box)

        disp_box = QGroupBox("Display")
        dl = QVBoxLayout(disp_box)
        self.chk_display: Dict[str, QCheckBox] = {}
        for key in DISPLAY_TOGGLES:
            chk = QCheckBox(DISPLAY_LABELS.get(key, key))
            chk.setChecked(bool(settings.display.get(key, DISPLAY_TOGGLES[key])))
            dl.addWidget(chk)
            self.chk_display[key] = chk
        layout.addWidget(disp_box)

        buttons = QDialogButtonBox(QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel)
        buttons.accepted.connect(self._on_accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def _length_spin(self, value: float) -> QDoubleSpinBox:
        spin = QDoubleSpinBox(self)
        spin.setRange(10.0, 1000.0)
        spin.setDecimals(1)
        spin.setValue(float(value))
        return spin

    def _number(self, ed: QLineEdit, label: str) -> float:
        val, err = eval_number_expression(ed.text())
        if err is not None:
            raise ValueError(f"{label}: {err}")
        return float(val)

    def _collect(self) -> ZFrameSettings:
        out = copy.deepcopy(self._settings)
        for j, (ed_lo, ed_hi) in self.ed_limits.items():
            lo = self._number(ed_lo, f"angle{j} min")
            hi = self._number(ed_hi, f"angle{j} max")
            out.limits[j] = JointLimit.ordered(lo, hi)
        for i, name in enumerate(POSITION_NAMES, start=1):
            prev = out.positions[name]
            values = {}
            for j, (ed, chk) in self.ed_positions[name].items():
                if chk.isChecked():
                    values[j] = self._number(ed, f"Pos{i} angle{j}")
                else:
                    values[j] = getattr(prev, f"angle{j}")
            fields = self.ed_positions[name]
            out.positions[name] = SavedPosition(
                values[1], values[2], values[3],
                fields[1][1].isChecked(), fields[2][1].isChecked(), fields[3][1].isChecked(),
            )
        out.geometry = LinkGeometry(
            out.geometry.base_pivot,
            float(self.spin_middle.value()),
            float(self.spin_seat.value()),
            float(self.spin_back.value()),
        )
        for key, chk in self.chk_display.items():
            out.display[key] = chk.isChecked()
        return out

    def _on_accept(self):
        try:
            self._result = self._collect()
        except ValueError as e:
            QMessageBox.warning(self, "Settings", str(e))
            return
        self.accept()

    def result_settings(self) -> ZFrameSettings:
        return self._result
