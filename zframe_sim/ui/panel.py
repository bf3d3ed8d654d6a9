# -*- coding: utf-8 -*-
"""Right-side panel: actuators, joystick, saved positions, ratio and formula."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QGroupBox, QLabel,
    QPushButton, QCheckBox, QSlider, QLineEdit
)

from ..core.control_modes import RATIO_MAX, RATIO_MIN, get_control
from ..core.formula import describe_names
from ..core.settings import POSITION_NAMES
from ..utils.constants import POSITION_COLORS
from .joystick import JoystickWidget

if TYPE_CHECKING:
    from ..core.controller import ZFrameController

ACTUATOR_ROWS = [
    ("Act-1", "act1"),
    ("Act-2", "act2"),
    ("Act-3", "act3"),
    ("Z-1", "z1"),
    ("Z-2", "z2"),
    ("Z-Elevate", "zElevate"),
    ("Z-Tilt", "zTilt"),
    ("Ratio", "maintainRatio"),
]


class ControlPanel(QWidget):
    def __init__(self, ctrl: "ZFrameController"):
        super().__init__()
        self.ctrl = ctrl
        layout = QVBoxLayout(self)

        # Readouts
        self.lbl_angles: Dict[int, QLabel] = {}
        readouts = QGroupBox("Angles")
        rl = QHBoxLayout(readouts)
        for j in (1, 2, 3):
            lbl = QLabel("--")
            lbl.setStyleSheet("font-weight: 600;")
            self.lbl_angles[j] = lbl
            rl.addWidget(QLabel(f"angle{j}:"))
            rl.addWidget(lbl)
        layout.addWidget(readouts)

        # Saved positions
        pos_box = QGroupBox("Positions")
        pl = QGridLayout(pos_box)
        for i, name in enumerate(POSITION_NAMES):
            btn = QPushButton(f"Pos{i + 1}")
            btn.setStyleSheet(f"background-color: {POSITION_COLORS[name].name()};")
            btn.clicked.connect(lambda _=False, n=name: self.ctrl.on_animate_to_position(n))
            pl.addWidget(btn, i // 2, i % 2)
        layout.addWidget(pos_box)

        # Held actuators
        act_box = QGroupBox("Actuators")
        al = QGridLayout(act_box)
        for row, (group, prefix) in enumerate(ACTUATOR_ROWS):
            al.addWidget(QLabel(group), row, 0)
            for col, (suffix, text) in enumerate((("Down", "◀"), ("Up", "▶")), start=1):
                control_id = f"{prefix}{suffix}"
                get_control(control_id)
                btn = QPushButton(text)
                btn.pressed.connect(lambda c=control_id: self.ctrl.on_discrete_control_pressed(c))
                btn.released.connect(self.ctrl.on_discrete_control_released)
                al.addWidget(btn, row, col)
        layout.addWidget(act_box)

        # Ratio slider, shown in percent
        ratio_row = QHBoxLayout()
        ratio_row.addWidget(QLabel("Ratio"))
        self.sld_ratio = QSlider(Qt.Orientation.Horizontal)
        self.sld_ratio.setRange(int(RATIO_MIN * 100), int(RATIO_MAX * 100))
        self.sld_ratio.setValue(int(round(self.ctrl.ratio * 100)))
        self.lbl_ratio = QLabel()
        ratio_row.addWidget(self.sld_ratio, 1)
        ratio_row.addWidget(self.lbl_ratio)
        layout.addLayout(ratio_row)
        self.sld_ratio.valueChanged.connect(self._on_ratio)
        self._on_ratio(self.sld_ratio.value())

        self.chk_partial = QCheckBox("Allow Limited Movement")
        self.chk_partial.setChecked(self.ctrl.allow_partial_movement)
        self.chk_partial.toggled.connect(self.ctrl.on_allow_partial_movement_changed)
        layout.addWidget(self.chk_partial)

        # Joystick
        joy_row = QHBoxLayout()
        joy_row.addWidget(QLabel("Joystick\n↕ Sum  ↔ Diff"))
        self.joystick = JoystickWidget()
        self.joystick.deflected.connect(self.ctrl.on_joystick_deflection)
        self.joystick.released.connect(self.ctrl.on_joystick_released)
        joy_row.addWidget(self.joystick)
        joy_row.addStretch(1)
        layout.addLayout(joy_row)

        # Formula binding: angle2 = f(angle1, angle2, angle3)
        f_box = QGroupBox("Formula (angle2 =)")
        fl = QVBoxLayout(f_box)
        frow = QHBoxLayout()
        self.ed_formula = QLineEdit()
        self.ed_formula.setPlaceholderText("e.g. angle1 * 0.8 + 5")
        names = describe_names()
        self.ed_formula.setToolTip(
            "Variables: " + ", ".join(names["variables"])
            + "\nFunctions: " + ", ".join(names["functions"])
            + "\nConstants: " + ", ".join(names["constants"])
            + "\nTrig functions take radians; ^ is power."
        )
        self.btn_formula = QPushButton("Apply")
        frow.addWidget(self.ed_formula, 1)
        frow.addWidget(self.btn_formula)
        fl.addLayout(frow)
        self.lbl_formula = QLabel("")
        self.lbl_formula.setWordWrap(True)
        fl.addWidget(self.lbl_formula)
        layout.addWidget(f_box)
        self.btn_formula.clicked.connect(self._apply_formula)
        self.ed_formula.returnPressed.connect(self._apply_formula)

        layout.addStretch(1)
        self.refresh()

    def _on_ratio(self, value: int) -> None:
        self.ctrl.on_ratio_changed(value / 100.0)
        self.lbl_ratio.setText(f"{value}%")

    def _apply_formula(self) -> None:
        text = self.ed_formula.text()
        ok = self.ctrl.set_formula(text)
        if ok:
            self.lbl_formula.setStyleSheet("color: #2e7d32;")
            self.lbl_formula.setText("Formula active")
        elif self.ctrl.formula.error:
            self.lbl_formula.setStyleSheet("color: #c62828;")
            self.lbl_formula.setText(self.ctrl.formula.error)
        else:
            self.lbl_formula.setText("")

    def refresh(self) -> None:
        flags = self.ctrl.limit_flags()
        for j, lbl in self.lbl_angles.items():
            lbl.setText(f"{self.ctrl.angles.get(j):.1f}°")
            lbl.setStyleSheet("font-weight: 600; color: #d32f2f;" if flags[j] else "font-weight: 600;")
        # A runtime failure disables the formula; surface it.
        if self.ctrl.formula.error and not self.ctrl.formula.enabled:
            self.lbl_formula.setStyleSheet("color: #c62828;")
            self.lbl_formula.setText(self.ctrl.formula.error)

    def sync_from_settings(self) -> None:
        self.sld_ratio.setValue(int(round(self.ctrl.ratio * 100)))
        self.chk_partial.setChecked(self.ctrl.allow_partial_movement)
