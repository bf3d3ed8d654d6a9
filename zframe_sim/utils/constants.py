# -*- coding: utf-8 -*-
"""UI constants and colors."""

from PyQt6.QtGui import QColor

DARK = QColor(40, 40, 40)
CHAIR_FILL = QColor(120, 144, 156, 90)
HILITE = QColor(255, 107, 107)
LIMIT = QColor(220, 40, 40)

LINK_COLORS = {
    1: QColor(68, 68, 68),
    2: QColor(102, 102, 102),
    3: QColor(136, 136, 136),
}

ARC_COLORS = {
    1: QColor(43, 124, 255),
    2: QColor(255, 138, 101),
    3: QColor(102, 187, 106),
}

ARC_RADII = {1: 36, 2: 28, 3: 20}

POSITION_COLORS = {
    "position1": QColor("#FF728E"),
    "position2": QColor("#FF9671"),
    "position3": QColor("#FFD371"),
    "position4": QColor("#8EFF8C"),
    "position5": QColor("#6EC9FF"),
    "position6": QColor("#C382FF"),
}

TRAIL_COLORS = [QColor(255, 107, 107, 120), QColor(43, 124, 255, 120), QColor(102, 187, 106, 120)]

TICK_INTERVAL_MS = 16
