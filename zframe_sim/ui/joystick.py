# -*- coding: utf-8 -*-
"""Two-axis joystick widget."""

from __future__ import annotations

import math

from PyQt6.QtCore import QPointF, pyqtSignal
from PyQt6.QtGui import QBrush, QColor, QPainter, QPen
from PyQt6.QtWidgets import QWidget

from ..utils.qt_safe import safe_event


class JoystickWidget(QWidget):
    """Emits ``deflected(dx, dy)`` with each axis in [-1, 1], y pointing up."""

    deflected = pyqtSignal(float, float)
    released = pyqtSignal()

    def __init__(self, radius: int = 40, knob_radius: int = 12, parent=None):
        super().__init__(parent)
        self.radius = radius
        self.knob_radius = knob_radius
        self._knob = QPointF(0.0, 0.0)
        self._dragging = False
        size = 2 * (radius + knob_radius) + 4
        self.setFixedSize(size, size)

    def _center(self) -> QPointF:
        return QPointF(self.width() / 2, self.height() / 2)

    def _set_knob(self, pos: QPointF) -> None:
        c = self._center()
        dx, dy = pos.x() - c.x(), pos.y() - c.y()
        dist = math.hypot(dx, dy)
        if dist > self.radius:
            dx, dy = dx / dist * self.radius, dy / dist * self.radius
        self._knob = QPointF(dx, dy)
        self.deflected.emit(dx / self.radius, -dy / self.radius)
        self.update()

    @safe_event
    def mousePressEvent(self, e):
        c = self._center()
        p = e.position()
        if math.hypot(p.x() - c.x(), p.y() - c.y()) <= self.radius:
            self._dragging = True
            self._set_knob(p)

    @safe_event
    def mouseMoveEvent(self, e):
        if self._dragging:
            self._set_knob(e.position())

    @safe_event
    def mouseReleaseEvent(self, e):
        if self._dragging:
            self._dragging = False
            self._knob = QPointF(0.0, 0.0)
            self.released.emit()
            self.update()

    def paintEvent(self, e):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        c = self._center()
        painter.setPen(QPen(QColor(51, 51, 51), 2))
        painter.setBrush(QBrush(QColor(232, 232, 232)))
        painter.drawEllipse(c, self.radius, self.radius)
        painter.setPen(QPen(QColor(204, 204, 204), 1))
        painter.drawLine(QPointF(c.x() - 10, c.y()), QPointF(c.x() + 10, c.y()))
        painter.drawLine(QPointF(c.x(), c.y() - 10), QPointF(c.x(), c.y() + 10))
        painter.setPen(QPen(QColor(0, 0, 0), 2))
        painter.setBrush(QBrush(QColor(43, 124, 255)))
        painter.drawEllipse(c + self._knob, self.knob_radius, self.knob_radius)
        painter.end()
