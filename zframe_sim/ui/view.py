# -*- coding: utf-8 -*-
"""Canvas widget: draws the Z-frame and maps mouse drags onto joint angles."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Optional

from PyQt6.QtCore import Qt, QPointF, QRectF
from PyQt6.QtGui import QColor, QPainter, QPen, QBrush, QFontMetrics
from PyQt6.QtWidgets import QWidget

from ..core.geometry import Point, short_arc
from ..core.kinematics import link_directions
from ..utils.constants import ARC_COLORS, ARC_RADII, CHAIR_FILL, DARK, HILITE, LIMIT, LINK_COLORS, TRAIL_COLORS
from ..utils.qt_safe import safe_event

if TYPE_CHECKING:
    from ..core.controller import ZFrameController


def _round_pen(color: QColor, width: float) -> QPen:
    pen = QPen(color, width)
    pen.setCapStyle(Qt.PenCapStyle.RoundCap)
    return pen


class FrameView(QWidget):
    def __init__(self, ctrl: "ZFrameController", parent=None):
        super().__init__(parent)
        self.ctrl = ctrl
        self.hover_joint: Optional[int] = None
        self.setMouseTracking(True)
        self.setMinimumSize(520, 420)

    # --- events --------------------------------------------------------

    @safe_event
    def resizeEvent(self, e):
        self.ctrl.resize(self.width(), self.height())

    @safe_event
    def mousePressEvent(self, e):
        if e.button() != Qt.MouseButton.LeftButton:
            return
        joint = self.ctrl.hover_joint(self._cursor(e))
        if joint is not None and self.ctrl.on_drag_start(joint):
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
        e.accept()

    @safe_event
    def mouseMoveEvent(self, e):
        cursor = self._cursor(e)
        if self.ctrl.session.drag_joint is not None:
            self.ctrl.on_drag_update(cursor)
        else:
            self.hover_joint = self.ctrl.hover_joint(cursor)
            if self.hover_joint is None:
                self.setCursor(Qt.CursorShape.ArrowCursor)
            else:
                self.setCursor(Qt.CursorShape.OpenHandCursor)
        self.update()

    @safe_event
    def mouseReleaseEvent(self, e):
        self.ctrl.on_drag_end()
        self.setCursor(Qt.CursorShape.ArrowCursor)
        self.update()

    @safe_event
    def leaveEvent(self, e):
        self.hover_joint = None
        self.update()

    @staticmethod
    def _cursor(e) -> Point:
        p = e.position()
        return float(p.x()), float(p.y())

    # --- painting ------------------------------------------------------

    def paintEvent(self, e):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(self.rect(), QColor(255, 255, 255))
        pos = self.ctrl.positions()

        # Base rail to the left of the pivot.
        bx, by = pos.base
        painter.setPen(_round_pen(DARK, 8))
        painter.drawLine(QPointF(bx - 160, by), QPointF(bx, by))

        if self.ctrl.settings.display.get("show_seat_pan_trails", False):
            self._draw_trails(painter)
        if self.ctrl.settings.display.get("draw_chair", False):
            self._draw_chair(painter, pos)

        active = self.ctrl.session.drag_joint or self.hover_joint
        for joint, a, b in pos.segments():
            color = HILITE if joint == active else LINK_COLORS[joint]
            painter.setPen(_round_pen(color, 6))
            painter.drawLine(QPointF(*a), QPointF(*b))

        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(QColor(17, 17, 17)))
        for pt in (pos.base, pos.middle_end, pos.seat_end):
            painter.drawEllipse(QPointF(*pt), 6, 6)

        self._draw_arcs(painter)
        painter.end()

    def _draw_trails(self, painter: QPainter) -> None:
        for color, trail in zip(TRAIL_COLORS, self.ctrl.trails.trails):
            painter.setPen(Qt.PenStyle.NoPen)
            painter.setBrush(QBrush(color))
            for x, y in trail:
                painter.drawEllipse(QPointF(x, y), 2, 2)

    def _draw_chair(self, painter: QPainter, pos) -> None:
        # Cushions sit on the seat pan and backrest; wheels under the base rail.
        painter.setPen(_round_pen(CHAIR_FILL, 22))
        painter.drawLine(QPointF(*pos.middle_end), QPointF(*pos.seat_end))
        painter.drawLine(QPointF(*pos.seat_end), QPointF(*pos.backrest_end))
        bx, by = pos.base
        painter.setPen(QPen(DARK, 3))
        painter.setBrush(Qt.BrushStyle.NoBrush)
        for cx, r in ((bx - 140, 18), (bx + 10, 34)):
            painter.drawEllipse(QPointF(cx, by + r + 6), r, r)

    def _draw_arcs(self, painter: QPainter) -> None:
        ctrl = self.ctrl
        pos = ctrl.positions()
        d_mid, d_seat, d_back = link_directions(ctrl.angles)
        flags = ctrl.limit_flags()
        arcs = [
            (1, pos.base, 180.0, d_mid),
            (2, pos.middle_end, d_seat, ctrl.angles.angle1),
            (3, pos.seat_end, d_back, d_seat),
        ]
        for joint, pivot, start, end in arcs:
            label = f"angle{joint} {ctrl.angles.get(joint):.1f}°"
            self._draw_arc(painter, pivot, start, end, ARC_RADII[joint], ARC_COLORS[joint], label, flags[joint])

    def _draw_arc(self, painter, pivot: Point, start: float, end: float, radius: float, color: QColor, label: str, at_limit: bool) -> None:
        frm, span = short_arc(start, end)
        px, py = pivot
        rect = QRectF(px - radius, py - radius, 2 * radius, 2 * radius)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.setPen(QPen(color, 3))
        if span > 0.0:
            # Screen angles grow clockwise; Qt arcs grow counter-clockwise.
            painter.drawArc(rect, int(round(-frm * 16)), int(round(-span * 16)))

        mid = math.radians(frm + span / 2 + 180.0)
        tx = px + math.cos(mid) * (radius + 20)
        ty = py + math.sin(mid) * (radius + 20)
        fm = QFontMetrics(painter.font())
        w = fm.horizontalAdvance(label)
        box = QRectF(tx - w / 2 - 6, ty - 9, w + 12, 18)
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(LIMIT if at_limit else QColor(255, 255, 255, 217)))
        painter.drawRect(box)
        painter.setPen(QPen(QColor(255, 255, 255) if at_limit else QColor(17, 17, 17)))
        painter.drawText(box, Qt.AlignmentFlag.AlignCenter, label)
