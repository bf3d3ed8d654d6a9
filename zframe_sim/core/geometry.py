# -*- coding: utf-8 -*-
"""Geometry helpers."""

from __future__ import annotations

import math
from typing import Tuple

Point = Tuple[float, float]


def normalize_deg(a: float) -> float:
    """Wrap angle to (-180, 180]."""
    while a <= -180.0:
        a += 360.0
    while a > 180.0:
        a -= 360.0
    return a


def wrap_deg_360(a: float) -> float:
    """Wrap angle to [0, 360)."""
    return ((a % 360.0) + 360.0) % 360.0


def quantize(value: float, quantum: float = 0.5) -> float:
    if quantum <= 0.0:
        return value
    return round(value / quantum) * quantum


def polar_point(origin: Point, deg: float, length: float) -> Point:
    a = math.radians(deg)
    return origin[0] + length * math.cos(a), origin[1] + length * math.sin(a)


def bearing_deg(origin: Point, target: Point) -> float:
    return math.degrees(math.atan2(target[1] - origin[1], target[0] - origin[0]))


def short_arc(start_deg: float, end_deg: float) -> Tuple[float, float]:
    """(from, span) of the shorter arc between two directions, span in [0, 180]."""
    s = wrap_deg_360(start_deg)
    e = wrap_deg_360(end_deg)
    if e <= s:
        e += 360.0
    distance = (e - s) % 360.0
    if distance <= 180.0:
        return s, distance
    return wrap_deg_360(e), 360.0 - distance


def point_to_segment_distance(px: float, py: float, x1: float, y1: float, x2: float, y2: float) -> float:
    """Distance from a point to a segment.

    A zero-length segment is treated as the single point (x1, y1).
    """
    vx = x2 - x1
    vy = y2 - y1
    denom = vx * vx + vy * vy
    if denom <= 1e-18:
        u = 0.0
    else:
        u = ((px - x1) * vx + (py - y1) * vy) / denom
        u = max(0.0, min(1.0, u))
    cx = x1 + u * vx
    cy = y1 + u * vy
    return math.hypot(px - cx, py - cy)
