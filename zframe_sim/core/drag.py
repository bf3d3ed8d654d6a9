# -*- coding: utf-8 -*-
"""Pointer drag -> joint angle mapping, plus link hit testing."""

from __future__ import annotations

from typing import Optional

from .geometry import Point, bearing_deg, point_to_segment_distance, quantize
from .kinematics import JointPositions
from .limits import AngleLimits, check_joint
from .state import JointAngleState

DRAG_QUANTUM_DEG = 0.5
HOVER_THRESHOLD_PX = 12.0


def pivot_for_joint(joint: int, positions: JointPositions) -> Point:
    joint = check_joint(joint)
    if joint == 1:
        return positions.base
    if joint == 2:
        return positions.middle_end
    return positions.seat_end


def raw_drag_angle(joint: int, cursor: Point, pivot: Point, state: JointAngleState, quantum: float = DRAG_QUANTUM_DEG) -> float:
    """Quantized joint angle implied by the cursor, before wraparound and limits."""
    joint = check_joint(joint)
    bearing = bearing_deg(pivot, cursor)
    if joint == 1:
        return quantize(bearing + 180.0, quantum)
    # Interior angles are measured against the parent link's absolute direction.
    parent = state.angle1 if joint == 2 else state.angle1 - state.angle2
    return -quantize(bearing, quantum) + parent


def angle_from_pointer_drag(
    joint: int,
    cursor: Point,
    pivot: Point,
    state: JointAngleState,
    limits: AngleLimits,
    quantum: float = DRAG_QUANTUM_DEG,
) -> Optional[float]:
    """New angle for ``joint`` under the cursor, or None when nothing changes."""
    joint = check_joint(joint)
    previous = state.get(joint)
    deg = raw_drag_angle(joint, cursor, pivot, state, quantum)

    if joint == 1:
        # angle1 spans the full circle at the base: take the short way across 0/360.
        diff = deg - previous
        if abs(diff) > 180.0:
            deg = deg - 360.0 if diff > 0 else deg + 360.0

    deg = limits.clamp(joint, deg)
    if deg == previous:
        return None
    return deg


def hit_test(cursor: Point, positions: JointPositions, threshold: float = HOVER_THRESHOLD_PX) -> Optional[int]:
    """Joint whose link lies under the cursor; backrest wins over seat pan over middle."""
    px, py = cursor
    distances = {
        joint: point_to_segment_distance(px, py, a[0], a[1], b[0], b[1])
        for joint, a, b in positions.segments()
    }
    for joint in (3, 2, 1):
        if distances[joint] < threshold:
            return joint
    return None
