# -*- coding: utf-8 -*-
"""Forward kinematics of the Z-frame (three-link open chain) in screen space.

Directions are in degrees with screen coordinates (y grows downwards):

- middle link:  ``angle1 + 180``
- seat pan:     ``angle1 - angle2``
- backrest:     ``angle1 - angle2 - angle3``

Angles are used as given; nothing is normalized before the position math.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Sequence, Tuple

from .geometry import Point, polar_point
from .state import JointAngleState

SEAT_PAN_TRAIL_FRACTIONS: Tuple[float, ...] = (0.25, 0.5, 0.75)


@dataclass(frozen=True)
class LinkGeometry:
    base_pivot: Point = (240.0, 400.0)
    middle_length: float = 180.0
    seat_pan_length: float = 160.0
    backrest_length: float = 150.0

    def with_base_pivot(self, x: float, y: float) -> "LinkGeometry":
        return replace(self, base_pivot=(float(x), float(y)))


@dataclass(frozen=True)
class JointPositions:
    base: Point
    middle_end: Point
    seat_end: Point
    backrest_end: Point

    def segments(self) -> List[Tuple[int, Point, Point]]:
        """(joint, start, end) for each link, joint numbers matching the angles."""
        return [
            (1, self.base, self.middle_end),
            (2, self.middle_end, self.seat_end),
            (3, self.seat_end, self.backrest_end),
        ]


def base_pivot_for_canvas(width: float, height: float) -> Point:
    return float(round(width / 2)), float(2 * round(height / 3))


def middle_end(base: Point, angle1: float, middle_length: float) -> Point:
    return polar_point(base, angle1 + 180.0, middle_length)


def seat_end(mid_end: Point, angle1: float, angle2: float, seat_pan_length: float) -> Point:
    return polar_point(mid_end, angle1 - angle2, seat_pan_length)


def backrest_end(seat: Point, angle1: float, angle2: float, angle3: float, backrest_length: float) -> Point:
    return polar_point(seat, angle1 - angle2 - angle3, backrest_length)


def link_directions(angles: JointAngleState) -> Tuple[float, float, float]:
    """Absolute directions of the middle link, seat pan and backrest."""
    a1, a2, a3 = angles.as_tuple()
    return a1 + 180.0, a1 - a2, a1 - a2 - a3


def joint_positions(geometry: LinkGeometry, angles: JointAngleState) -> JointPositions:
    a1, a2, a3 = angles.as_tuple()
    mid = middle_end(geometry.base_pivot, a1, geometry.middle_length)
    seat = seat_end(mid, a1, a2, geometry.seat_pan_length)
    back = backrest_end(seat, a1, a2, a3, geometry.backrest_length)
    return JointPositions(geometry.base_pivot, mid, seat, back)


def seat_pan_points(positions: JointPositions, fractions: Sequence[float] = SEAT_PAN_TRAIL_FRACTIONS) -> List[Point]:
    """Points at the given fractions along the seat pan, from the middle-link end."""
    (x1, y1), (x2, y2) = positions.middle_end, positions.seat_end
    return [(x1 + f * (x2 - x1), y1 + f * (y2 - y1)) for f in fractions]
