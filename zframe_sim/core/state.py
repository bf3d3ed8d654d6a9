# -*- coding: utf-8 -*-
"""Mutable angle state and the per-session interaction state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Tuple

from .limits import check_joint

INITIAL_ANGLES: Tuple[float, float, float] = (30.0, 30.0, 30.0)


@dataclass
class JointAngleState:
    """Joint angles in degrees.

    angle1: middle link, from the horizontal baseline at the base pivot.
    angle2: seat pan, interior angle at the middle-link end.
    angle3: backrest, interior angle at the seat-pan end (clockwise).
    """

    angle1: float = INITIAL_ANGLES[0]
    angle2: float = INITIAL_ANGLES[1]
    angle3: float = INITIAL_ANGLES[2]

    def get(self, joint: int) -> float:
        return getattr(self, f"angle{check_joint(joint)}")

    def set(self, joint: int, value: float) -> None:
        setattr(self, f"angle{check_joint(joint)}", float(value))

    def as_tuple(self) -> Tuple[float, float, float]:
        return self.angle1, self.angle2, self.angle3

    def copy(self) -> "JointAngleState":
        return JointAngleState(self.angle1, self.angle2, self.angle3)

    def reset(self) -> None:
        self.angle1, self.angle2, self.angle3 = INITIAL_ANGLES


class Driver(IntEnum):
    """Sources of angle mutation, ordered by precedence (highest last)."""

    IDLE = 0
    ANIMATION = 1
    JOYSTICK = 2
    DISCRETE = 3
    DRAG = 4


@dataclass
class ControlSession:
    driver: Driver = Driver.IDLE
    drag_joint: Optional[int] = None
    held_control: Optional[str] = None
    joystick: Tuple[float, float] = (0.0, 0.0)
    moving_towards: Optional[str] = None

    def clear(self) -> None:
        self.driver = Driver.IDLE
        self.drag_joint = None
        self.held_control = None
        self.joystick = (0.0, 0.0)
        self.moving_towards = None
