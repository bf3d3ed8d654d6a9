# -*- coding: utf-8 -*-
"""Coupled control modes.

Every step function is pure: it reads the current angles and limits and
returns a ``StepResult`` with the proposed angles. Callers decide whether to
apply it (``StepResult.apply``).

Modes
-----
- single joint ("Act-1/2/3"): one joint moves by ``delta``.
- swap on limit ("Z-1/Z-2"): the primary joint moves; once it sits on the limit
  the step pushes towards, the secondary joint moves by ``-delta`` instead.
- linked sum ("Z-Elevate"): angle1 and angle2 both move by ``delta``, keeping
  ``angle1 - angle2``.
- linked difference ("Z-Tilt"): angle1 moves by ``delta`` and angle2 by
  ``-delta``, keeping ``angle1 + angle2``.
- ratio: angle1 moves by ``delta`` and angle2 by ``-delta * ratio``.
- joystick: a 2D deflection feathered between linked sum (up/down) and linked
  difference (left/right).

A joint counts as moved only when its clamped change exceeds 0.01 deg.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from .limits import AngleLimits, LIMIT_TOLERANCE_DEG, check_joint
from .state import JointAngleState

ACTUATOR_STEP_DEG = 0.4
RATIO_STEP_DEG = 0.5
HELD_CONTROL_FRAME_INTERVAL = 3

RATIO_MIN = 0.10
RATIO_MAX = 2.00
DEFAULT_RATIO = 0.80
# A coupled all-or-nothing step must land on the exact requested deltas.
EXACT_TOLERANCE = 1e-9

JOYSTICK_DEAD_ZONE = 0.1
JOYSTICK_SPEED = 0.1
JOYSTICK_MIN_BLEND = 0.1


@dataclass(frozen=True)
class StepResult:
    angle1: float
    angle2: float
    angle3: float
    changed: bool = False

    @classmethod
    def unchanged(cls, state: JointAngleState) -> "StepResult":
        return cls(state.angle1, state.angle2, state.angle3, False)

    def apply(self, state: JointAngleState) -> bool:
        if self.changed:
            state.angle1, state.angle2, state.angle3 = self.angle1, self.angle2, self.angle3
        return self.changed


def _moved(new: float, old: float) -> bool:
    return abs(new - old) > LIMIT_TOLERANCE_DEG


def clamp_ratio(ratio: float) -> float:
    return max(RATIO_MIN, min(RATIO_MAX, float(ratio)))


def single_joint_step(state: JointAngleState, limits: AngleLimits, joint: int, delta: float) -> StepResult:
    joint = check_joint(joint)
    old = state.get(joint)
    new = limits.clamp(joint, old + delta)
    if not _moved(new, old):
        return StepResult.unchanged(state)
    vals = list(state.as_tuple())
    vals[joint - 1] = new
    return StepResult(vals[0], vals[1], vals[2], True)


def swap_on_limit_step(state: JointAngleState, limits: AngleLimits, primary: int, delta: float) -> StepResult:
    primary = check_joint(primary)
    if primary not in (1, 2):
        raise ValueError(f"Swap-on-limit needs joint 1 or 2 as primary, got {primary}")
    secondary = 2 if primary == 1 else 1
    if limits.at_limit_in_direction(primary, state.get(primary), delta):
        return single_joint_step(state, limits, secondary, -delta)
    return single_joint_step(state, limits, primary, delta)


def coupled_step(
    state: JointAngleState,
    limits: AngleLimits,
    delta1: float,
    delta2: float,
    allow_partial: bool,
) -> StepResult:
    """Move angle1 and angle2 together.

    With ``allow_partial`` each joint moves on its own and may stop at its
    limit while the other continues. Without it the step is all-or-nothing:
    if either clamped change falls short of the requested delta, neither
    joint moves.
    """
    new1 = limits.clamp(1, state.angle1 + delta1)
    new2 = limits.clamp(2, state.angle2 + delta2)
    moved1 = _moved(new1, state.angle1)
    moved2 = _moved(new2, state.angle2)
    if allow_partial:
        if not (moved1 or moved2):
            return StepResult.unchanged(state)
        return StepResult(
            new1 if moved1 else state.angle1,
            new2 if moved2 else state.angle2,
            state.angle3,
            True,
        )
    full1 = abs((new1 - state.angle1) - delta1) <= EXACT_TOLERANCE
    full2 = abs((new2 - state.angle2) - delta2) <= EXACT_TOLERANCE
    if full1 and full2 and (moved1 or moved2):
        return StepResult(new1, new2, state.angle3, True)
    return StepResult.unchanged(state)


def linked_sum_step(state: JointAngleState, limits: AngleLimits, delta: float, allow_partial: bool = True) -> StepResult:
    return coupled_step(state, limits, delta, delta, allow_partial)


def linked_difference_step(state: JointAngleState, limits: AngleLimits, delta: float, allow_partial: bool = True) -> StepResult:
    return coupled_step(state, limits, delta, -delta, allow_partial)


def ratio_step(state: JointAngleState, limits: AngleLimits, delta: float, ratio: float = DEFAULT_RATIO) -> StepResult:
    ratio = clamp_ratio(ratio)
    new1 = limits.clamp(1, state.angle1 + delta)
    new2 = limits.clamp(2, state.angle2 + delta * -ratio)
    if _moved(new1, state.angle1) or _moved(new2, state.angle2):
        return StepResult(new1, new2, state.angle3, True)
    return StepResult.unchanged(state)


@dataclass(frozen=True)
class JoystickDeltas:
    elevate: float
    tilt: float


def elevate_blend(theta_deg: float) -> float:
    """1.0 at straight up/down (pure elevate), 0.0 at left/right (pure tilt)."""
    if 45.0 <= theta_deg <= 135.0:
        return math.cos(math.radians(theta_deg - 90.0)) ** 2
    if 135.0 < theta_deg < 225.0:
        return math.sin(math.radians(theta_deg - 180.0)) ** 2
    if 225.0 <= theta_deg <= 315.0:
        return math.cos(math.radians(theta_deg - 270.0)) ** 2
    return 0.0


def joystick_deltas(dx: float, dy: float) -> Optional[JoystickDeltas]:
    """Split a deflection (x right, y up, each in [-1, 1]) into elevate/tilt deltas.

    Returns None inside the dead zone.
    """
    magnitude = math.hypot(dx, dy)
    if magnitude < JOYSTICK_DEAD_ZONE:
        return None
    magnitude = min(1.0, magnitude)
    theta = (math.degrees(math.atan2(dy, dx)) + 360.0) % 360.0
    e_blend = elevate_blend(theta)
    t_blend = 1.0 - e_blend
    speed = magnitude * JOYSTICK_SPEED
    rad = math.radians(theta)

    elevate = speed * e_blend * math.sin(rad) if e_blend > JOYSTICK_MIN_BLEND else 0.0
    tilt = speed * t_blend * math.cos(rad) if t_blend > JOYSTICK_MIN_BLEND else 0.0
    return JoystickDeltas(elevate, tilt)


def joystick_step(state: JointAngleState, limits: AngleLimits, dx: float, dy: float, allow_partial: bool = True) -> StepResult:
    deltas = joystick_deltas(dx, dy)
    if deltas is None:
        return StepResult.unchanged(state)
    return coupled_step(
        state,
        limits,
        deltas.elevate + deltas.tilt,
        deltas.elevate - deltas.tilt,
        allow_partial,
    )


class StepMode(Enum):
    SINGLE_JOINT = "single"
    SWAP_ON_LIMIT = "swap"
    LINKED_SUM = "sum"
    LINKED_DIFFERENCE = "difference"
    RATIO = "ratio"


@dataclass(frozen=True)
class DiscreteControl:
    control_id: str
    group: str
    mode: StepMode
    direction: int
    joint: Optional[int] = None

    @property
    def step(self) -> float:
        return RATIO_STEP_DEG if self.mode is StepMode.RATIO else ACTUATOR_STEP_DEG

    @property
    def delta(self) -> float:
        return self.direction * self.step


def _pair(group: str, prefix: str, mode: StepMode, joint: Optional[int] = None) -> Dict[str, DiscreteControl]:
    return {
        f"{prefix}Up": DiscreteControl(f"{prefix}Up", group, mode, +1, joint),
        f"{prefix}Down": DiscreteControl(f"{prefix}Down", group, mode, -1, joint),
    }


DISCRETE_CONTROLS: Dict[str, DiscreteControl] = {
    **_pair("Act-1", "act1", StepMode.SINGLE_JOINT, 1),
    **_pair("Act-2", "act2", StepMode.SINGLE_JOINT, 2),
    **_pair("Act-3", "act3", StepMode.SINGLE_JOINT, 3),
    **_pair("Z-1", "z1", StepMode.SWAP_ON_LIMIT, 1),
    **_pair("Z-2", "z2", StepMode.SWAP_ON_LIMIT, 2),
    **_pair("Z-Elevate", "zElevate", StepMode.LINKED_SUM),
    **_pair("Z-Tilt", "zTilt", StepMode.LINKED_DIFFERENCE),
    **_pair("Ratio", "maintainRatio", StepMode.RATIO),
}


def get_control(control_id: str) -> DiscreteControl:
    try:
        return DISCRETE_CONTROLS[control_id]
    except KeyError:
        raise ValueError(f"Unknown control: {control_id!r}") from None


def apply_discrete_control(
    control: DiscreteControl,
    state: JointAngleState,
    limits: AngleLimits,
    allow_partial: bool = True,
    ratio: float = DEFAULT_RATIO,
) -> StepResult:
    delta = control.delta
    if control.mode is StepMode.SINGLE_JOINT:
        return single_joint_step(state, limits, control.joint, delta)
    if control.mode is StepMode.SWAP_ON_LIMIT:
        return swap_on_limit_step(state, limits, control.joint, delta)
    if control.mode is StepMode.LINKED_SUM:
        return linked_sum_step(state, limits, delta, allow_partial)
    if control.mode is StepMode.LINKED_DIFFERENCE:
        return linked_difference_step(state, limits, delta, allow_partial)
    return ratio_step(state, limits, delta, ratio)


class HeldControlTimer:
    """Lets a held control fire once every ``interval`` ticks."""

    def __init__(self, interval: int = HELD_CONTROL_FRAME_INTERVAL):
        self.interval = max(1, int(interval))
        self.counter = 0

    def reset(self) -> None:
        self.counter = 0

    def tick(self) -> bool:
        self.counter += 1
        if self.counter >= self.interval:
            self.counter = 0
            return True
        return False
