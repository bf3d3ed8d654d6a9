# -*- coding: utf-8 -*-
"""Per-joint angle limits.

Joints are addressed by number: 1 (middle link), 2 (seat pan), 3 (backrest).
Unset joints default to the full circle ``[0, 360]``.

A limit whose ``min`` exceeds its ``max`` is stored with the two values
swapped, so ``clamp`` always works on a well-formed interval.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Tuple

JOINTS: Tuple[int, int, int] = (1, 2, 3)

# Two angles closer than this are considered equal when testing for a limit.
LIMIT_TOLERANCE_DEG = 0.01


def check_joint(joint: int) -> int:
    try:
        j = int(joint)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid joint: {joint!r}") from None
    if j not in JOINTS:
        raise ValueError(f"Invalid joint: {joint!r}")
    return j


@dataclass(frozen=True)
class JointLimit:
    min: float = 0.0
    max: float = 360.0

    @classmethod
    def ordered(cls, lo: float, hi: float) -> "JointLimit":
        lo, hi = float(lo), float(hi)
        if lo > hi:
            lo, hi = hi, lo
        return cls(lo, hi)

    def clamp(self, value: float) -> float:
        return max(self.min, min(self.max, value))

    def at_min(self, value: float) -> bool:
        return abs(value - self.min) < LIMIT_TOLERANCE_DEG

    def at_max(self, value: float) -> bool:
        return abs(value - self.max) < LIMIT_TOLERANCE_DEG


@dataclass
class AngleLimits:
    limits: Dict[int, JointLimit] = field(default_factory=dict)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[int, float, float]]) -> "AngleLimits":
        out = cls()
        for joint, lo, hi in pairs:
            out.set_limits(joint, lo, hi)
        return out

    def get(self, joint: int) -> JointLimit:
        return self.limits.get(check_joint(joint), JointLimit())

    def set_limits(self, joint: int, lo: float, hi: float) -> JointLimit:
        lim = JointLimit.ordered(lo, hi)
        self.limits[check_joint(joint)] = lim
        return lim

    def clamp(self, joint: int, proposed: float) -> float:
        return self.get(joint).clamp(proposed)

    def at_limit(self, joint: int, angle: float) -> bool:
        """True on a limit or outside the range (after limits were narrowed)."""
        lim = self.get(joint)
        return angle <= lim.min + LIMIT_TOLERANCE_DEG or angle >= lim.max - LIMIT_TOLERANCE_DEG

    def at_limit_in_direction(self, joint: int, angle: float, delta: float) -> bool:
        """True when ``angle`` sits on the limit that ``delta`` pushes towards."""
        lim = self.get(joint)
        return (lim.at_min(angle) and delta < 0) or (lim.at_max(angle) and delta > 0)

    def copy(self) -> "AngleLimits":
        return AngleLimits(dict(self.limits))
