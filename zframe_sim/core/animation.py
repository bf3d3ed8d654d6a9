# -*- coding: utf-8 -*-
"""Target-seeking animation towards saved positions."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from .control_modes import StepResult
from .limits import AngleLimits
from .state import JointAngleState

ANIMATION_SPEED_DEG = 0.08
ARRIVAL_THRESHOLD_DEG = 0.1


@dataclass(frozen=True)
class AnimationTarget:
    """Per-axis target angles; None leaves that axis alone."""

    angle1: Optional[float] = None
    angle2: Optional[float] = None
    angle3: Optional[float] = None

    def as_tuple(self) -> Tuple[Optional[float], Optional[float], Optional[float]]:
        return self.angle1, self.angle2, self.angle3

    def is_empty(self) -> bool:
        return all(v is None for v in self.as_tuple())

    def clamped(self, limits: AngleLimits) -> "AnimationTarget":
        vals = [None if v is None else limits.clamp(j, v) for j, v in enumerate(self.as_tuple(), start=1)]
        return AnimationTarget(*vals)


class AnimationIntegrator:
    def __init__(self, speed: float = ANIMATION_SPEED_DEG, threshold: float = ARRIVAL_THRESHOLD_DEG):
        self.speed = float(speed)
        self.threshold = float(threshold)
        self.target: Optional[AnimationTarget] = None

    @property
    def active(self) -> bool:
        return self.target is not None

    def start(self, target: AnimationTarget, limits: AngleLimits) -> bool:
        if target.is_empty():
            self.cancel()
            return False
        self.target = target.clamped(limits)
        return True

    def cancel(self) -> None:
        self.target = None

    def reclamp(self, limits: AngleLimits) -> None:
        """Pull a running target back inside limits that changed mid-seek."""
        if self.target is not None:
            self.target = self.target.clamped(limits)

    def step(self, state: JointAngleState, limits: AngleLimits) -> StepResult:
        """Advance one tick towards the target."""
        if self.target is None:
            return StepResult.unchanged(state)
        current = state.as_tuple()
        targets = self.target.as_tuple()
        diffs = [0.0 if t is None else t - c for t, c in zip(targets, current)]
        distance = math.hypot(*diffs)

        if distance < self.threshold:
            new = [c if t is None else t for t, c in zip(targets, current)]
            self.target = None
            return StepResult(new[0], new[1], new[2], True)

        step = min(self.speed, distance)
        new = list(current)
        for i, t in enumerate(targets):
            if t is None:
                continue
            new[i] = limits.clamp(i + 1, current[i] + diffs[i] / distance * step)
        return StepResult(new[0], new[1], new[2], True)
