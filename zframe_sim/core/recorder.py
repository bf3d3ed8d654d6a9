# -*- coding: utf-8 -*-
"""Fixed-cadence angle history for the oscilloscope and phase charts."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, List, Optional, Sequence

import numpy as np

from .geometry import Point, normalize_deg
from .kinematics import SEAT_PAN_TRAIL_FRACTIONS
from .state import JointAngleState

RECORD_INTERVAL_MS = 50.0
WINDOW_MS = 30000.0
MAX_TRAIL_LENGTH = 100


@dataclass(frozen=True)
class SampleRecord:
    time_ms: float
    angle1: float
    angle2: float
    angle3: float
    seat_pan_difference: float
    control_label: Optional[str] = None


class SampleRecorder:
    """Ring buffer of samples covering the last ``window_ms`` of elapsed time.

    ``now_ms`` values are on the caller's clock; sample times are relative to
    ``start_ms``.
    """

    def __init__(self, start_ms: float = 0.0, interval_ms: float = RECORD_INTERVAL_MS, window_ms: float = WINDOW_MS):
        self.start_ms = float(start_ms)
        self.interval_ms = float(interval_ms)
        self.window_ms = float(window_ms)
        self.last_record_ms = float("-inf")
        self._samples: Deque[SampleRecord] = deque()

    @property
    def samples(self) -> List[SampleRecord]:
        return list(self._samples)

    def __len__(self) -> int:
        return len(self._samples)

    def clear(self, start_ms: Optional[float] = None) -> None:
        self._samples.clear()
        self.last_record_ms = float("-inf")
        if start_ms is not None:
            self.start_ms = float(start_ms)

    def is_due(self, now_ms: float) -> bool:
        return now_ms - self.last_record_ms >= self.interval_ms

    def record_if_due(self, now_ms: float, state: JointAngleState, label: Optional[str] = None) -> bool:
        if not self.is_due(now_ms):
            return False
        self.last_record_ms = now_ms
        elapsed = now_ms - self.start_ms
        self._samples.append(
            SampleRecord(
                time_ms=elapsed,
                angle1=state.angle1,
                angle2=state.angle2,
                angle3=state.angle3,
                seat_pan_difference=normalize_deg(state.angle1 - state.angle2),
                control_label=label,
            )
        )
        cutoff = elapsed - self.window_ms
        while self._samples and self._samples[0].time_ms <= cutoff:
            self._samples.popleft()
        return True

    def as_arrays(self) -> Dict[str, np.ndarray]:
        """Column arrays keyed by field name (empty arrays when no samples)."""
        keys = ("time_ms", "angle1", "angle2", "angle3", "seat_pan_difference")
        return {k: np.array([getattr(s, k) for s in self._samples], dtype=float) for k in keys}


class SeatPanTrails:
    """Recent positions of fixed points along the seat pan."""

    def __init__(self, fractions: Sequence[float] = SEAT_PAN_TRAIL_FRACTIONS, max_length: int = MAX_TRAIL_LENGTH):
        self.fractions = tuple(fractions)
        self.max_length = int(max_length)
        self.trails: List[Deque[Point]] = [deque(maxlen=self.max_length) for _ in self.fractions]

    def push(self, points: Sequence[Point]) -> None:
        for trail, pt in zip(self.trails, points):
            trail.append((float(pt[0]), float(pt[1])))

    def clear(self) -> None:
        for trail in self.trails:
            trail.clear()
