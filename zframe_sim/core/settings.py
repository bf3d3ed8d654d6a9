# -*- coding: utf-8 -*-
"""User settings: limits, saved positions, display toggles.

Stored as one flat JSON document. Loading is tolerant: missing keys take
their defaults and unparsable values are skipped.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .animation import AnimationTarget
from .control_modes import DEFAULT_RATIO, clamp_ratio
from .kinematics import LinkGeometry
from .limits import AngleLimits, JOINTS, JointLimit

POSITION_NAMES: Tuple[str, ...] = tuple(f"position{i}" for i in range(1, 7))

DEFAULT_LIMITS: Dict[int, Tuple[float, float]] = {1: (5.0, 40.0), 2: (5.0, 90.0), 3: (5.0, 100.0)}

DEFAULT_POSITIONS: Dict[str, Tuple[float, float, float]] = {
    "position1": (15.0, 25.0, 50.0),
    "position2": (35.0, 10.0, 50.0),
    "position3": (10.0, 10.0, 50.0),
    "position4": (15.0, 15.0, 50.0),
    "position5": (20.0, 20.0, 50.0),
    "position6": (25.0, 25.0, 50.0),
}

DISPLAY_TOGGLES: Dict[str, bool] = {
    "show_graph12": True,
    "show_graph13": False,
    "show_graph32": False,
    "draw_chair": False,
    "show_oscilloscope": False,
    "show_seat_pan_trails": False,
}


def _read_json(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _write_json(path: str, payload: Dict[str, Any]) -> None:
    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2, sort_keys=True)


def _as_float(value: Any, default: float) -> float:
    try:
        out = float(value)
    except (TypeError, ValueError):
        return default
    return out if out == out else default


@dataclass
class SavedPosition:
    angle1: float = 0.0
    angle2: float = 0.0
    angle3: float = 0.0
    angle1_enabled: bool = True
    angle2_enabled: bool = True
    angle3_enabled: bool = True

    def target(self) -> AnimationTarget:
        return AnimationTarget(
            self.angle1 if self.angle1_enabled else None,
            self.angle2 if self.angle2_enabled else None,
            self.angle3 if self.angle3_enabled else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "angle1": self.angle1,
            "angle1Enabled": self.angle1_enabled,
            "angle2": self.angle2,
            "angle2Enabled": self.angle2_enabled,
            "angle3": self.angle3,
            "angle3Enabled": self.angle3_enabled,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], fallback: "SavedPosition") -> "SavedPosition":
        return cls(
            angle1=_as_float(data.get("angle1"), fallback.angle1),
            angle2=_as_float(data.get("angle2"), fallback.angle2),
            angle3=_as_float(data.get("angle3"), fallback.angle3),
            angle1_enabled=data.get("angle1Enabled", True) is not False,
            angle2_enabled=data.get("angle2Enabled", True) is not False,
            angle3_enabled=data.get("angle3Enabled", True) is not False,
        )


def _default_positions() -> Dict[str, SavedPosition]:
    return {name: SavedPosition(*vals) for name, vals in DEFAULT_POSITIONS.items()}


@dataclass
class ZFrameSettings:
    limits: Dict[int, JointLimit] = field(default_factory=lambda: {j: JointLimit(*DEFAULT_LIMITS[j]) for j in JOINTS})
    positions: Dict[str, SavedPosition] = field(default_factory=_default_positions)
    allow_partial_movement: bool = True
    ratio: float = DEFAULT_RATIO
    display: Dict[str, bool] = field(default_factory=lambda: dict(DISPLAY_TOGGLES))
    geometry: LinkGeometry = field(default_factory=LinkGeometry)

    @classmethod
    def defaults(cls) -> "ZFrameSettings":
        return cls()

    def angle_limits(self) -> AngleLimits:
        return AngleLimits.from_pairs((j, lim.min, lim.max) for j, lim in self.limits.items())

    def position(self, name: str) -> SavedPosition:
        try:
            return self.positions[name]
        except KeyError:
            raise ValueError(f"Unknown position: {name!r}") from None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for j, lim in self.limits.items():
            out[f"angle{j}"] = {"min": lim.min, "max": lim.max}
        out["positions"] = {name: pos.to_dict() for name, pos in self.positions.items()}
        out["allowLimitedMovement"] = self.allow_partial_movement
        out["ratio"] = self.ratio
        out["display"] = dict(self.display)
        out["geometry"] = {
            "middleLength": self.geometry.middle_length,
            "seatPanLength": self.geometry.seat_pan_length,
            "backrestLength": self.geometry.backrest_length,
        }
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ZFrameSettings":
        s = cls()
        for j in JOINTS:
            entry = data.get(f"angle{j}")
            if isinstance(entry, dict):
                lo = _as_float(entry.get("min"), s.limits[j].min)
                hi = _as_float(entry.get("max"), s.limits[j].max)
                s.limits[j] = JointLimit.ordered(lo, hi)
        positions = data.get("positions")
        if isinstance(positions, dict):
            for name in POSITION_NAMES:
                entry = positions.get(name)
                if isinstance(entry, dict):
                    s.positions[name] = SavedPosition.from_dict(entry, s.positions[name])
        if "allowLimitedMovement" in data:
            s.allow_partial_movement = bool(data["allowLimitedMovement"])
        s.ratio = clamp_ratio(_as_float(data.get("ratio"), DEFAULT_RATIO))
        display = data.get("display")
        if isinstance(display, dict):
            for key in DISPLAY_TOGGLES:
                if key in display:
                    s.display[key] = bool(display[key])
        geom = data.get("geometry")
        if isinstance(geom, dict):
            g = s.geometry
            s.geometry = LinkGeometry(
                g.base_pivot,
                _as_float(geom.get("middleLength"), g.middle_length),
                _as_float(geom.get("seatPanLength"), g.seat_pan_length),
                _as_float(geom.get("backrestLength"), g.backrest_length),
            )
        return s


def default_settings_path() -> str:
    return os.path.join(os.path.expanduser("~"), ".zframe_sim", "settings.json")


def load_settings(path: Optional[str] = None) -> ZFrameSettings:
    data = _read_json(path or default_settings_path())
    if not data:
        return ZFrameSettings.defaults()
    return ZFrameSettings.from_dict(data)


def save_settings(settings: ZFrameSettings, path: Optional[str] = None) -> str:
    path = path or default_settings_path()
    _write_json(path, settings.to_dict())
    return path
