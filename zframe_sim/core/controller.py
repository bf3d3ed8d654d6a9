# -*- coding: utf-8 -*-
"""ZFrameController: owns the angle state and routes input into the control modes.

One driver mutates the angles at a time. Precedence, highest first:
drag > discrete control > joystick > animation. Starting a driver cancels any
driver of equal or lower precedence; a request for a lower-precedence driver
while a higher one is active is refused (the method returns False).
"""

from __future__ import annotations

from typing import Callable, Dict, Optional

from .animation import AnimationIntegrator, AnimationTarget
from .control_modes import (
    HeldControlTimer,
    apply_discrete_control,
    clamp_ratio,
    get_control,
    joystick_step,
)
from .drag import angle_from_pointer_drag, hit_test, pivot_for_joint
from .formula import FormulaBinding
from .geometry import Point
from .kinematics import JointPositions, LinkGeometry, base_pivot_for_canvas, joint_positions, seat_pan_points
from .limits import JOINTS, check_joint
from .recorder import SampleRecorder, SeatPanTrails
from .session_log import SessionDebugLogger
from .settings import SavedPosition, ZFrameSettings
from .state import ControlSession, Driver, JointAngleState


class ZFrameController:
    def __init__(
        self,
        settings: Optional[ZFrameSettings] = None,
        start_ms: float = 0.0,
        logger: Optional[SessionDebugLogger] = None,
        on_change: Optional[Callable[[], None]] = None,
    ):
        self.settings = settings or ZFrameSettings.defaults()
        self.angles = JointAngleState()
        self.limits = self.settings.angle_limits()
        self.geometry: LinkGeometry = self.settings.geometry
        self.session = ControlSession()
        self.held_timer = HeldControlTimer()
        self.animation = AnimationIntegrator()
        self.recorder = SampleRecorder(start_ms=start_ms)
        self.trails = SeatPanTrails()
        self.formula = FormulaBinding(target_joint=2)
        self.logger = logger or SessionDebugLogger(enabled=False)
        self._on_change = on_change

    # --- configuration -------------------------------------------------

    @property
    def ratio(self) -> float:
        return self.settings.ratio

    @property
    def allow_partial_movement(self) -> bool:
        return self.settings.allow_partial_movement

    @property
    def active_driver(self) -> Driver:
        return self.session.driver

    def apply_settings(self, settings: ZFrameSettings) -> None:
        self.settings = settings
        self.limits = settings.angle_limits()
        pivot = self.geometry.base_pivot
        self.geometry = settings.geometry.with_base_pivot(*pivot)
        self.animation.reclamp(self.limits)
        self._changed()

    def on_limits_changed(self, joint: int, lo: float, hi: float) -> None:
        # The current angle is left where it is; the next step clamps it.
        # A running animation target is clamped now so the seek can finish.
        lim = self.limits.set_limits(joint, lo, hi)
        self.settings.limits[check_joint(joint)] = lim
        self.animation.reclamp(self.limits)
        self._changed()

    def on_ratio_changed(self, ratio: float) -> None:
        self.settings.ratio = clamp_ratio(ratio)

    def on_allow_partial_movement_changed(self, flag: bool) -> None:
        self.settings.allow_partial_movement = bool(flag)

    def move_saved_position(self, name: str, values: Dict[int, float]) -> SavedPosition:
        """Edit a saved position in place, e.g. from a dragged chart marker.

        ``values`` maps joint number to angle; each is clamped to that joint's
        limits. Joints not in ``values`` keep their stored angle.
        """
        pos = self.settings.position(name)
        for joint, value in values.items():
            setattr(pos, f"angle{check_joint(joint)}", self.limits.clamp(joint, float(value)))
        return pos

    def set_geometry(self, geometry: LinkGeometry) -> None:
        self.geometry = geometry
        self._changed()

    def resize(self, width: float, height: float) -> None:
        self.set_geometry(self.geometry.with_base_pivot(*base_pivot_for_canvas(width, height)))

    def set_formula(self, text: str) -> bool:
        ok = self.formula.compile(text)
        if self.formula.error:
            self.logger.log("formula_error", text=self.formula.text, error=self.formula.error)
        return ok

    def reset(self) -> None:
        self._release_all()
        self.angles.reset()
        self._changed()

    def clear_history(self, now_ms: float) -> None:
        self.recorder.clear(start_ms=now_ms)
        self.trails.clear()

    # --- driver arbitration --------------------------------------------

    def _claim(self, driver: Driver) -> bool:
        current = self.session.driver
        if current is not Driver.IDLE and current > driver:
            return False
        self._release_all()
        self.session.driver = driver
        self.logger.log("driver_start", driver=driver.name, angles=list(self.angles.as_tuple()))
        return True

    def _release_all(self) -> None:
        self.animation.cancel()
        self.held_timer.reset()
        self.session.clear()

    def _release(self, driver: Driver) -> bool:
        if self.session.driver is not driver:
            return False
        self._release_all()
        self.logger.log("driver_stop", driver=driver.name, angles=list(self.angles.as_tuple()))
        return True

    def _changed(self) -> None:
        if self._on_change:
            self._on_change()

    # --- input: drag ---------------------------------------------------

    def hover_joint(self, cursor: Point) -> Optional[int]:
        return hit_test(cursor, self.positions())

    def on_drag_start(self, joint: int) -> bool:
        joint = check_joint(joint)
        if not self._claim(Driver.DRAG):
            return False
        self.session.drag_joint = joint
        return True

    def on_drag_update(self, cursor: Point) -> bool:
        if self.session.driver is not Driver.DRAG or self.session.drag_joint is None:
            return False
        joint = self.session.drag_joint
        pivot = pivot_for_joint(joint, self.positions())
        new = angle_from_pointer_drag(joint, cursor, pivot, self.angles, self.limits)
        if new is None:
            return False
        self.angles.set(joint, new)
        if joint == 1 and self.formula.enabled:
            self.formula.apply(self.angles, self.limits)
            if self.formula.error:
                self.logger.log("formula_error", text=self.formula.text, error=self.formula.error)
        self._changed()
        return True

    def on_drag_end(self) -> bool:
        return self._release(Driver.DRAG)

    # --- input: discrete controls --------------------------------------

    def on_discrete_control_pressed(self, control_id: str) -> bool:
        get_control(control_id)
        if not self._claim(Driver.DISCRETE):
            return False
        self.session.held_control = control_id
        return True

    def on_discrete_control_released(self) -> bool:
        return self._release(Driver.DISCRETE)

    # --- input: joystick -----------------------------------------------

    def on_joystick_deflection(self, dx: float, dy: float) -> bool:
        """Deflection in [-1, 1] per axis, x to the right and y up."""
        if self.session.driver is not Driver.JOYSTICK and not self._claim(Driver.JOYSTICK):
            return False
        self.session.joystick = (float(dx), float(dy))
        return True

    def on_joystick_released(self) -> bool:
        return self._release(Driver.JOYSTICK)

    # --- input: animation ----------------------------------------------

    def on_animate_to_target(self, target: AnimationTarget, label: Optional[str] = None) -> bool:
        if target.is_empty() or not self._claim(Driver.ANIMATION):
            return False
        self.animation.start(target, self.limits)
        self.session.moving_towards = label
        return True

    def on_animate_to_position(self, name: str) -> bool:
        return self.on_animate_to_target(self.settings.position(name).target(), label=name)

    def cancel_animation(self) -> bool:
        return self._release(Driver.ANIMATION)

    # --- tick ----------------------------------------------------------

    def tick(self, now_ms: float) -> bool:
        """Advance the active driver by one frame and sample history."""
        changed = False
        driver = self.session.driver
        if driver is Driver.DISCRETE and self.session.held_control:
            if self.held_timer.tick():
                control = get_control(self.session.held_control)
                result = apply_discrete_control(
                    control, self.angles, self.limits, self.allow_partial_movement, self.ratio
                )
                changed = result.apply(self.angles)
        elif driver is Driver.JOYSTICK:
            dx, dy = self.session.joystick
            changed = joystick_step(self.angles, self.limits, dx, dy, self.allow_partial_movement).apply(self.angles)
        elif driver is Driver.ANIMATION:
            changed = self.animation.step(self.angles, self.limits).apply(self.angles)
            if not self.animation.active:
                self._release(Driver.ANIMATION)

        if self.recorder.record_if_due(now_ms, self.angles, self.control_label()):
            self.trails.push(seat_pan_points(self.positions()))
        if changed:
            self._changed()
        return changed

    # --- outputs -------------------------------------------------------

    def positions(self) -> JointPositions:
        return joint_positions(self.geometry, self.angles)

    def limit_flags(self) -> Dict[int, bool]:
        return {j: self.limits.at_limit(j, self.angles.get(j)) for j in JOINTS}

    def control_label(self) -> Optional[str]:
        s = self.session
        if s.driver is Driver.DISCRETE:
            return s.held_control
        if s.driver is Driver.JOYSTICK:
            return "joystick"
        if s.driver is Driver.DRAG:
            return f"drag:angle{s.drag_joint}"
        if s.driver is Driver.ANIMATION:
            return s.moving_towards or "animation"
        return None
