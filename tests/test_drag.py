"""Tests for pointer drag mapping and link hit testing."""

import math

import pytest

from zframe_sim.core.drag import angle_from_pointer_drag, hit_test, pivot_for_joint
from zframe_sim.core.geometry import point_to_segment_distance
from zframe_sim.core.kinematics import LinkGeometry, joint_positions
from zframe_sim.core.limits import AngleLimits
from zframe_sim.core.state import JointAngleState


def _toward(pivot, direction_deg, r=100.0):
    a = math.radians(direction_deg)
    return pivot[0] + r * math.cos(a), pivot[1] + r * math.sin(a)


class TestDragAngle:
    """Cursor position -> joint angle."""

    @pytest.fixture
    def limits(self):
        return AngleLimits.from_pairs([(1, 5, 40), (2, 5, 90), (3, 5, 100)])

    @pytest.fixture
    def state(self):
        return JointAngleState(30.0, 30.0, 30.0)

    @pytest.fixture
    def positions(self, state):
        return joint_positions(LinkGeometry(base_pivot=(0.0, 0.0)), state)

    def test_unchanged_returns_none(self, state, limits, positions):
        # The cursor lies along the current middle link.
        cursor = _toward(positions.base, 210.0)
        assert angle_from_pointer_drag(1, cursor, positions.base, state, limits) is None

    def test_joint1_clamped_to_max(self, state, limits, positions):
        cursor = _toward(positions.base, 225.0)
        assert angle_from_pointer_drag(1, cursor, positions.base, state, limits) == 40.0

    def test_joint1_quantized(self, state, limits, positions):
        cursor = _toward(positions.base, 180.0 + 20.2)
        assert angle_from_pointer_drag(1, cursor, positions.base, state, limits) == 20.0

    def test_joint2_relative_to_middle_link(self, state, limits, positions):
        pivot = pivot_for_joint(2, positions)
        cursor = _toward(pivot, -10.0)
        assert angle_from_pointer_drag(2, cursor, pivot, state, limits) == 40.0

    def test_joint3_relative_to_seat_pan(self, state, limits, positions):
        pivot = pivot_for_joint(3, positions)
        cursor = _toward(pivot, -50.0)
        assert angle_from_pointer_drag(3, cursor, pivot, state, limits) == 50.0

    def test_joint2_clamped(self, state, limits, positions):
        pivot = pivot_for_joint(2, positions)
        cursor = _toward(pivot, -100.0)
        assert angle_from_pointer_drag(2, cursor, pivot, state, limits) == 90.0

    def test_wraparound_has_no_jump(self):
        limits = AngleLimits.from_pairs([(1, -720, 720)])
        state = JointAngleState(359.0, 30.0, 30.0)
        pivot = (0.0, 0.0)
        previous = state.angle1
        for i in range(1, 9):
            target = 359.0 + 0.25 * i
            new = angle_from_pointer_drag(1, _toward(pivot, target + 180.0), pivot, state, limits)
            if new is None:
                continue
            assert abs(new - previous) <= 0.5 + 1e-9
            state.angle1 = previous = new
        assert state.angle1 == 361.0


class TestHitTest:
    """Which link is under the cursor."""

    @pytest.fixture
    def positions(self):
        return joint_positions(LinkGeometry(base_pivot=(0.0, 0.0)), JointAngleState(30.0, 30.0, 30.0))

    def test_backrest_wins_at_shared_pivot(self, positions):
        assert hit_test(positions.seat_end, positions) == 3

    def test_seat_pan_midpoint(self, positions):
        mx = (positions.middle_end[0] + positions.seat_end[0]) / 2
        my = positions.middle_end[1] + 5.0
        assert hit_test((mx, my), positions) == 2

    def test_middle_link_near_base(self, positions):
        cursor = _toward(positions.base, 210.0, r=40.0)
        assert hit_test(cursor, positions) == 1

    def test_far_away(self, positions):
        assert hit_test((500.0, 500.0), positions) is None

    def test_zero_length_segment(self):
        assert point_to_segment_distance(3.0, 4.0, 0.0, 0.0, 0.0, 0.0) == pytest.approx(5.0)

    def test_distance_clamps_to_endpoints(self):
        assert point_to_segment_distance(-3.0, 4.0, 0.0, 0.0, 10.0, 0.0) == pytest.approx(5.0)
        assert point_to_segment_distance(5.0, 4.0, 0.0, 0.0, 10.0, 0.0) == pytest.approx(4.0)
