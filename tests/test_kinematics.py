"""Tests for Z-frame forward kinematics."""

import math

import pytest

from zframe_sim.core.geometry import normalize_deg, short_arc
from zframe_sim.core.kinematics import (
    LinkGeometry,
    base_pivot_for_canvas,
    joint_positions,
    link_directions,
    seat_pan_points,
)
from zframe_sim.core.state import JointAngleState


def _close(p, q, tol=1e-9):
    return abs(p[0] - q[0]) < tol and abs(p[1] - q[1]) < tol


class TestForwardKinematics:
    """Joint positions from angles and link lengths."""

    @pytest.fixture
    def geometry(self):
        return LinkGeometry(base_pivot=(0.0, 0.0), middle_length=180.0, seat_pan_length=160.0, backrest_length=150.0)

    def test_initial_pose(self, geometry):
        pos = joint_positions(geometry, JointAngleState(30.0, 30.0, 30.0))
        c30 = math.cos(math.radians(30.0))
        mid = (-180.0 * c30, -90.0)
        seat = (mid[0] + 160.0, mid[1])
        back = (seat[0] + 150.0 * c30, seat[1] - 75.0)
        assert pos.base == (0.0, 0.0)
        assert _close(pos.middle_end, mid)
        assert _close(pos.seat_end, seat)
        assert _close(pos.backrest_end, back)

    def test_deterministic(self, geometry):
        angles = JointAngleState(17.3, 41.9, 88.1)
        assert joint_positions(geometry, angles) == joint_positions(geometry, angles.copy())

    def test_link_directions(self):
        assert link_directions(JointAngleState(20.0, 35.0, 50.0)) == (200.0, -15.0, -65.0)

    def test_segments_follow_joint_numbers(self, geometry):
        pos = joint_positions(geometry, JointAngleState())
        segs = pos.segments()
        assert [s[0] for s in segs] == [1, 2, 3]
        assert segs[1][1] == pos.middle_end
        assert segs[2][2] == pos.backrest_end

    def test_link_lengths_preserved(self, geometry):
        pos = joint_positions(geometry, JointAngleState(12.0, 70.0, 95.0))
        assert math.dist(pos.base, pos.middle_end) == pytest.approx(180.0)
        assert math.dist(pos.middle_end, pos.seat_end) == pytest.approx(160.0)
        assert math.dist(pos.seat_end, pos.backrest_end) == pytest.approx(150.0)

    def test_seat_pan_points(self, geometry):
        pos = joint_positions(geometry, JointAngleState(30.0, 30.0, 30.0))
        pts = seat_pan_points(pos)
        assert len(pts) == 3
        mx = (pos.middle_end[0] + pos.seat_end[0]) / 2
        assert pts[1] == pytest.approx((mx, pos.seat_end[1]))


class TestCanvasPlacement:
    def test_base_pivot_for_canvas(self):
        assert base_pivot_for_canvas(800, 600) == (400.0, 400.0)
        assert base_pivot_for_canvas(801, 601) == (400.0, 400.0)

    def test_with_base_pivot_keeps_lengths(self):
        g = LinkGeometry().with_base_pivot(10, 20)
        assert g.base_pivot == (10.0, 20.0)
        assert g.middle_length == 180.0


class TestAngleHelpers:
    @pytest.mark.parametrize(
        "value, expected",
        [(0.0, 0.0), (180.0, 180.0), (-180.0, 180.0), (190.0, -170.0), (-190.0, 170.0), (720.0, 0.0)],
    )
    def test_normalize_deg(self, value, expected):
        assert normalize_deg(value) == pytest.approx(expected)

    def test_short_arc_crosses_zero(self):
        frm, span = short_arc(350.0, 10.0)
        assert frm == pytest.approx(350.0)
        assert span == pytest.approx(20.0)

    def test_short_arc_picks_shorter_side(self):
        frm, span = short_arc(10.0, 350.0)
        assert frm == pytest.approx(350.0)
        assert span == pytest.approx(20.0)
