"""Tests for per-joint angle limits."""

import pytest

from zframe_sim.core.limits import AngleLimits, JointLimit, check_joint


class TestJointLimit:
    """Clamping and limit detection on a single joint."""

    @pytest.fixture
    def limit(self):
        return JointLimit(5.0, 40.0)

    @pytest.mark.parametrize("value", [-1000.0, 0.0, 5.0, 22.5, 40.0, 41.0, 1e9])
    def test_clamp_is_idempotent(self, limit, value):
        once = limit.clamp(value)
        assert limit.clamp(once) == once
        assert 5.0 <= once <= 40.0

    def test_ordered_swaps_reversed_bounds(self):
        lim = JointLimit.ordered(40, 5)
        assert (lim.min, lim.max) == (5.0, 40.0)

    def test_at_limit_uses_tolerance(self, limit):
        assert limit.at_max(40.005)
        assert limit.at_min(4.995)
        assert not limit.at_max(39.98)


class TestAngleLimits:
    """Limit table addressed by joint number."""

    @pytest.fixture
    def limits(self):
        return AngleLimits.from_pairs([(1, 5, 40), (2, 5, 90), (3, 5, 100)])

    def test_clamp_per_joint(self, limits):
        assert limits.clamp(1, 50.0) == 40.0
        assert limits.clamp(2, 50.0) == 50.0
        assert limits.clamp(3, -3.0) == 5.0

    def test_unset_joint_defaults_to_full_circle(self):
        limits = AngleLimits()
        assert limits.clamp(2, 359.0) == 359.0
        assert limits.clamp(2, 400.0) == 360.0

    def test_set_limits_swaps_min_and_max(self, limits):
        lim = limits.set_limits(1, 60, 10)
        assert lim == JointLimit(10.0, 60.0)
        assert limits.get(1) == lim

    def test_at_limit_flags_angles_outside_range(self, limits):
        limits.set_limits(3, 5, 20)
        assert limits.at_limit(3, 30.0)
        assert limits.at_limit(3, 20.0)
        assert limits.at_limit(1, 2.0)
        assert not limits.at_limit(3, 12.0)

    def test_at_limit_in_direction(self, limits):
        assert limits.at_limit_in_direction(1, 40.0, +0.4)
        assert not limits.at_limit_in_direction(1, 40.0, -0.4)
        assert limits.at_limit_in_direction(1, 5.0, -0.4)
        assert not limits.at_limit_in_direction(1, 20.0, +0.4)

    def test_copy_is_independent(self, limits):
        other = limits.copy()
        other.set_limits(1, 0, 10)
        assert limits.get(1) == JointLimit(5.0, 40.0)

    @pytest.mark.parametrize("joint", [0, 4, "x", None])
    def test_invalid_joint_raises(self, joint):
        with pytest.raises(ValueError):
            check_joint(joint)
