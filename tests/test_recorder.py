"""Tests for the angle history recorder and seat-pan trails."""

import pytest

from zframe_sim.core.recorder import SampleRecorder, SeatPanTrails
from zframe_sim.core.state import JointAngleState


class TestSampleRecorder:
    """Fixed-cadence sampling over a rolling window."""

    @pytest.fixture
    def recorder(self):
        return SampleRecorder(start_ms=0.0, interval_ms=50.0, window_ms=30000.0)

    def test_window_after_forty_seconds(self, recorder):
        state = JointAngleState()
        for t in range(0, 40001, 16):
            state.angle1 = 5.0 + (t % 3000) / 100.0
            recorder.record_if_due(float(t), state)
        samples = recorder.samples
        latest = samples[-1].time_ms
        assert latest > 39900.0
        assert all(s.time_ms > latest - 30000.0 for s in samples)

    def test_interval_is_respected(self, recorder):
        state = JointAngleState()
        for t in range(0, 1000, 16):
            recorder.record_if_due(float(t), state)
        times = [s.time_ms for s in recorder.samples]
        assert times[0] == 0.0
        assert all(b - a >= 50.0 for a, b in zip(times, times[1:]))

    def test_times_are_relative_to_start(self):
        rec = SampleRecorder(start_ms=1000.0)
        rec.record_if_due(1250.0, JointAngleState())
        assert rec.samples[0].time_ms == 250.0

    def test_seat_pan_difference_is_normalized(self, recorder):
        recorder.record_if_due(0.0, JointAngleState(10.0, 200.0, 30.0), "act2Up")
        s = recorder.samples[0]
        assert s.seat_pan_difference == pytest.approx(170.0)
        assert s.control_label == "act2Up"

    def test_clear(self, recorder):
        recorder.record_if_due(0.0, JointAngleState())
        recorder.clear(start_ms=500.0)
        assert len(recorder) == 0
        assert recorder.record_if_due(600.0, JointAngleState())
        assert recorder.samples[0].time_ms == 100.0

    def test_as_arrays(self, recorder):
        assert recorder.as_arrays()["angle1"].shape == (0,)
        recorder.record_if_due(0.0, JointAngleState(11.0, 12.0, 13.0))
        recorder.record_if_due(50.0, JointAngleState(14.0, 15.0, 16.0))
        arrays = recorder.as_arrays()
        assert list(arrays["angle3"]) == [13.0, 16.0]
        assert list(arrays["time_ms"]) == [0.0, 50.0]


class TestSeatPanTrails:
    def test_trails_are_capped(self):
        trails = SeatPanTrails(max_length=100)
        for i in range(150):
            trails.push([(i, 0.0), (i, 1.0), (i, 2.0)])
        assert [len(t) for t in trails.trails] == [100, 100, 100]
        assert trails.trails[2][-1] == (149.0, 2.0)
        assert trails.trails[0][0] == (50.0, 0.0)

    def test_clear(self):
        trails = SeatPanTrails()
        trails.push([(1.0, 1.0)] * 3)
        trails.clear()
        assert all(len(t) == 0 for t in trails.trails)
