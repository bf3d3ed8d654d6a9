"""Tests for settings persistence and the session debug log."""

import json

import pytest

from zframe_sim.core.animation import AnimationTarget
from zframe_sim.core.limits import JointLimit
from zframe_sim.core.session_log import SessionDebugLogger
from zframe_sim.core.settings import (
    SavedPosition,
    ZFrameSettings,
    load_settings,
    save_settings,
)


class TestDefaults:
    def test_default_limits(self):
        s = ZFrameSettings.defaults()
        assert s.limits[1] == JointLimit(5.0, 40.0)
        assert s.limits[2] == JointLimit(5.0, 90.0)
        assert s.limits[3] == JointLimit(5.0, 100.0)

    def test_default_positions(self):
        s = ZFrameSettings.defaults()
        assert s.position("position1").target() == AnimationTarget(15.0, 25.0, 50.0)
        assert s.position("position6").target() == AnimationTarget(25.0, 25.0, 50.0)

    def test_default_flags(self):
        s = ZFrameSettings.defaults()
        assert s.ratio == 0.8
        assert s.allow_partial_movement is True
        assert s.display["show_graph12"] is True
        assert s.display["show_seat_pan_trails"] is False

    def test_unknown_position(self):
        with pytest.raises(ValueError):
            ZFrameSettings.defaults().position("position7")

    def test_angle_limits_view(self):
        limits = ZFrameSettings.defaults().angle_limits()
        assert limits.clamp(1, 100.0) == 40.0


class TestPersistence:
    """Flat JSON blob on disk."""

    @pytest.fixture
    def path(self, tmp_path):
        return str(tmp_path / "cfg" / "settings.json")

    def test_round_trip(self, path):
        s = ZFrameSettings.defaults()
        s.limits[2] = JointLimit(10.0, 80.0)
        s.positions["position3"] = SavedPosition(12.0, 14.0, 16.0, True, False, True)
        s.allow_partial_movement = False
        s.ratio = 1.5
        s.display["draw_chair"] = True
        assert save_settings(s, path) == path
        assert load_settings(path) == s

    def test_missing_file_gives_defaults(self, path):
        assert load_settings(path) == ZFrameSettings.defaults()

    def test_corrupt_file_gives_defaults(self, tmp_path):
        p = tmp_path / "settings.json"
        p.write_text("{not json", encoding="utf-8")
        assert load_settings(str(p)) == ZFrameSettings.defaults()

    def test_tolerant_parsing(self):
        s = ZFrameSettings.from_dict(
            {
                "angle1": {"min": 50, "max": 10},
                "angle2": {"min": "abc", "max": 70},
                "positions": {"position2": {"angle1": 21, "angle2Enabled": False}},
                "ratio": 9,
                "display": {"show_oscilloscope": 1, "unknown": True},
            }
        )
        assert s.limits[1] == JointLimit(10.0, 50.0)
        assert s.limits[2] == JointLimit(5.0, 70.0)
        assert s.position("position2").target() == AnimationTarget(21.0, None, 50.0)
        assert s.ratio == 2.0
        assert s.display["show_oscilloscope"] is True
        assert "unknown" not in s.display

    def test_json_keys(self, path):
        save_settings(ZFrameSettings.defaults(), path)
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
        assert data["angle1"] == {"min": 5.0, "max": 40.0}
        assert data["positions"]["position1"]["angle3Enabled"] is True
        assert data["allowLimitedMovement"] is True


class TestSessionDebugLogger:
    def test_disabled_writes_nothing(self, tmp_path):
        path = tmp_path / "log.jsonl"
        logger = SessionDebugLogger(enabled=False, log_path=str(path))
        logger.log("driver_start", driver="DRAG")
        assert not path.exists()

    def test_writes_json_lines(self, tmp_path):
        path = tmp_path / "logs" / "debug.log"
        logger = SessionDebugLogger(enabled=True, log_path=str(path))
        logger.log("driver_start", driver="DRAG", angles=[30.0, 30.0, 30.0])
        logger.log("driver_stop", driver="DRAG")
        logger.close()
        lines = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
        assert [r["event"] for r in lines] == ["driver_start", "driver_stop"]
        assert lines[0]["angles"] == [30.0, 30.0, 30.0]
        assert "utc" in lines[0]

    def test_unserializable_payload_disables(self, tmp_path):
        logger = SessionDebugLogger(enabled=True, log_path=str(tmp_path / "debug.log"))
        logger.log("bad", value=object())
        assert not logger.enabled
