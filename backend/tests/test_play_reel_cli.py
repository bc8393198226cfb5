"""Tests for the reel playback CLI."""
import json
import sys

import pytest

import play_reel_cli


@pytest.fixture
def reel_file(tmp_path):
    path = tmp_path / "reel.json"
    path.write_text(json.dumps({
        "intervals": [
            {"name": "Second", "start_time": "1:00", "end_time": "1:05"},
            {"id": "first", "start_time": 5, "end_time": 9.5},
        ]
    }))
    return path


class TestLoadIntervals:
    """Tests for reading interval files."""

    def test_parses_times_and_defaults_ids(self, reel_file):
        intervals = play_reel_cli.load_intervals(reel_file)

        assert [i.id for i in intervals] == ["highlight-1", "first"]
        assert intervals[0].start_time == 60
        assert intervals[0].end_time == 65

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            play_reel_cli.load_intervals(tmp_path / "nope.json")


class TestMain:
    """Tests for the command line entry point."""

    def test_negative_settle_exits_cleanly(self, reel_file, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["play_reel_cli.py", str(reel_file), "--settle-initial", "-1"])

        with pytest.raises(SystemExit) as exc_info:
            play_reel_cli.main()

        assert exc_info.value.code == 1

    def test_missing_file_exits_cleanly(self, tmp_path, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["play_reel_cli.py", str(tmp_path / "nope.json")])

        with pytest.raises(SystemExit) as exc_info:
            play_reel_cli.main()

        assert exc_info.value.code == 1
