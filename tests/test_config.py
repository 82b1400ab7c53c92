"""
Tests for settings loading.
"""

import json
import logging
import logging.handlers

import pytest

from config import AppSettings, GameSettings, configure_logging, load_settings
from engine.exceptions import SettingsError


def write_settings(tmp_path, data):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding="utf-8")
    return path


class TestLoadSettings:
    """Tests for load_settings."""

    def test_missing_file_gives_defaults(self, tmp_path):
        settings = load_settings(tmp_path / "nope.json")
        assert settings == AppSettings()
        assert settings.game.win_threshold == 300
        assert settings.game.max_points == 999

    def test_overrides_merge_with_defaults(self, tmp_path):
        path = write_settings(tmp_path, {
            "game": {"win_threshold": 150},
            "serial": {"port": "/dev/ttyUSB1", "baudrate": 115200},
        })

        settings = load_settings(path)

        assert settings.game == GameSettings(win_threshold=150, max_points=999)
        assert settings.serial.port == "/dev/ttyUSB1"
        assert settings.serial.baudrate == 115200
        assert settings.poll.buzzer_interval_ms == 100

    def test_sound_clip_override(self, tmp_path):
        path = write_settings(tmp_path, {"sounds": {"buzzer": "honk.wav"}})
        settings = load_settings(path)
        assert settings.sounds.clips() == {"showdown": "showdown.wav", "buzzer": "honk.wav"}

    def test_invalid_json(self, tmp_path):
        path = write_settings(tmp_path, "{not json")
        with pytest.raises(SettingsError):
            load_settings(path)

    @pytest.mark.parametrize("data", [
        {"game": {"win_threshold": 0}},
        {"game": {"max_points": 5000}},
        {"serial": {"baudrate": 1234}},
        {"sounds": {"buzzer": "buzz.mp3"}},
        {"gpio": {"team_a_button_pin": 40}},
        {"unknown": {}},
        {"game": {"typo": 1}},
    ])
    def test_validation_errors(self, tmp_path, data):
        path = write_settings(tmp_path, data)
        with pytest.raises(SettingsError):
            load_settings(path)


class TestConfigureLogging:
    """Tests for the logging setup."""

    def setup_method(self):
        self.root = logging.getLogger()
        self.level = self.root.level
        self.added = []

    def teardown_method(self):
        for handler in self.added:
            self.root.removeHandler(handler)
            handler.close()
        self.root.setLevel(self.level)

    def configure(self, **kwargs):
        before = list(self.root.handlers)
        configure_logging(**kwargs)
        self.added = [h for h in self.root.handlers if h not in before]
        return self.added

    def test_file_only_when_console_off(self, tmp_path):
        """The terminal mirror owns the screen, so nothing logs to stderr."""
        handlers = self.configure(log_file=tmp_path / "quizbuzz.log", console=False)
        assert [type(h) for h in handlers] == [logging.handlers.RotatingFileHandler]

    def test_console_and_file(self, tmp_path):
        handlers = self.configure(verbose=True, log_file=tmp_path / "quizbuzz.log")
        assert [type(h) for h in handlers] == [
            logging.StreamHandler, logging.handlers.RotatingFileHandler,
        ]
        assert self.root.level == logging.DEBUG
