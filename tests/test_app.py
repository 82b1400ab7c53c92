"""
End-to-end tests: every task running, driven through the fake console link
and buttons.
"""

import pytest

from config import AppSettings, GameSettings, PollSettings
from app import BuzzerApp
from engine.display_mirror import TEAM_A_ROW, TEAM_B_ROW
from engine.state import RoundPhase, Team
from hardware.display import TextGridDisplay
from tests.conftest import FakeSounds, wait_until

FAST_POLL = PollSettings(
    buzzer_interval_ms=5,
    display_interval_ms=20,
    console_interval_ms=2,
    serial_interval_ms=2,
)


def make_app(port, buttons, leds, audio, threshold=100):
    settings = AppSettings(game=GameSettings(win_threshold=threshold), poll=FAST_POLL)
    display = TextGridDisplay(settings.display.rows, settings.display.cols)
    return BuzzerApp(settings, port, buttons, leds, audio, display, sounds=FakeSounds())


def wait_phase(app, phase):
    wait_until(lambda: app.state.snapshot().phase == phase)


def play_round(app, port, buttons, buzzer, winner, points):
    wait_phase(app, RoundPhase.AWAITING_START)
    port.send("start\n")
    wait_phase(app, RoundPhase.AWAITING_BUZZ)
    buttons[buzzer].is_pressed = True
    wait_phase(app, RoundPhase.AWAITING_TEAM_CHOICE)
    buttons[buzzer].is_pressed = False
    port.send(f"{winner.value}\n")
    wait_phase(app, RoundPhase.AWAITING_SCORE)
    port.send(f"{points}\n")


class TestBuzzerApp:
    """Tests for a whole game."""

    def test_full_game(self, port, buttons, leds, audio):
        app = make_app(port, buttons, leds, audio, threshold=100)
        finished = []
        app.event_bus.subscribe(app.event_bus.game_over, finished.append)
        app.start()
        try:
            play_round(app, port, buttons, Team.B, Team.B, 60)
            wait_phase(app, RoundPhase.AWAITING_START)
            wait_until(lambda: not leds[Team.B].is_lit)

            play_round(app, port, buttons, Team.A, Team.B, 50)
            assert app.wait(timeout=5.0)
        finally:
            app.stop()

        assert app.error is None
        assert port.output().endswith("Winner: Team B\n")
        assert finished == [{"winner": "B", "score_a": 0, "score_b": 110, "rounds_played": 2}]
        assert audio.names() == ["showdown.wav", "buzzer.wav", "showdown.wav", "buzzer.wav"]
        assert app.mirror.display.line(TEAM_A_ROW) == "Team A: 0"
        assert app.mirror.display.line(TEAM_B_ROW) == "Team B: 110"
        assert port.closed

    def test_rejected_input_reprompts(self, port, buttons, leds, audio):
        app = make_app(port, buttons, leds, audio)
        app.start()
        try:
            wait_phase(app, RoundPhase.AWAITING_START)
            port.send("start\n")
            wait_phase(app, RoundPhase.AWAITING_BUZZ)
            buttons[Team.A].is_pressed = True
            wait_phase(app, RoundPhase.AWAITING_TEAM_CHOICE)

            port.send("x\n")
            wait_until(lambda: "Invalid team name!\nWhich team won? (A/B)\n" in port.output())
            assert app.state.snapshot().phase == RoundPhase.AWAITING_TEAM_CHOICE
        finally:
            app.stop()

    def test_button_pressed_early_wins_once_window_opens(self, port, buttons, leds, audio):
        """A press held through the showdown counts from the moment the window opens."""
        app = make_app(port, buttons, leds, audio)
        app.start()
        try:
            wait_phase(app, RoundPhase.AWAITING_START)
            buttons[Team.B].is_pressed = True
            port.send("start\n")
            wait_phase(app, RoundPhase.AWAITING_TEAM_CHOICE)
            assert app.state.snapshot().buzzed_team == Team.B
        finally:
            app.stop()

    def test_stop_releases_everything(self, port, buttons, leds, audio):
        app = make_app(port, buttons, leds, audio)
        app.start()
        wait_phase(app, RoundPhase.AWAITING_START)

        app.stop()

        wait_until(lambda: not app.is_running)
        assert port.closed
        assert not any(led.is_lit for led in leds.values())
        assert all(button.closed for button in buttons.values())
        assert all(led.closed for led in leds.values())

    def test_start_queued_before_launch(self, port, buttons, leds, audio):
        """A 'start' already waiting on the link when the game launches begins round one."""
        port.send("start\n")
        app = make_app(port, buttons, leds, audio)
        app.start()
        try:
            wait_phase(app, RoundPhase.AWAITING_BUZZ)
            assert app.state.snapshot().round_number == 1
        finally:
            app.stop()

    def test_start_twice_is_an_error(self, port, buttons, leds, audio):
        app = make_app(port, buttons, leds, audio)
        app.start()
        try:
            with pytest.raises(RuntimeError):
                app.start()
        finally:
            app.stop()

    def test_crashed_task_stops_the_game(self, buttons, leds, audio):
        class BrokenPort:
            closed = False

            def read_available(self):
                raise OSError("cable unplugged")

            def write(self, data):
                return len(data)

            def close(self):
                self.closed = True

        port = BrokenPort()
        app = make_app(port, buttons, leds, audio)
        messages = []
        app.event_bus.subscribe(app.event_bus.system_message, lambda level, text: messages.append(level))
        app.start()

        assert app.wait(timeout=5.0)
        app.stop()

        assert isinstance(app.error, OSError)
        assert "error" in messages
        assert app.state.is_shutdown
