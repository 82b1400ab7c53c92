"""
Tests for the BuzzerArbiter.
"""

from unittest.mock import MagicMock

from engine.arbiter import BuzzerArbiter
from engine.state import RoundPhase, Team


def make_arbiter(state, buttons, leds, audio, sounds, event_bus=None):
    return BuzzerArbiter(state, buttons, leds, audio, sounds, event_bus=event_bus)


class TestBuzzerArbiter:
    """Tests for first-press arbitration."""

    def test_no_press_no_winner(self, state, buttons, leds, audio, sounds):
        state.phase = RoundPhase.AWAITING_BUZZ
        arbiter = make_arbiter(state, buttons, leds, audio, sounds)

        assert arbiter.poll() is None
        assert not state.flags.buzzer_hit

    def test_press_wins_buzz(self, state, buttons, leds, audio, sounds):
        state.phase = RoundPhase.AWAITING_BUZZ
        arbiter = make_arbiter(state, buttons, leds, audio, sounds)
        buttons[Team.B].is_pressed = True

        assert arbiter.poll() == Team.B
        assert state.flags.buzzer_hit
        assert state.flags.buzzed_team == Team.B
        assert leds[Team.B].is_lit
        assert not leds[Team.A].is_lit
        assert audio.names() == ["buzzer.wav"]

    def test_same_tick_tie_goes_to_team_a(self, state, buttons, leds, audio, sounds):
        """Both pressed in one tick: A is checked first and wins; B stays dark."""
        state.phase = RoundPhase.AWAITING_BUZZ
        arbiter = make_arbiter(state, buttons, leds, audio, sounds)
        buttons[Team.A].is_pressed = True
        buttons[Team.B].is_pressed = True

        assert arbiter.poll() == Team.A
        assert state.flags.buzzed_team == Team.A
        assert leds[Team.A].is_lit
        assert not leds[Team.B].is_lit

    def test_second_press_does_not_change_winner(self, state, buttons, leds, audio, sounds):
        state.phase = RoundPhase.AWAITING_BUZZ
        arbiter = make_arbiter(state, buttons, leds, audio, sounds)

        buttons[Team.B].is_pressed = True
        arbiter.poll()
        buttons[Team.A].is_pressed = True

        for _ in range(5):
            assert arbiter.poll() is None

        assert state.flags.buzzed_team == Team.B
        assert not leds[Team.A].is_lit
        assert audio.names() == ["buzzer.wav"]

    def test_held_button_buzzes_once(self, state, buttons, leds, audio, sounds):
        """Level-triggered: holding the button does not re-buzz."""
        state.phase = RoundPhase.AWAITING_BUZZ
        arbiter = make_arbiter(state, buttons, leds, audio, sounds)
        buttons[Team.A].is_pressed = True

        results = [arbiter.poll() for _ in range(10)]

        assert results.count(Team.A) == 1

    def test_press_ignored_before_window_opens(self, state, buttons, leds, audio, sounds):
        arbiter = make_arbiter(state, buttons, leds, audio, sounds)
        buttons[Team.A].is_pressed = True

        for phase in (RoundPhase.AWAITING_START, RoundPhase.ROUND_STARTED):
            state.phase = phase
            assert arbiter.poll() is None

        assert not state.flags.buzzer_hit
        assert not leds[Team.A].is_lit

    def test_held_button_wins_when_window_opens(self, state, buttons, leds, audio, sounds):
        """The first poll that sees the level after the window opens wins."""
        state.phase = RoundPhase.ROUND_STARTED
        arbiter = make_arbiter(state, buttons, leds, audio, sounds)
        buttons[Team.B].is_pressed = True
        arbiter.poll()

        state.phase = RoundPhase.AWAITING_BUZZ
        assert arbiter.poll() == Team.B

    def test_lights_off_after_round_reset(self, state, buttons, leds, audio, sounds):
        state.phase = RoundPhase.AWAITING_BUZZ
        arbiter = make_arbiter(state, buttons, leds, audio, sounds)
        buttons[Team.A].is_pressed = True
        arbiter.poll()
        buttons[Team.A].is_pressed = False
        assert leds[Team.A].is_lit

        with state.locked():
            state.flags.reset()
            state.phase = RoundPhase.AWAITING_START
        arbiter.poll()

        assert not leds[Team.A].is_lit
        assert arbiter.lit_team is None

    def test_missing_clip_skips_sound(self, state, buttons, leds, audio):
        sounds = MagicMock()
        sounds.resolve.return_value = None
        state.phase = RoundPhase.AWAITING_BUZZ
        arbiter = make_arbiter(state, buttons, leds, audio, sounds)
        buttons[Team.A].is_pressed = True

        assert arbiter.poll() == Team.A
        assert audio.names() == []

    def test_buzz_event_emitted(self, state, buttons, leds, audio, sounds):
        bus = MagicMock()
        state.phase = RoundPhase.AWAITING_BUZZ
        arbiter = make_arbiter(state, buttons, leds, audio, sounds, event_bus=bus)
        buttons[Team.B].is_pressed = True
        arbiter.poll()

        bus.buzzer_hit.emit.assert_called_once_with("B")
