"""
Round State Machine - Runs the game one round at a time.

A round always walks the same path:

    AWAITING_START -> ROUND_STARTED -> AWAITING_BUZZ -> AWAITING_TEAM_CHOICE
        -> AWAITING_SCORE -> ROUND_COMPLETE -> AWAITING_START | GAME_OVER

The machine never reads the console or the buttons itself. It waits on the
shared condition for the flag another task sets (round_started by the console,
buzzer_hit by the arbiter, and so on), then performs the transition's side
effects. The win condition is only checked once a round is complete.
"""

import logging
from typing import Optional, TYPE_CHECKING

from engine.exceptions import InvalidPhaseTransition
from engine.protocol import (
    BUZZED_PROMPT,
    HOW_MANY_POINTS_PROMPT,
    READY_PROMPT,
    ROUND_STARTED_PROMPT,
    WAITING_FOR_BUZZER_PROMPT,
    WHICH_TEAM_PROMPT,
    WINNER_PROMPT,
)
from engine.state import RoundPhase, SharedState

if TYPE_CHECKING:
    from hardware.audio import SoundLibrary
    from hardware.interfaces import AudioPlayer
    from services.event_bus import EventBus

logger = logging.getLogger(__name__)


class RoundStateMachine:
    """
    Drives rounds until one team reaches the win threshold.

    Usage:
        machine = RoundStateMachine(state, audio, sounds, win_threshold=300)
        thread = threading.Thread(target=machine.run, daemon=True)
        thread.start()
    """

    # Allowed next phases
    TRANSITIONS = {
        RoundPhase.AWAITING_START: (RoundPhase.ROUND_STARTED,),
        RoundPhase.ROUND_STARTED: (RoundPhase.AWAITING_BUZZ,),
        RoundPhase.AWAITING_BUZZ: (RoundPhase.AWAITING_TEAM_CHOICE,),
        RoundPhase.AWAITING_TEAM_CHOICE: (RoundPhase.AWAITING_SCORE,),
        RoundPhase.AWAITING_SCORE: (RoundPhase.ROUND_COMPLETE,),
        RoundPhase.ROUND_COMPLETE: (RoundPhase.AWAITING_START, RoundPhase.GAME_OVER),
        RoundPhase.GAME_OVER: (),
    }

    WIN_THRESHOLD = 300

    # How long the final message may take to reach the judge
    FINAL_PROMPT_TIMEOUT_S = 5.0

    def __init__(
        self,
        state: SharedState,
        audio: "AudioPlayer",
        sounds: "SoundLibrary",
        win_threshold: int = WIN_THRESHOLD,
        showdown_clip: str = "showdown",
        event_bus: Optional["EventBus"] = None,
    ):
        """
        Args:
            state: Shared game state
            audio: Player whose play(path) blocks until the clip ends
            sounds: Resolves clip names to asset paths
            win_threshold: Score that ends the game at the next round boundary
            showdown_clip: Name of the sound that opens the buzzer window
            event_bus: Optional signal hub
        """
        self.state = state
        self.audio = audio
        self.sounds = sounds
        self.win_threshold = win_threshold
        self.showdown_clip = showdown_clip
        self.event_bus = event_bus
        self.rounds_played = 0
        self._last_scores = (0, 0)

    @property
    def phase(self) -> RoundPhase:
        with self.state.lock:
            return self.state.phase

    def run(self) -> None:
        """Thread body: play rounds until game over or shutdown."""
        logger.info("Game started, first to %d points wins", self.win_threshold)
        if self.event_bus is not None:
            self.event_bus.game_started.emit({"win_threshold": self.win_threshold})

        while not self.state.is_shutdown:
            if not self.play_round():
                break

    def play_round(self) -> bool:
        """
        Play one full round.

        Returns:
            True if another round should follow, False on game over or shutdown
        """
        self._await_start()
        if not self.state.wait_for(lambda: self.state.flags.round_started):
            return False

        self._start_round()
        self._open_buzzer()
        if not self.state.wait_for(lambda: self.state.flags.buzzer_hit):
            return False

        self._ask_for_team()
        if not self.state.wait_for(lambda: self.state.flags.team_chosen):
            return False

        self._ask_for_points()
        if not self.state.wait_for(lambda: self.state.flags.points_awarded):
            return False

        self._complete_round()
        if self._is_won():
            self._finish_game()
            return False
        return True

    # ============ Transitions ============

    def _transition(self, new_phase: RoundPhase) -> None:
        """Move to the next phase. Must be called with the lock held."""
        current = self.state.phase
        if new_phase not in self.TRANSITIONS[current]:
            raise InvalidPhaseTransition(current, new_phase)
        self.state.phase = new_phase
        logger.debug("Phase %s -> %s", current.value, new_phase.value)

    def _emit_phase(self, phase: RoundPhase) -> None:
        if self.event_bus is not None:
            self.event_bus.phase_changed.emit(phase.value)

    def _await_start(self) -> None:
        """Ask the judge to start. Flags are reset only when leaving a finished round."""
        with self.state.locked():
            # A "start" accepted before the first prompt must survive
            if self.state.phase == RoundPhase.ROUND_COMPLETE:
                self._transition(RoundPhase.AWAITING_START)
                self.state.flags.reset()
            next_round = self.state.game.round_number + 1

        self._emit_phase(RoundPhase.AWAITING_START)
        self._prompt(READY_PROMPT.format(round_number=next_round))

    def _start_round(self) -> None:
        with self.state.locked():
            self._transition(RoundPhase.ROUND_STARTED)
            self.state.game.round_number += 1
            round_number = self.state.game.round_number

        logger.info("Round %d started", round_number)
        self._emit_phase(RoundPhase.ROUND_STARTED)
        if self.event_bus is not None:
            self.event_bus.round_started.emit(round_number)
        self._prompt(ROUND_STARTED_PROMPT.format(round_number=round_number))

    def _open_buzzer(self) -> None:
        """Play the showdown cue, then open the buzzer window."""
        path = self.sounds.resolve(self.showdown_clip)
        if path is not None:
            self.audio.play(path)

        with self.state.locked():
            self._transition(RoundPhase.AWAITING_BUZZ)
            round_number = self.state.game.round_number

        self._emit_phase(RoundPhase.AWAITING_BUZZ)
        if self.event_bus is not None:
            self.event_bus.buzz_window_opened.emit(round_number)
        self._prompt(WAITING_FOR_BUZZER_PROMPT)

    def _ask_for_team(self) -> None:
        with self.state.locked():
            self._transition(RoundPhase.AWAITING_TEAM_CHOICE)
            buzzed = self.state.flags.buzzed_team

        self._emit_phase(RoundPhase.AWAITING_TEAM_CHOICE)
        text = WHICH_TEAM_PROMPT
        if buzzed is not None:
            text = BUZZED_PROMPT.format(team=buzzed.value) + text
        self._prompt(text)

    def _ask_for_points(self) -> None:
        with self.state.locked():
            self._transition(RoundPhase.AWAITING_SCORE)

        self._emit_phase(RoundPhase.AWAITING_SCORE)
        self._prompt(HOW_MANY_POINTS_PROMPT)

    def _complete_round(self) -> None:
        with self.state.locked():
            self._transition(RoundPhase.ROUND_COMPLETE)
        snapshot = self.state.snapshot()
        self.rounds_played += 1
        points = self._points_this_round(snapshot)

        logger.info("Round %d complete: A=%d B=%d",
                    snapshot.round_number, snapshot.score_a, snapshot.score_b)
        self._emit_phase(RoundPhase.ROUND_COMPLETE)
        if self.event_bus is not None:
            result = snapshot.to_dict()
            result["points"] = points
            self.event_bus.round_completed.emit(result)
            self.event_bus.score_updated.emit(snapshot)

    def _is_won(self) -> bool:
        with self.state.lock:
            return self.state.game.max_score >= self.win_threshold

    def _finish_game(self) -> None:
        """Announce the winner and stop every task."""
        with self.state.locked():
            self._transition(RoundPhase.GAME_OVER)
            winner = self.state.game.leader()
            score_a = self.state.game.score_a
            score_b = self.state.game.score_b
            rounds = self.state.game.round_number

        logger.info("Game over: Team %s wins %d-%d", winner.value, score_a, score_b)
        self._emit_phase(RoundPhase.GAME_OVER)
        self._prompt(WINNER_PROMPT.format(team=winner.value))
        if not self.state.wait_prompt_sent(timeout=self.FINAL_PROMPT_TIMEOUT_S):
            logger.warning("Final message was not delivered to the console")

        if self.event_bus is not None:
            self.event_bus.game_over.emit({
                "winner": winner.value,
                "score_a": score_a,
                "score_b": score_b,
                "rounds_played": rounds,
            })
        self.state.shutdown()

    # ============ Helpers ============

    def _prompt(self, text: str) -> None:
        if self.state.post_prompt(text) and self.event_bus is not None:
            self.event_bus.prompt_issued.emit(text)

    def _points_this_round(self, snapshot) -> int:
        """Points awarded in the round that just ended."""
        previous = self._last_scores
        self._last_scores = (snapshot.score_a, snapshot.score_b)
        return (snapshot.score_a - previous[0]) + (snapshot.score_b - previous[1])
