"""
Shared Game State - The single lock-protected store every task works on.

The buzzer, serial receive, console, round and display tasks all read and
write this object. Any change that touches more than one field happens inside
``locked()``, and every change wakes the waiters on the condition variable so
that nobody has to spin on a flag.
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, Optional


class Team(Enum):
    """The two competing teams."""
    A = "A"
    B = "B"

    @classmethod
    def from_token(cls, token: str) -> Optional["Team"]:
        """Map a judge token (A, a, B, b) to a team, or None."""
        return {"A": cls.A, "a": cls.A, "B": cls.B, "b": cls.B}.get(token)


class RoundPhase(Enum):
    """Round state machine phases, in the order a round passes through them."""
    AWAITING_START = "awaiting_start"
    ROUND_STARTED = "round_started"
    AWAITING_BUZZ = "awaiting_buzz"
    AWAITING_TEAM_CHOICE = "awaiting_team_choice"
    AWAITING_SCORE = "awaiting_score"
    ROUND_COMPLETE = "round_complete"
    GAME_OVER = "game_over"


@dataclass
class GameState:
    """Round counter and cumulative team scores."""
    round_number: int = 0
    score_a: int = 0
    score_b: int = 0

    def score_of(self, team: Team) -> int:
        return self.score_a if team == Team.A else self.score_b

    def add_points(self, team: Team, points: int) -> int:
        """Add points to a team and return its new total."""
        if points < 0:
            raise ValueError("Scores never decrease")
        if team == Team.A:
            self.score_a += points
            return self.score_a
        self.score_b += points
        return self.score_b

    @property
    def max_score(self) -> int:
        return max(self.score_a, self.score_b)

    def leader(self) -> Team:
        """Team with the higher score; team A on a tie."""
        return Team.B if self.score_b > self.score_a else Team.A


@dataclass
class RoundFlags:
    """Per-round progress flags. Once set, a flag stays set until reset()."""
    round_started: bool = False
    buzzer_hit: bool = False
    team_chosen: bool = False
    points_awarded: bool = False
    winning_team: Optional[Team] = None

    # Who pressed first, for the judge's information
    buzzed_team: Optional[Team] = None

    def reset(self) -> None:
        self.round_started = False
        self.buzzer_hit = False
        self.team_chosen = False
        self.points_awarded = False
        self.winning_team = None
        self.buzzed_team = None


@dataclass
class Prompt:
    """The single outbound message slot for the judge's console."""
    text: str = ""
    pending: bool = False


@dataclass(frozen=True)
class GameSnapshot:
    """
    Immutable copy of the shared state.
    Handed to readers (display, event listeners) so they never hold the lock.
    """
    round_number: int = 0
    score_a: int = 0
    score_b: int = 0
    phase: RoundPhase = RoundPhase.AWAITING_START
    round_started: bool = False
    buzzer_hit: bool = False
    team_chosen: bool = False
    points_awarded: bool = False
    winning_team: Optional[Team] = None
    buzzed_team: Optional[Team] = None
    last_prompt: str = ""

    def to_dict(self) -> dict:
        return {
            "round": self.round_number,
            "score_a": self.score_a,
            "score_b": self.score_b,
            "phase": self.phase.value,
            "winning_team": self.winning_team.value if self.winning_team else None,
            "buzzed_team": self.buzzed_team.value if self.buzzed_team else None,
        }


class SharedState:
    """
    Game state, round flags, current phase and prompt slot behind one lock.

    Usage:
        state = SharedState()

        # Multi-field update
        with state.locked():
            state.game.round_number += 1
            state.phase = RoundPhase.ROUND_STARTED

        # Suspend until another task sets a flag (or shutdown)
        state.wait_for(lambda: state.flags.buzzer_hit)
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._changed = threading.Condition(self._lock)
        self._shutdown = threading.Event()

        self.game = GameState()
        self.flags = RoundFlags()
        self.phase = RoundPhase.AWAITING_START
        self.prompt = Prompt()
        self._last_prompt = ""

    @property
    def lock(self) -> threading.RLock:
        """The global lock, shared with the serial line buffer."""
        return self._lock

    @contextmanager
    def locked(self) -> Iterator["SharedState"]:
        """Hold the lock for a read-modify-write and wake waiters afterwards."""
        with self._changed:
            yield self
            self._changed.notify_all()

    def wait_for(self, predicate: Callable[[], bool],
                 timeout: Optional[float] = None) -> bool:
        """
        Block until predicate() is true or shutdown is signalled.

        Args:
            predicate: Evaluated with the lock held
            timeout: Seconds to wait, None for no limit

        Returns:
            The final value of predicate()
        """
        with self._changed:
            self._changed.wait_for(
                lambda: predicate() or self._shutdown.is_set(),
                timeout=timeout,
            )
            return bool(predicate())

    # ============ Prompt slot ============

    def post_prompt(self, text: str, block: bool = True,
                    timeout: Optional[float] = None) -> bool:
        """
        Queue a prompt for the judge.

        With block=True the call waits until the previous prompt has been
        transmitted, so at most one prompt is ever pending.

        Returns:
            True if the prompt was queued
        """
        with self._changed:
            if block:
                self._changed.wait_for(
                    lambda: not self.prompt.pending or self._shutdown.is_set(),
                    timeout=timeout,
                )
                if self.prompt.pending:
                    return False
            self.prompt.text = text
            self.prompt.pending = True
            self._last_prompt = text
            self._changed.notify_all()
            return True

    def peek_prompt(self) -> Optional[str]:
        """Text of the pending prompt, or None."""
        with self._lock:
            return self.prompt.text if self.prompt.pending else None

    def clear_prompt(self) -> None:
        """Mark the pending prompt as transmitted."""
        with self._changed:
            self.prompt.pending = False
            self._changed.notify_all()

    def wait_prompt_sent(self, timeout: Optional[float] = None) -> bool:
        """Block until no prompt is pending. Returns False on timeout/shutdown."""
        with self._changed:
            self._changed.wait_for(
                lambda: not self.prompt.pending or self._shutdown.is_set(),
                timeout=timeout,
            )
            return not self.prompt.pending

    # ============ Buzzer ============

    def claim_buzz(self, team: Team) -> bool:
        """
        Record a buzz for a team if the buzzer window is open.

        The check and both writes happen under the lock, so of any number of
        concurrent presses exactly one can succeed per round.
        """
        with self._changed:
            if self.phase != RoundPhase.AWAITING_BUZZ or self.flags.buzzer_hit:
                return False
            self.flags.buzzer_hit = True
            self.flags.buzzed_team = team
            self._changed.notify_all()
            return True

    # ============ Shutdown ============

    @property
    def shutdown_event(self) -> threading.Event:
        return self._shutdown

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown.is_set()

    def shutdown(self) -> None:
        """Signal every task to stop. Safe to call more than once."""
        with self._changed:
            self._shutdown.set()
            self._changed.notify_all()

    # ============ Query ============

    def snapshot(self) -> GameSnapshot:
        """Get a consistent copy of the current state."""
        with self._lock:
            return GameSnapshot(
                round_number=self.game.round_number,
                score_a=self.game.score_a,
                score_b=self.game.score_b,
                phase=self.phase,
                round_started=self.flags.round_started,
                buzzer_hit=self.flags.buzzer_hit,
                team_chosen=self.flags.team_chosen,
                points_awarded=self.flags.points_awarded,
                winning_team=self.flags.winning_team,
                buzzed_team=self.flags.buzzed_team,
                last_prompt=self._last_prompt,
            )
