"""
Display Mirror - Copies round, score and console state to the local display.

Read-only: the mirror never changes game state. It takes a snapshot under the
lock and draws it at fixed positions, so a slow display shows data at most one
refresh old.
"""

from typing import TYPE_CHECKING

from engine.state import GameSnapshot, RoundPhase, SharedState

if TYPE_CHECKING:
    from hardware.interfaces import TextDisplay

TITLE = "QUIZ BUZZ"

# Fixed screen rows
TITLE_ROW = 0
ROUND_ROW = 2
TEAM_A_ROW = 4
TEAM_B_ROW = 5
STATUS_ROW = 7
CONSOLE_ROW = 9

PHASE_LABELS = {
    RoundPhase.AWAITING_START: "Waiting to start",
    RoundPhase.ROUND_STARTED: "Get ready...",
    RoundPhase.AWAITING_BUZZ: "Buzzers open!",
    RoundPhase.AWAITING_TEAM_CHOICE: "Judging",
    RoundPhase.AWAITING_SCORE: "Scoring",
    RoundPhase.ROUND_COMPLETE: "Round over",
    RoundPhase.GAME_OVER: "Game over",
}


def status_text(snapshot: GameSnapshot) -> str:
    """One-line description of where the round is."""
    if snapshot.phase == RoundPhase.AWAITING_TEAM_CHOICE and snapshot.buzzed_team:
        return f"Buzz: Team {snapshot.buzzed_team.value}"
    if snapshot.phase == RoundPhase.AWAITING_SCORE and snapshot.winning_team:
        return f"Points to Team {snapshot.winning_team.value}"
    return PHASE_LABELS[snapshot.phase]


class DisplayMirror:
    """
    Renders the current snapshot onto a fixed-position text display.

    Usage:
        mirror = DisplayMirror(state, display)
        worker = PollingWorker("display", mirror.refresh, 500, state.shutdown_event)
    """

    def __init__(self, state: SharedState, display: "TextDisplay", width: int = 18):
        """
        Args:
            state: Shared game state
            display: Surface with locate(row, col) and printf(fmt, *args)
            width: Characters per row; shorter text is padded to clear old output
        """
        self.state = state
        self.display = display
        self.width = width
        self.last_snapshot = None

    def refresh(self) -> GameSnapshot:
        """Draw the current state. Returns the snapshot that was drawn."""
        snapshot = self.state.snapshot()
        self.render(snapshot)
        self.last_snapshot = snapshot
        return snapshot

    def render(self, snapshot: GameSnapshot) -> None:
        self._line(TITLE_ROW, "%s", TITLE)
        self._line(ROUND_ROW, "Round: %d", snapshot.round_number)
        self._line(TEAM_A_ROW, "Team A: %d", snapshot.score_a)
        self._line(TEAM_B_ROW, "Team B: %d", snapshot.score_b)
        self._line(STATUS_ROW, "%s", status_text(snapshot))

        prompt = snapshot.last_prompt.strip().splitlines()
        self._line(CONSOLE_ROW, "> %s", prompt[-1] if prompt else "")

    def _line(self, row: int, fmt: str, *args) -> None:
        text = (fmt % args)[:self.width]
        self.display.locate(row, 0)
        self.display.printf("%s", text.ljust(self.width))
