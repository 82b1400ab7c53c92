"""
Console Protocol - Turns judge lines into commands and answers with prompts.

Parsing is a separate step from acting: parse_command() maps a line to a
tagged Command for the phase the round is in, and the handler applies it to
the shared state. Malformed input never raises; it always ends in a prompt
asking the judge to try again.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, TYPE_CHECKING

from engine.line_buffer import SerialLineBuffer
from engine.state import RoundPhase, SharedState, Team

if TYPE_CHECKING:
    from hardware.interfaces import SerialPort
    from services.event_bus import EventBus

logger = logging.getLogger(__name__)

START_TOKEN = "start"
MAX_POINTS = 999

# ============ Prompt text ============

READY_PROMPT = "Type start to begin round {round_number}\n"
ROUND_STARTED_PROMPT = "Round {round_number} started!\n"
WAITING_FOR_BUZZER_PROMPT = "Waiting for buzzer...\n"
BUZZED_PROMPT = "Team {team} buzzed first!\n"
WHICH_TEAM_PROMPT = "Which team won? (A/B)\n"
HOW_MANY_POINTS_PROMPT = "How many points?\n"
WINNER_PROMPT = "Winner: Team {team}\n"

INVALID_TEAM = "Invalid team name!"
INVALID_INPUT = "Invalid input!"
NUMBER_TOO_BIG = "Number is too big!"


class CommandKind(Enum):
    """What a judge line means in the current phase."""
    START = "start"
    TEAM = "team"
    POINTS = "points"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Command:
    """
    A parsed judge line.

    UNKNOWN commands carry the rejection reason when the phase expected an
    answer, or no reason when the line is simply ignored.
    """
    kind: CommandKind
    text: str
    team: Optional[Team] = None
    points: int = 0
    error: Optional[str] = None

    @property
    def is_rejection(self) -> bool:
        return self.kind == CommandKind.UNKNOWN and self.error is not None


def parse_points(text: str) -> int:
    """
    Parse a score entry.

    Returns the integer value, or 0 when the text is not a plain run of ASCII
    digits (no sign, no underscores). A literal "0" and unparsable text are
    indistinguishable.
    """
    digits = text.strip()
    if not (digits.isascii() and digits.isdigit()):
        return 0
    return int(digits)


def parse_command(line: str, phase: RoundPhase, max_points: int = MAX_POINTS) -> Command:
    """
    Interpret a judge line for the given phase.

    Args:
        line: A completed console line, terminator already stripped
        phase: The round phase the line arrived in
        max_points: Largest accepted score entry

    Returns:
        The tagged Command
    """
    if phase == RoundPhase.AWAITING_START:
        if line == START_TOKEN:
            return Command(CommandKind.START, line)
        return Command(CommandKind.UNKNOWN, line)

    if phase == RoundPhase.AWAITING_TEAM_CHOICE:
        team = Team.from_token(line)
        if team is not None:
            return Command(CommandKind.TEAM, line, team=team)
        return Command(CommandKind.UNKNOWN, line, error=INVALID_TEAM)

    if phase == RoundPhase.AWAITING_SCORE:
        points = parse_points(line)
        if points == 0:
            return Command(CommandKind.UNKNOWN, line, error=INVALID_INPUT)
        if points > max_points:
            return Command(CommandKind.UNKNOWN, line, error=NUMBER_TOO_BIG)
        return Command(CommandKind.POINTS, line, points=points)

    return Command(CommandKind.UNKNOWN, line)


def reprompt_for(command: Command, phase: RoundPhase) -> str:
    """Rejection text followed by the question for the phase."""
    question = WHICH_TEAM_PROMPT if phase == RoundPhase.AWAITING_TEAM_CHOICE else HOW_MANY_POINTS_PROMPT
    return f"{command.error}\n{question}"


class ConsoleProtocolHandler:
    """
    Services the judge's console: sends prompts, reads and applies answers.

    Each call to service() is one scheduling turn. The handler is the only
    task that transmits prompts and the only consumer of completed lines.
    """

    def __init__(
        self,
        state: SharedState,
        buffer: SerialLineBuffer,
        port: "SerialPort",
        event_bus: Optional["EventBus"] = None,
        max_points: int = MAX_POINTS,
    ):
        """
        Args:
            state: Shared game state
            buffer: Line buffer fed by the serial receive task
            port: Outbound serial channel (needs write(bytes))
            event_bus: Optional signal hub for judge decisions
            max_points: Largest accepted score entry
        """
        self.state = state
        self.buffer = buffer
        self.port = port
        self.event_bus = event_bus
        self.max_points = max_points
        self._previous_line: Optional[str] = None

    @property
    def previous_line(self) -> Optional[str]:
        """The last line that was interpreted."""
        return self._previous_line

    def service(self) -> Optional[Command]:
        """
        One turn: transmit the pending prompt, then handle a new line.

        Returns:
            The command interpreted this turn, or None
        """
        self.transmit_pending()

        line = self.buffer.take_line()
        if line is None or line == self._previous_line:
            return None
        self._previous_line = line

        if self.event_bus is not None:
            self.event_bus.line_received.emit(line)
        return self.handle_line(line)

    def transmit_pending(self) -> bool:
        """Send the pending prompt byte-by-byte, then mark it sent."""
        text = self.state.peek_prompt()
        if text is None:
            return False
        for value in text.encode("utf-8"):
            self.port.write(bytes((value,)))
        self.state.clear_prompt()
        logger.debug("Prompt sent: %r", text)
        return True

    def handle_line(self, line: str) -> Command:
        """Parse a line for the current phase and apply it."""
        events = []
        with self.state.locked():
            phase = self.state.phase
            command = parse_command(line, phase, self.max_points)

            if command.kind == CommandKind.START:
                self.state.flags.round_started = True
                logger.info("Judge started the round")

            elif command.kind == CommandKind.TEAM:
                self.state.flags.winning_team = command.team
                self.state.flags.team_chosen = True
                events.append(("team", command.team.value))
                logger.info("Judge chose team %s", command.team.value)

            elif command.kind == CommandKind.POINTS:
                team = self.state.flags.winning_team
                total = self.state.game.add_points(team, command.points)
                self.state.flags.points_awarded = True
                events.append(("points", team.value, command.points))
                logger.info("Team %s awarded %d points (total %d)",
                            team.value, command.points, total)

            elif command.is_rejection:
                # The round's own question goes out before the rejection
                self.transmit_pending()
                self.state.post_prompt(reprompt_for(command, phase), block=False)
                events.append(("rejected", line, command.error))
                logger.info("Rejected %r in %s: %s", line, phase.value, command.error)

            else:
                logger.debug("Ignored %r in %s", line, phase.value)

        self._emit(events)
        return command

    def _emit(self, events: list) -> None:
        if self.event_bus is None:
            return
        for event in events:
            if event[0] == "team":
                self.event_bus.team_chosen.emit(event[1])
            elif event[0] == "points":
                self.event_bus.points_awarded.emit(event[1], event[2])
                self.event_bus.score_updated.emit(self.state.snapshot())
            elif event[0] == "rejected":
                self.event_bus.input_rejected.emit(event[1], event[2])
