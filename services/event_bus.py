"""
Event Bus - Central signal hub for inter-module communication.

All modules connect to this single object rather than directly to each other,
enabling loose coupling between the round engine, the history recorder and
anything that wants to watch the game.
"""

from PySide6.QtCore import QObject, Qt, Signal


class EventBus(QObject):
    """
    Central signal hub for QuizBuzz.

    The EventBus acts as a mediator between all application components:
    - RoundStateMachine emits round lifecycle events
    - BuzzerArbiter emits the buzz
    - ConsoleProtocolHandler emits judge decisions and rejections
    - GameHistoryRecorder listens and persists results

    Signals are emitted from worker threads, so listeners should be attached
    with subscribe(), which uses a direct connection and runs the listener in
    the emitting thread.

    Usage:
        # In RoundStateMachine
        self.event_bus.round_started.emit(round_number)

        # In GameHistoryRecorder
        event_bus.subscribe(event_bus.round_completed, self._on_round_completed)
    """

    # ============ Game Lifecycle ============
    game_started = Signal(dict)         # settings: {win_threshold}
    game_over = Signal(dict)            # final results dict

    # ============ Round Lifecycle ============
    round_started = Signal(int)         # round_number
    buzz_window_opened = Signal(int)    # round_number
    round_completed = Signal(dict)      # {round, buzzed_team, winning_team, points, score_a, score_b}

    # ============ Buzzer / Judge ============
    buzzer_hit = Signal(str)            # team ("A"/"B")
    team_chosen = Signal(str)           # team ("A"/"B")
    points_awarded = Signal(str, int)   # team, points
    input_rejected = Signal(str, str)   # line, reason

    # ============ Console ============
    prompt_issued = Signal(str)         # prompt text
    line_received = Signal(str)         # raw judge line

    # ============ State ============
    phase_changed = Signal(str)         # new phase name
    score_updated = Signal(object)      # GameSnapshot

    # ============ System Events ============
    system_message = Signal(str, str)   # (level, message) - e.g., ("error", "buzzer worker crashed")

    def __init__(self):
        super().__init__()

    @staticmethod
    def subscribe(signal, slot) -> None:
        """Connect a listener so it runs synchronously in the emitting thread."""
        signal.connect(slot, Qt.ConnectionType.DirectConnection)

    def emit_message(self, level: str, message: str) -> None:
        """Emit a system message (info, warning, error)."""
        self.system_message.emit(level, message)
