"""
QuizBuzz Game Engine

Round coordination for the quiz buzzer: buzzer arbitration, the judge's
console protocol, the round state machine and the display mirror.
This module contains no hardware dependencies.
"""

from engine.state import (
    GameSnapshot,
    GameState,
    Prompt,
    RoundFlags,
    RoundPhase,
    SharedState,
    Team,
)
from engine.exceptions import InvalidPhaseTransition, QuizBuzzException, SettingsError
from engine.line_buffer import SerialLineBuffer, SerialReceiver
from engine.protocol import Command, CommandKind, ConsoleProtocolHandler, parse_command, parse_points
from engine.arbiter import BuzzerArbiter
from engine.round_machine import RoundStateMachine
from engine.display_mirror import DisplayMirror
from engine.workers import PollingWorker

__all__ = [
    "GameSnapshot",
    "GameState",
    "Prompt",
    "RoundFlags",
    "RoundPhase",
    "SharedState",
    "Team",
    "InvalidPhaseTransition",
    "QuizBuzzException",
    "SettingsError",
    "SerialLineBuffer",
    "SerialReceiver",
    "Command",
    "CommandKind",
    "ConsoleProtocolHandler",
    "parse_command",
    "parse_points",
    "BuzzerArbiter",
    "RoundStateMachine",
    "DisplayMirror",
    "PollingWorker",
]
