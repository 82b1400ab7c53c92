"""
QuizBuzz Services

Application services for event handling and game history.
"""

from services.event_bus import EventBus
from services.history import GameHistoryRecorder

__all__ = ["EventBus", "GameHistoryRecorder"]
