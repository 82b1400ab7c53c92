"""
QuizBuzz Hardware

Adapters for the buttons, lights, speaker, display and console link.
"""

from hardware.audio import NullPlayer, SoundLibrary, WavePlayer
from hardware.display import TerminalDisplay, TextGridDisplay

__all__ = [
    "NullPlayer",
    "SoundLibrary",
    "WavePlayer",
    "TerminalDisplay",
    "TextGridDisplay",
]
