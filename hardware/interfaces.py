"""
Hardware interfaces.

The engine talks to the outside world only through these narrow protocols,
so tests and the simulator can swap in anything with the same shape.
"""

from pathlib import Path
from typing import Protocol


class Button(Protocol):
    """A push button reporting its current level."""

    @property
    def is_pressed(self) -> bool: ...

    def close(self) -> None: ...


class Led(Protocol):
    """An indicator light."""

    def on(self) -> None: ...

    def off(self) -> None: ...

    @property
    def is_lit(self) -> bool: ...

    def close(self) -> None: ...


class AudioPlayer(Protocol):
    """Plays a clip to completion, blocking the caller."""

    def play(self, path: Path) -> None: ...


class TextDisplay(Protocol):
    """A character display addressed by row and column."""

    def locate(self, row: int, col: int) -> None: ...

    def printf(self, fmt: str, *args) -> None: ...


class SerialPort(Protocol):
    """Byte channel to the judge's console."""

    def read_available(self) -> bytes: ...

    def write(self, data: bytes) -> int: ...

    def close(self) -> None: ...
