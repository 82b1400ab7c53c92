"""
Serial Line Buffer - Assembles inbound console bytes into complete lines.

One task feeds bytes in as they arrive; one task takes finished lines out.
A line that is not taken before the next one completes is replaced by it.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING, Union

if TYPE_CHECKING:
    from hardware.interfaces import SerialPort

logger = logging.getLogger(__name__)

LINE_TERMINATOR = 0x0A  # '\n'
CARRIAGE_RETURN = 0x0D  # '\r'


@dataclass
class ConsoleBuffer:
    """Partial line being received plus the last completed line."""
    partial_line: bytearray = field(default_factory=bytearray)
    completed_line: Optional[str] = None
    last_byte: int = 0


class SerialLineBuffer:
    """
    Line assembler for the judge's serial console.

    There is no length limit: a sender that never terminates a line grows
    partial_line without bound.

    Usage:
        buffer = SerialLineBuffer(lock=state.lock)
        buffer.feed(b"sta")
        buffer.feed(b"rt\\n")
        buffer.take_line()   # -> "start"
    """

    def __init__(self, lock: Optional[Union[threading.Lock, threading.RLock]] = None):
        """
        Args:
            lock: Lock shared with the rest of the game state (a private
                  lock is created when omitted)
        """
        self._lock = lock if lock is not None else threading.Lock()
        self._buffer = ConsoleBuffer()
        self.lines_completed = 0
        self.lines_dropped = 0

    def feed_byte(self, value: int) -> Optional[str]:
        """
        Append one byte.

        Returns:
            The completed line if this byte was the terminator, else None
        """
        with self._lock:
            self._buffer.last_byte = value
            if value != LINE_TERMINATOR:
                self._buffer.partial_line.append(value)
                return None

            raw = bytes(self._buffer.partial_line)
            if raw and raw[-1] == CARRIAGE_RETURN:
                raw = raw[:-1]
            line = raw.decode("utf-8", errors="ignore")

            if self._buffer.completed_line is not None:
                self.lines_dropped += 1
                logger.debug("Unread line %r replaced by %r",
                             self._buffer.completed_line, line)

            self._buffer.completed_line = line
            self._buffer.partial_line = bytearray()
            self.lines_completed += 1
            return line

    def feed(self, data: bytes) -> int:
        """
        Append a chunk of bytes.

        Returns:
            Number of lines completed by this chunk
        """
        completed = 0
        for value in data:
            if self.feed_byte(value) is not None:
                completed += 1
        return completed

    def take_line(self) -> Optional[str]:
        """Return the completed line and clear it, or None if there is none."""
        with self._lock:
            line = self._buffer.completed_line
            self._buffer.completed_line = None
            return line

    @property
    def has_line(self) -> bool:
        with self._lock:
            return self._buffer.completed_line is not None

    @property
    def partial_line(self) -> bytes:
        """Bytes received since the last terminator."""
        with self._lock:
            return bytes(self._buffer.partial_line)

    @property
    def last_byte(self) -> int:
        with self._lock:
            return self._buffer.last_byte


class SerialReceiver:
    """Drains a serial port into the line buffer (read until empty)."""

    def __init__(self, port: "SerialPort", buffer: SerialLineBuffer):
        self.port = port
        self.buffer = buffer

    def poll(self) -> int:
        """Read everything currently available. Returns bytes consumed."""
        total = 0
        while True:
            data = self.port.read_available()
            if not data:
                return total
            self.buffer.feed(data)
            total += len(data)
