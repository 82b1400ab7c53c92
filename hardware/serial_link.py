"""
Serial Link - The judge's console connection via pyserial.
"""

import logging
import sys
import threading
from typing import Optional

import serial

logger = logging.getLogger(__name__)


class SerialLink:
    """
    Non-blocking byte channel over a serial port.

    read_available() returns whatever has arrived without waiting, so the
    receive task can drain the port and go back to sleep.
    """

    def __init__(self, port: str, baudrate: int = 9600, timeout: float = 0.2):
        """
        Args:
            port: Device name, e.g. /dev/ttyACM0 or COM3
            baudrate: Line speed
            timeout: Write timeout in seconds
        """
        self.port = port
        self.baudrate = baudrate
        self._serial = serial.Serial(port, baudrate, timeout=0, write_timeout=timeout)
        logger.info("Opened console link on %s at %d baud", port, baudrate)

    def read_available(self) -> bytes:
        waiting = self._serial.in_waiting
        if not waiting:
            return b""
        return self._serial.read(waiting)

    def write(self, data: bytes) -> int:
        return self._serial.write(data) or 0

    def close(self) -> None:
        if self._serial.is_open:
            self._serial.close()
            logger.info("Closed console link on %s", self.port)


class StdioLink:
    """
    Console link on the local terminal, for running without a serial cable.

    A background reader copies stdin into an internal buffer; prompts are
    written to stdout.
    """

    def __init__(self, stdin=None, stdout=None):
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._lock = threading.Lock()
        self._pending = bytearray()
        self._reader: Optional[threading.Thread] = threading.Thread(
            target=self._read_loop, name="stdin", daemon=True
        )
        self._reader.start()

    def _read_loop(self) -> None:
        for line in self._stdin:
            with self._lock:
                self._pending.extend(line.encode("utf-8"))

    def read_available(self) -> bytes:
        with self._lock:
            data = bytes(self._pending)
            self._pending.clear()
            return data

    def write(self, data: bytes) -> int:
        self._stdout.write(data.decode("utf-8", errors="replace"))
        self._stdout.flush()
        return len(data)

    def close(self) -> None:
        pass
