"""
Text displays with a locate/printf interface.
"""

import sys
import threading


class TextGridDisplay:
    """
    In-memory character grid.

    Text written with printf() lands at the cursor set by locate() and wraps
    nothing: characters past the last column are dropped.
    """

    def __init__(self, rows: int = 16, cols: int = 18):
        self.rows = rows
        self.cols = cols
        self._lock = threading.Lock()
        self._grid = [[" "] * cols for _ in range(rows)]
        self._row = 0
        self._col = 0

    def locate(self, row: int, col: int) -> None:
        with self._lock:
            self._row = max(0, min(row, self.rows - 1))
            self._col = max(0, min(col, self.cols - 1))

    def printf(self, fmt: str, *args) -> None:
        text = fmt % args if args else fmt
        with self._lock:
            for ch in text:
                if ch == "\n":
                    self._row = min(self._row + 1, self.rows - 1)
                    self._col = 0
                    continue
                if self._col < self.cols:
                    self._grid[self._row][self._col] = ch
                    self._col += 1

    def line(self, row: int) -> str:
        """Contents of one row, trailing spaces removed."""
        with self._lock:
            return "".join(self._grid[row]).rstrip()

    def lines(self) -> list[str]:
        return [self.line(row) for row in range(self.rows)]

    def clear(self) -> None:
        with self._lock:
            self._grid = [[" "] * self.cols for _ in range(self.rows)]
            self._row = self._col = 0


class TerminalDisplay(TextGridDisplay):
    """
    Grid display that also draws on an ANSI terminal.

    Each printf moves the terminal cursor to the grid position first, so the
    screen behaves like a fixed-position LCD.
    """

    def __init__(self, rows: int = 16, cols: int = 18, stream=None, top: int = 1):
        super().__init__(rows, cols)
        self.stream = stream or sys.stdout
        self.top = top

    def clear(self) -> None:
        super().clear()
        self.stream.write("\x1b[2J")
        self.stream.flush()

    def printf(self, fmt: str, *args) -> None:
        row, col = self._row, self._col
        super().printf(fmt, *args)
        with self._lock:
            text = "".join(self._grid[row])[col:]
        self.stream.write(f"\x1b7\x1b[{self.top + row};{col + 1}H{text}\x1b8")
        self.stream.flush()
