"""
Shared fixtures: fake buttons, lights, speaker and console link.
"""

import threading
import time
from pathlib import Path

import pytest

from engine.line_buffer import SerialLineBuffer
from engine.state import SharedState, Team


class FakeButton:
    def __init__(self):
        self.is_pressed = False
        self.closed = False

    def close(self):
        self.closed = True


class FakeLed:
    def __init__(self):
        self.is_lit = False
        self.changes = 0
        self.closed = False

    def on(self):
        self.is_lit = True
        self.changes += 1

    def off(self):
        self.is_lit = False
        self.changes += 1

    def close(self):
        self.closed = True


class FakeAudio:
    """Records clips; play() returns immediately."""

    def __init__(self):
        self.played = []
        self._lock = threading.Lock()

    def play(self, path):
        with self._lock:
            self.played.append(Path(path).name)

    def names(self):
        with self._lock:
            return list(self.played)


class FakeSounds:
    """Every clip exists and resolves to '<name>.wav'."""

    def resolve(self, name):
        return Path(f"{name}.wav")


class FakePort:
    """In-memory console link."""

    def __init__(self):
        self._lock = threading.Lock()
        self.inbound = bytearray()
        self.outbound = bytearray()
        self.writes = 0
        self.closed = False

    def send(self, text: str) -> None:
        """Simulate the judge typing."""
        with self._lock:
            self.inbound.extend(text.encode("utf-8"))

    def read_available(self) -> bytes:
        with self._lock:
            data = bytes(self.inbound)
            self.inbound.clear()
            return data

    def write(self, data: bytes) -> int:
        with self._lock:
            self.outbound.extend(data)
            self.writes += 1
        return len(data)

    def output(self) -> str:
        with self._lock:
            return self.outbound.decode("utf-8")

    def close(self):
        self.closed = True


def wait_until(predicate, timeout=3.0, interval=0.005):
    """Poll predicate until true; fail the test on timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    raise AssertionError("Condition not reached within timeout")


@pytest.fixture
def state():
    s = SharedState()
    yield s
    s.shutdown()


@pytest.fixture
def buffer(state):
    return SerialLineBuffer(lock=state.lock)


@pytest.fixture
def port():
    return FakePort()


@pytest.fixture
def audio():
    return FakeAudio()


@pytest.fixture
def sounds():
    return FakeSounds()


@pytest.fixture
def buttons():
    return {Team.A: FakeButton(), Team.B: FakeButton()}


@pytest.fixture
def leds():
    return {Team.A: FakeLed(), Team.B: FakeLed()}
