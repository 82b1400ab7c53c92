"""
QuizBuzz Application Controller

Top-level controller that wires together all application components.
"""

import logging
import threading
from typing import Optional

from PySide6.QtCore import QObject

from config import AppSettings, PATHS
from engine.arbiter import BuzzerArbiter
from engine.display_mirror import DisplayMirror
from engine.line_buffer import SerialLineBuffer, SerialReceiver
from engine.protocol import ConsoleProtocolHandler
from engine.round_machine import RoundStateMachine
from engine.state import SharedState
from engine.workers import PollingWorker
from hardware.audio import SoundLibrary
from services.event_bus import EventBus

logger = logging.getLogger(__name__)


class BuzzerApp(QObject):
    """
    Top-level application controller.
    Owns the shared state and starts one thread per task:

    - buzzer:   BuzzerArbiter.poll every 100ms
    - serial:   SerialReceiver.poll (bytes -> line buffer)
    - console:  ConsoleProtocolHandler.service (prompts out, lines in)
    - rounds:   RoundStateMachine.run
    - display:  DisplayMirror.refresh every 500ms

    Usage:
        app = BuzzerApp(settings, port, buttons, leds, audio, display)
        app.start()
        app.wait()
    """

    def __init__(
        self,
        settings: AppSettings,
        port,
        buttons: dict,
        leds: dict,
        audio,
        display,
        sounds: Optional[SoundLibrary] = None,
        event_bus: Optional[EventBus] = None,
    ):
        super().__init__()
        self.settings = settings
        self.port = port

        # Core services
        self.event_bus = event_bus or EventBus()
        self.state = SharedState()
        self.sounds = sounds or SoundLibrary(PATHS.sounds, settings.sounds.clips())

        # Components
        self.line_buffer = SerialLineBuffer(lock=self.state.lock)
        self.receiver = SerialReceiver(port, self.line_buffer)
        self.console = ConsoleProtocolHandler(
            self.state, self.line_buffer, port,
            event_bus=self.event_bus,
            max_points=settings.game.max_points,
        )
        self.arbiter = BuzzerArbiter(
            self.state, buttons, leds, audio, self.sounds,
            event_bus=self.event_bus,
        )
        self.machine = RoundStateMachine(
            self.state, audio, self.sounds,
            win_threshold=settings.game.win_threshold,
            event_bus=self.event_bus,
        )
        self.mirror = DisplayMirror(self.state, display, width=settings.display.cols)

        self._threads: list[threading.Thread] = []
        self.error: Optional[BaseException] = None

    def start(self) -> None:
        """Start every task."""
        if self._threads:
            raise RuntimeError("QuizBuzz is already running")

        poll = self.settings.poll
        shutdown = self.state.shutdown_event
        self._threads = [
            PollingWorker("serial", self.receiver.poll, poll.serial_interval_ms,
                          shutdown, self._on_worker_error),
            PollingWorker("console", self.console.service, poll.console_interval_ms,
                          shutdown, self._on_worker_error),
            PollingWorker("buzzer", self.arbiter.poll, poll.buzzer_interval_ms,
                          shutdown, self._on_worker_error),
            PollingWorker("display", self.mirror.refresh, poll.display_interval_ms,
                          shutdown, self._on_worker_error),
            threading.Thread(target=self._run_rounds, name="rounds", daemon=True),
        ]
        for thread in self._threads:
            thread.start()
        logger.info("QuizBuzz running with %d tasks", len(self._threads))

    def _run_rounds(self) -> None:
        try:
            self.machine.run()
        except Exception as exc:
            logger.exception("Round task crashed")
            self._on_worker_error(exc)
            raise

    def _on_worker_error(self, exc: BaseException) -> None:
        """A task died: stop the others so the game does not hang half-alive."""
        self.error = exc
        self.event_bus.emit_message("error", f"{type(exc).__name__}: {exc}")
        self.state.shutdown()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the game is over (or stopped).

        Returns:
            True if every task has finished
        """
        self.state.shutdown_event.wait(timeout)
        for thread in self._threads:
            thread.join(timeout=2.0)
        finished = not any(thread.is_alive() for thread in self._threads)
        if finished:
            self.mirror.refresh()
        return finished

    def stop(self) -> None:
        """Stop all tasks and release the console link, buttons and lights."""
        self.state.shutdown()
        self.wait(timeout=0)
        self.arbiter.lights_off()
        self.port.close()
        for device in [*self.arbiter.buttons.values(), *self.arbiter.leds.values()]:
            device.close()
        logger.info("QuizBuzz stopped")

    @property
    def is_running(self) -> bool:
        return any(thread.is_alive() for thread in self._threads)
