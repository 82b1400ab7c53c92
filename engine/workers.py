"""
Polling Workers - Background threads that run one task on a fixed cadence.

Each worker ticks until the shared shutdown signal is set. The pause between
ticks is a wait on that signal, so a stopping game ends every loop at once.
"""

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class PollingWorker(threading.Thread):
    """
    Calls tick() every interval_ms until shutdown.

    Usage:
        worker = PollingWorker("display", mirror.refresh, 500, state.shutdown_event)
        worker.start()

        # Later
        state.shutdown()
        worker.join()
    """

    def __init__(
        self,
        name: str,
        tick: Callable[[], object],
        interval_ms: int,
        shutdown: threading.Event,
        on_error: Optional[Callable[[BaseException], None]] = None,
    ):
        """
        Args:
            name: Thread name, used in log output
            tick: One scheduling turn of the task
            interval_ms: Pause between turns in milliseconds
            shutdown: Shared shutdown signal
            on_error: Called with the exception before the worker dies
        """
        super().__init__(name=name, daemon=True)
        self._tick = tick
        self.interval_s = interval_ms / 1000.0
        self._shutdown = shutdown
        self._on_error = on_error
        self.ticks = 0

    def run(self) -> None:
        logger.debug("%s worker started", self.name)
        try:
            while not self._shutdown.is_set():
                self._tick()
                self.ticks += 1
                self._shutdown.wait(self.interval_s)
        except Exception as exc:
            logger.exception("%s worker crashed", self.name)
            if self._on_error is not None:
                self._on_error(exc)
            raise
        logger.debug("%s worker stopped after %d ticks", self.name, self.ticks)
