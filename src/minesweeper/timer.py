"""
Periodic tick source for the game clock.

The engine only reads elapsed time on a tick; it never mutates the
board from one, so a background thread is enough here.
"""
import threading
from typing import Callable


class PeriodicTimer:
    """
    Calls a function every `interval` seconds on a daemon thread
    until cancelled.
    """

    def __init__(self, interval: float, callback: Callable[[], None]) -> None:
        self.interval = interval
        self.callback = callback
        self._stopped = threading.Event()
        self._thread = threading.Thread(
            target=self._run, name="minesweeper-timer", daemon=True
        )

    def start(self) -> None:
        self._thread.start()

    def cancel(self) -> None:
        """Stop ticking. A tick already in flight still completes."""
        self._stopped.set()

    @property
    def active(self) -> bool:
        return self._thread.is_alive() and not self._stopped.is_set()

    def _run(self) -> None:
        while not self._stopped.wait(self.interval):
            self.callback()
