"""Reusable trailing debounce executor."""

import logging
from typing import Callable, Optional

from PyQt6.QtCore import QTimer

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 0.3


class DebouncedExecutor:
    """
    Trailing debounce over arbitrary actions.

    Each call replaces the pending action and restarts the quiet interval.
    The latest action runs exactly once after ``interval`` seconds pass with
    no further calls. A call after the action fired opens a fresh window.

    Must be used from a thread running a Qt event loop.

    Usage:
        self._debounce = DebouncedExecutor(interval=0.3)

        def on_text_changed(self, text):
            self._debounce.execute(lambda: self._run_search(text))
    """

    def __init__(self, interval: float = DEFAULT_INTERVAL):
        if interval < 0:
            raise ValueError(f"Debounce interval must be non-negative, got {interval}")
        self._interval = interval
        self._pending: Optional[Callable[[], None]] = None
        self._timer = QTimer()
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._fire)

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_pending(self) -> bool:
        return self._pending is not None

    def execute(self, action: Callable[[], None]):
        """Schedule ``action``, cancelling whatever was pending."""
        if self._pending is not None:
            logger.debug("Debounce rescheduled before firing")
        self._pending = action
        self._timer.start(int(round(self._interval * 1000)))

    def cancel(self):
        """Drop the pending action without running it."""
        self._timer.stop()
        self._pending = None

    def flush(self):
        """Run the pending action now, if any."""
        self._timer.stop()
        self._fire()

    def _fire(self):
        action, self._pending = self._pending, None
        if action is not None:
            action()
