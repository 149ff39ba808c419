"""
Core Qt utilities.

Scheduling primitives with no log-domain logic: the trailing debounce
executor and the serial background worker.
"""

from .debounce_timer import DebouncedExecutor, DEFAULT_INTERVAL
from .background_task import SerialTaskRunner

__all__ = [
    "DebouncedExecutor",
    "DEFAULT_INTERVAL",
    "SerialTaskRunner",
]
