"""Configuration for log sessions.

Provides hooks for applications to tune debouncing and worker behavior.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class LogSessionConfig:
    """Base configuration for log inspection sessions.

    Attributes:
        debounce_interval: Quiet interval in seconds for debounced refreshes
        search_debounce_interval: Quiet interval for debounced searches,
            falls back to debounce_interval when None
        worker_wait_ms: How long close() waits for background work to drain
        capture_buffer_size: Default bound of the in-memory capture buffer
    """

    debounce_interval: float = 0.3
    search_debounce_interval: Optional[float] = None
    worker_wait_ms: int = 2000
    capture_buffer_size: int = 10000

    def __post_init__(self):
        if self.debounce_interval < 0:
            raise ValueError(f"debounce_interval must be non-negative, got {self.debounce_interval}")
        if self.search_debounce_interval is not None and self.search_debounce_interval < 0:
            raise ValueError(
                f"search_debounce_interval must be non-negative, got {self.search_debounce_interval}"
            )

    @property
    def effective_search_interval(self) -> float:
        if self.search_debounce_interval is None:
            return self.debounce_interval
        return self.search_debounce_interval


# Global config instance (set by application)
_session_config: Optional[LogSessionConfig] = None


def set_session_config(config: Optional[LogSessionConfig]) -> None:
    """Set the global session configuration.

    Args:
        config: LogSessionConfig instance, or None to restore defaults
    """
    global _session_config
    _session_config = config


def get_session_config() -> LogSessionConfig:
    """Get the current session configuration.

    Returns:
        Current LogSessionConfig or default if not set
    """
    if _session_config is None:
        return LogSessionConfig()
    return _session_config
