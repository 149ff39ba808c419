"""Protocol for the log-manager collaborator."""

from datetime import date
from typing import Optional, Protocol, Sequence, runtime_checkable

from logscope.models.log_entry import LogEntry


@runtime_checkable
class LogManagerProtocol(Protocol):
    """Read-only source of log entries, in chronological order."""

    def current_logs(self) -> Sequence[LogEntry]:
        """Return the in-memory log buffer of the current process session."""
        ...

    def logs_for_date(self, day: date) -> Optional[Sequence[LogEntry]]:
        """Return entries persisted for ``day``, or None when there are none."""
        ...


_log_manager: Optional[LogManagerProtocol] = None


def register_log_manager(manager: LogManagerProtocol) -> None:
    """Register the process-wide default log manager."""
    global _log_manager
    _log_manager = manager


def get_log_manager() -> Optional[LogManagerProtocol]:
    """Get the registered log manager."""
    return _log_manager
