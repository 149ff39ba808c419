"""
In-memory log manager and a logging handler that feeds it.

Lets an application inspect its own ``logging`` output through a
LogSession without any persistence layer.
"""

import logging
from collections import deque
from datetime import date
from typing import Dict, Iterable, List, Optional

from PyQt6.QtCore import QMutex, QMutexLocker

from logscope.models.log_entry import LogEntry
from logscope.protocols.session_config import get_session_config

logger = logging.getLogger(__name__)


class InMemoryLogManager:
    """
    Bounded live buffer plus archived days, kept in chronological order.

    Implements LogManagerProtocol. Safe to append from any thread.
    """

    def __init__(self, max_entries: Optional[int] = None):
        if max_entries is None:
            max_entries = get_session_config().capture_buffer_size
        self._buffer: deque = deque(maxlen=max_entries)
        self._archive: Dict[date, List[LogEntry]] = {}
        self._mutex = QMutex()

    @property
    def max_entries(self) -> Optional[int]:
        return self._buffer.maxlen

    def append(self, entry: LogEntry) -> None:
        with QMutexLocker(self._mutex):
            self._buffer.append(entry)

    def extend(self, entries: Iterable[LogEntry]) -> None:
        with QMutexLocker(self._mutex):
            self._buffer.extend(entries)

    def clear(self) -> None:
        """Empty the live buffer; archived days are kept."""
        with QMutexLocker(self._mutex):
            self._buffer.clear()

    def store_day(self, day: date, entries: Iterable[LogEntry]) -> None:
        """Archive entries for ``day``, sorted by timestamp."""
        ordered = sorted(entries, key=lambda entry: entry.timestamp)
        with QMutexLocker(self._mutex):
            self._archive[day] = ordered
        logger.debug(f"Archived {len(ordered)} entries for {day}")

    def dates(self) -> List[date]:
        """Days that have entries, archived or live, ascending."""
        with QMutexLocker(self._mutex):
            days = {day for day, entries in self._archive.items() if entries}
            days.update(entry.date for entry in self._buffer)
        return sorted(days)

    def current_logs(self) -> List[LogEntry]:
        with QMutexLocker(self._mutex):
            return list(self._buffer)

    def logs_for_date(self, day: date) -> Optional[List[LogEntry]]:
        """Archived entries for ``day`` merged with live ones from that day."""
        with QMutexLocker(self._mutex):
            archived = self._archive.get(day, [])
            live = [entry for entry in self._buffer if entry.date == day]
        if archived and live:
            entries = sorted([*archived, *live], key=lambda entry: entry.timestamp)
        else:
            entries = archived or live
        return list(entries) or None


class LogCaptureHandler(logging.Handler):
    """
    Logging handler that appends every record to an InMemoryLogManager.

    Usage:
        manager = InMemoryLogManager()
        logging.getLogger().addHandler(LogCaptureHandler(manager))
        session = LogSession(log_manager=manager)
    """

    def __init__(self, manager: InMemoryLogManager, level: int = logging.NOTSET):
        super().__init__(level)
        self.manager = manager

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.manager.append(LogEntry.from_record(record))
        except Exception:
            self.handleError(record)
