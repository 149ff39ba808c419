"""Immutable log entry value type."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

MISSING_MESSAGE_PLACEHOLDER = "<no message>"


class LogFlag(str, Enum):
    """Common severity/category tags.

    Entries store flags as plain text, so any tag outside this set is
    equally valid. Members normalize to their value on ingestion.
    """
    DEBUG = "debug"
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


def _sanitize_message(raw_message: Any) -> str:
    if raw_message is None:
        return MISSING_MESSAGE_PLACEHOLDER
    text = str(raw_message).rstrip()
    return text or MISSING_MESSAGE_PLACEHOLDER


@dataclass(frozen=True)
class LogEntry:
    """One log line.

    Attributes:
        timestamp: Seconds since the epoch
        flag: Severity/category tag
        module: Identifier of the originating source component
        raw_message: Message as produced by the source, may be None
        safe_message: Sanitized text used for search and display, never empty
    """
    timestamp: float
    flag: str
    module: str
    raw_message: Optional[str] = None
    safe_message: str = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if isinstance(self.flag, Enum):
            object.__setattr__(self, "flag", self.flag.value)
        object.__setattr__(self, "safe_message", _sanitize_message(self.raw_message))

    @property
    def date(self) -> date:
        """Local calendar date of the entry."""
        return datetime.fromtimestamp(self.timestamp).date()

    @classmethod
    def from_record(cls, record: logging.LogRecord) -> "LogEntry":
        """Build an entry from a standard library log record."""
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            # Mismatched format args; keep the unformatted template
            message = str(record.msg)
        return cls(
            timestamp=record.created,
            flag=record.levelname.lower(),
            module=record.name,
            raw_message=message,
        )
