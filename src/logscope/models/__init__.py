"""Log inspection data model."""

from .log_entry import LogEntry, LogFlag, MISSING_MESSAGE_PLACEHOLDER
from .selected_option import ALL, SelectedOption, build_options, normalize_options
from .filter_criteria import FilterCriteria, TimeWindow

__all__ = [
    "LogEntry",
    "LogFlag",
    "MISSING_MESSAGE_PLACEHOLDER",
    "ALL",
    "SelectedOption",
    "build_options",
    "normalize_options",
    "FilterCriteria",
    "TimeWindow",
]
