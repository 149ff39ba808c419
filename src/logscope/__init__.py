"""
logscope: in-memory log inspection engine for PyQt6 applications.

Maintains a queryable view over a day's worth of log records, filtered by
time window, keyword, flag and module, while keeping the UI responsive.

Architecture:
- Tier 1 (Models): LogEntry, SelectedOption, FilterCriteria value types
- Tier 2 (Core): Debounce executor and serial background worker on QtCore
- Tier 3 (Protocols): Log-manager contract and session configuration
- Tier 4 (Services): FilterEngine and the LogSession orchestrator

Key Features:
- Composable predicate chain, pure and order-preserving
- Trailing debounce for live-typing previews, immediate dispatch for commits
- Single worker context, completion callbacks on the presentation thread
- Capture of the application's own logging output
"""

__version__ = "0.1.0"

from logscope.models import (
    ALL,
    FilterCriteria,
    LogEntry,
    LogFlag,
    SelectedOption,
    TimeWindow,
)
from logscope.protocols import (
    LogManagerProtocol,
    LogSessionConfig,
    get_log_manager,
    get_session_config,
    register_log_manager,
    set_session_config,
)
from logscope.core import DebouncedExecutor, SerialTaskRunner
from logscope.services import FilterEngine, LogSession
from logscope.sources import InMemoryLogManager, LogCaptureHandler

__all__ = [
    "__version__",
    "ALL",
    "FilterCriteria",
    "LogEntry",
    "LogFlag",
    "SelectedOption",
    "TimeWindow",
    "LogManagerProtocol",
    "LogSessionConfig",
    "get_log_manager",
    "get_session_config",
    "register_log_manager",
    "set_session_config",
    "DebouncedExecutor",
    "SerialTaskRunner",
    "FilterEngine",
    "LogSession",
    "InMemoryLogManager",
    "LogCaptureHandler",
]
