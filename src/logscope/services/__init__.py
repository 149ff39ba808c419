"""
Filtering and orchestration services.
"""

from .filter_engine import FilterEngine, Predicate, keyword_predicate
from .log_session import LogSession, discover_options

__all__ = [
    "FilterEngine",
    "Predicate",
    "keyword_predicate",
    "LogSession",
    "discover_options",
]
