"""
Predicate-chain filtering over the authoritative log set.

Filtering is pure: inputs are never mutated and the relative order of
the surviving entries is preserved.
"""

import logging
from typing import Callable, Iterable, List, Optional, Sequence

from logscope.models.filter_criteria import FilterCriteria, TimeWindow
from logscope.models.log_entry import LogEntry

logger = logging.getLogger(__name__)

Predicate = Callable[[LogEntry], bool]


def time_predicate(window: TimeWindow) -> Predicate:
    start, end = window.start, window.end
    return lambda entry: start <= entry.timestamp <= end


def keyword_predicate(keyword: str) -> Predicate:
    """Case-sensitive literal substring match on the sanitized message."""
    return lambda entry: keyword in entry.safe_message


def membership_predicate(attribute: str, allowed: Iterable) -> Predicate:
    allowed = frozenset(allowed)
    return lambda entry: getattr(entry, attribute) in allowed


class FilterEngine:
    """
    Produces the displayed subset from a criteria snapshot.

    Predicates are combined with logical AND:
    - time window, always present
    - keyword, when the keyword is non-empty
    - flag membership, when the match-all flag option is not selected
    - module membership, when the match-all module option is not selected
    """

    def build_predicates(self, criteria: FilterCriteria) -> List[Predicate]:
        predicates = [time_predicate(criteria.time_window)]

        if criteria.keyword:
            predicates.append(keyword_predicate(criteria.keyword))

        if criteria.flag_filter_active:
            predicates.append(membership_predicate("flag", criteria.selected_flags()))

        if criteria.module_filter_active:
            predicates.append(membership_predicate("module", criteria.selected_modules()))

        return predicates

    def apply(self, criteria: FilterCriteria, logs: Optional[Sequence[LogEntry]]) -> List[LogEntry]:
        """
        Filter ``logs`` by ``criteria``.

        Args:
            criteria: Active filter dimensions
            logs: Authoritative set, None is treated as empty

        Returns:
            New list of matching entries in input order
        """
        return self._run(self.build_predicates(criteria), logs)

    def search(self, keyword: Optional[str], logs: Optional[Sequence[LogEntry]]) -> List[LogEntry]:
        """Keyword-only query, ignoring every other dimension."""
        predicates = [keyword_predicate(keyword)] if keyword else []
        return self._run(predicates, logs)

    @staticmethod
    def _run(predicates: List[Predicate], logs: Optional[Sequence[LogEntry]]) -> List[LogEntry]:
        if not logs:
            return []
        if not predicates:
            return list(logs)
        result = [entry for entry in logs if all(p(entry) for p in predicates)]
        logger.debug(f"Filtered {len(logs)} entries to {len(result)} with {len(predicates)} predicates")
        return result
