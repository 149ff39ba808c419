"""Aggregate of the active filter dimensions."""

import math
from dataclasses import dataclass, field
import datetime
from typing import Any, List, Optional, Set

from logscope.models.selected_option import SelectedOption


@dataclass(frozen=True)
class TimeWindow:
    """Inclusive timestamp interval, optionally tied to a calendar date."""
    start: float
    end: float
    date: Optional[datetime.date] = None

    @classmethod
    def unbounded(cls) -> "TimeWindow":
        """Window covering every timestamp, not tied to a date."""
        return cls(-math.inf, math.inf)

    @classmethod
    def for_date(cls, day: datetime.date) -> "TimeWindow":
        """Window from local midnight to the last microsecond of ``day``."""
        start = datetime.datetime.combine(day, datetime.time.min).timestamp()
        end = datetime.datetime.combine(day, datetime.time.max).timestamp()
        return cls(start, end, day)

    def contains(self, timestamp: float) -> bool:
        return self.start <= timestamp <= self.end


def _selected_values(options: List[SelectedOption]) -> Set[Any]:
    return {option.value for option in options[1:] if option.is_selected}


def _restricts(options: List[SelectedOption]) -> bool:
    # Empty list or selected sentinel means no restriction
    return bool(options) and not options[0].is_selected


@dataclass
class FilterCriteria:
    """
    Active time window, keyword, flag selection and module selection.

    ``flag_options[0]`` and ``module_options[0]`` are always the match-all
    sentinel. When the sentinel is selected the dimension is unrestricted;
    otherwise entries must match one of the other selected options.
    """
    time_window: TimeWindow = field(default_factory=TimeWindow.unbounded)
    keyword: Optional[str] = None
    flag_options: List[SelectedOption] = field(default_factory=lambda: [SelectedOption.all()])
    module_options: List[SelectedOption] = field(default_factory=lambda: [SelectedOption.all()])

    @property
    def date(self) -> Optional[datetime.date]:
        return self.time_window.date

    @property
    def flag_filter_active(self) -> bool:
        return _restricts(self.flag_options)

    @property
    def module_filter_active(self) -> bool:
        return _restricts(self.module_options)

    def selected_flags(self) -> Set[str]:
        return _selected_values(self.flag_options)

    def selected_modules(self) -> Set[str]:
        return _selected_values(self.module_options)

    def copy(self) -> "FilterCriteria":
        """Snapshot with independent option lists."""
        return FilterCriteria(
            time_window=self.time_window,
            keyword=self.keyword,
            flag_options=[SelectedOption(o.value, o.is_selected) for o in self.flag_options],
            module_options=[SelectedOption(o.value, o.is_selected) for o in self.module_options],
        )
