"""Selectable filter choices with a reserved match-all sentinel."""

from dataclasses import dataclass
from typing import Generic, Iterable, List, TypeVar

T = TypeVar("T")


class _AllSentinel:
    """Value carried by the match-all option."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ALL"

    def __reduce__(self):
        return (_AllSentinel, ())


ALL = _AllSentinel()


@dataclass
class SelectedOption(Generic[T]):
    """A filter choice and whether the user selected it."""
    value: T
    is_selected: bool = False

    @classmethod
    def all(cls, is_selected: bool = True) -> "SelectedOption":
        """Create the match-all option."""
        return cls(value=ALL, is_selected=is_selected)

    @property
    def is_all(self) -> bool:
        return self.value is ALL


def build_options(values: Iterable[T]) -> List[SelectedOption]:
    """
    Build an option list from observed values.

    Values are deduplicated and sorted ascending. The selected match-all
    option is inserted at index 0; all other options start unselected.
    """
    options: List[SelectedOption] = [SelectedOption.all()]
    options.extend(SelectedOption(value) for value in sorted(set(values)))
    return options


def normalize_options(options: Iterable[SelectedOption]) -> List[SelectedOption]:
    """
    Copy an externally supplied option list, guaranteeing the sentinel at index 0.

    A list that does not start with the match-all option gets one prepended,
    selected only when none of the supplied options is. Stray sentinels
    further down the list are dropped.
    """
    copied = [SelectedOption(option.value, option.is_selected) for option in options]
    if copied and copied[0].is_all:
        head, rest = copied[0], copied[1:]
    else:
        head, rest = None, copied
    rest = [option for option in rest if not option.is_all]
    if head is None:
        head = SelectedOption.all(not any(option.is_selected for option in rest))
    return [head, *rest]
