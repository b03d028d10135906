from __future__ import annotations

"""Derived UI state for the home screen."""

from dataclasses import dataclass
from typing import Tuple, Union

from .entities import CombinedResult, DisplayMode, FramedResult
from .result_store import ResultStore


@dataclass(frozen=True)
class IndividualPlaceholder:
    """Nothing framed yet."""


@dataclass(frozen=True)
class IndividualResults:
    results: Tuple[FramedResult, ...]


@dataclass(frozen=True)
class CombinedPlaceholder:
    """Combined mode, composite not (yet) available."""


@dataclass(frozen=True)
class CombinedResults:
    result: CombinedResult


ViewState = Union[IndividualPlaceholder, IndividualResults, CombinedPlaceholder, CombinedResults]


def derive_state(mode: DisplayMode, store: ResultStore, combine_in_flight: bool = False) -> ViewState:
    """Map display mode and store contents onto exactly one view state.

    ``combine_in_flight`` does not change the outcome: a composite only counts
    once it is cached for the current results, whether or not a task runs.
    """
    if mode is DisplayMode.INDIVIDUAL:
        if store.has_results:
            return IndividualResults(store.individual_results)
        return IndividualPlaceholder()

    combined = store.valid_combined
    if combined is not None:
        return CombinedResults(combined)
    return CombinedPlaceholder()


__all__ = [
    "CombinedPlaceholder",
    "CombinedResults",
    "IndividualPlaceholder",
    "IndividualResults",
    "ViewState",
    "derive_state",
]
