from __future__ import annotations

from pathlib import Path

from shotframe.domain.entities import CombinedResult, DisplayMode, FramedResult
from shotframe.domain.result_store import ResultStore
from shotframe.domain.view_state import (
    CombinedPlaceholder,
    CombinedResults,
    IndividualPlaceholder,
    IndividualResults,
    derive_state,
)
from shotframe.tests.unit.helpers import make_image, make_screenshots


def _store(count: int) -> ResultStore:
    store = ResultStore()
    store.set_inputs(make_screenshots(count))
    for i in range(count):
        store.append_individual_result(
            FramedResult(image=make_image(10, 10), path=Path(f"{i}.png"))
        )
    return store


def test_individual_mode_empty_store_is_placeholder() -> None:
    assert derive_state(DisplayMode.INDIVIDUAL, ResultStore()) == IndividualPlaceholder()


def test_individual_mode_shows_results_in_order() -> None:
    store = _store(3)

    state = derive_state(DisplayMode.INDIVIDUAL, store)

    assert isinstance(state, IndividualResults)
    assert state.results == store.individual_results


def test_combined_mode_without_composite_is_placeholder() -> None:
    store = _store(2)

    assert derive_state(DisplayMode.COMBINED, store, True) == CombinedPlaceholder()
    assert derive_state(DisplayMode.COMBINED, store, False) == CombinedPlaceholder()


def test_combined_mode_with_valid_composite() -> None:
    store = _store(2)
    combined = CombinedResult(image=make_image(20, 10), path=Path("c.png"))
    store.set_combined(combined, store.generation)

    assert derive_state(DisplayMode.COMBINED, store) == CombinedResults(combined)


def test_stale_composite_is_not_shown() -> None:
    store = _store(2)
    store.set_combined(CombinedResult(image=make_image(20, 10), path=Path("c.png")), store.generation)
    store.set_inputs(make_screenshots(2))

    assert derive_state(DisplayMode.COMBINED, store) == CombinedPlaceholder()


def test_derive_state_is_idempotent() -> None:
    store = _store(2)

    for mode in DisplayMode:
        assert derive_state(mode, store) == derive_state(mode, store)
