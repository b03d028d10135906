from __future__ import annotations

from pathlib import Path

import pytest

from shotframe.domain.entities import CombinedResult, FramedResult
from shotframe.domain.result_store import ResultStore
from shotframe.tests.unit.helpers import make_image, make_screenshots


def _framed(index: int) -> FramedResult:
    return FramedResult(image=make_image(10, 10), path=Path(f"framed-{index}.png"))


def _combined() -> CombinedResult:
    return CombinedResult(image=make_image(20, 10), path=Path("combined.png"))


def _populated(count: int) -> ResultStore:
    store = ResultStore()
    store.set_inputs(make_screenshots(count))
    for i in range(count):
        store.append_individual_result(_framed(i))
    return store


def test_reset_clears_every_field() -> None:
    store = _populated(2)
    store.set_combined(_combined(), store.generation)

    store.reset()

    assert store.original_inputs == ()
    assert store.individual_results == ()
    assert store.combined_result is None
    assert not store.has_results


def test_append_never_exceeds_inputs() -> None:
    store = _populated(1)

    with pytest.raises(ValueError):
        store.append_individual_result(_framed(1))
    assert len(store.individual_results) == 1
    assert store.is_complete


def test_combined_requires_two_results() -> None:
    store = _populated(1)

    assert store.set_combined(_combined(), store.generation) is False
    assert store.combined_result is None


def test_combined_invalid_after_results_change() -> None:
    store = _populated(2)
    combined = _combined()
    assert store.set_combined(combined, store.generation)
    assert store.valid_combined is combined

    store.set_inputs(make_screenshots(2))
    store.append_individual_result(_framed(0))
    store.append_individual_result(_framed(1))

    assert store.combined_result is combined
    assert store.valid_combined is None


def test_stale_generation_is_rejected() -> None:
    store = _populated(2)
    old_generation = store.generation
    store.set_inputs(make_screenshots(2))
    store.append_individual_result(_framed(0))
    store.append_individual_result(_framed(1))

    assert store.set_combined(_combined(), old_generation) is False
    assert store.valid_combined is None


def test_set_inputs_with_single_input_drops_composite() -> None:
    store = _populated(2)
    store.set_combined(_combined(), store.generation)

    store.set_inputs(make_screenshots(1))
    store.append_individual_result(_framed(0))

    assert store.combined_result is None
