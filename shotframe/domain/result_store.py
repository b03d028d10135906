"""In-memory holder for pipeline outputs.

Call context:
    Only ``PipelineCoordinator`` mutates a store, always from the event loop
    that owns the pipeline. Views read it indirectly through ``derive_state``.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .entities import CombinedResult, FramedResult, Screenshot


class ResultStore:
    """Original inputs, framed results and the cached composite of one run.

    Every change to the individual results bumps ``generation``. The cached
    composite remembers the generation it was built from and only counts as
    valid while that generation is still current.
    """

    def __init__(self) -> None:
        self._original_inputs: List[Screenshot] = []
        self._individual_results: List[FramedResult] = []
        self._combined: Optional[CombinedResult] = None
        self._combined_generation: int = -1
        self.generation: int = 0

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    @property
    def original_inputs(self) -> Tuple[Screenshot, ...]:
        return tuple(self._original_inputs)

    @property
    def individual_results(self) -> Tuple[FramedResult, ...]:
        return tuple(self._individual_results)

    @property
    def combined_result(self) -> Optional[CombinedResult]:
        """Cached composite, possibly stale. ``None`` below two results."""
        if len(self._individual_results) < 2:
            return None
        return self._combined

    @property
    def valid_combined(self) -> Optional[CombinedResult]:
        """Cached composite only if it was built from the current results."""
        combined = self.combined_result
        if combined is None or self._combined_generation != self.generation:
            return None
        return combined

    @property
    def has_results(self) -> bool:
        return bool(self._individual_results)

    @property
    def has_multiple_results(self) -> bool:
        return len(self._individual_results) > 1

    @property
    def is_complete(self) -> bool:
        return bool(self._original_inputs) and len(self._individual_results) == len(
            self._original_inputs
        )

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def reset(self) -> None:
        self._original_inputs = []
        self._individual_results = []
        self._combined = None
        self._combined_generation = -1
        self.generation += 1

    def set_inputs(self, inputs: Sequence[Screenshot]) -> None:
        """Start a new population cycle from ``inputs``.

        Previous framed results are dropped. A previous composite is kept as
        a stale placeholder until a new one replaces it.
        """
        self._original_inputs = list(inputs)
        self._individual_results = []
        if len(self._original_inputs) < 2:
            self._combined = None
            self._combined_generation = -1
        self.generation += 1

    def append_individual_result(self, result: FramedResult) -> None:
        if len(self._individual_results) >= len(self._original_inputs):
            raise ValueError("More framed results than original inputs.")
        self._individual_results.append(result)
        self.generation += 1

    def set_combined(self, combined: CombinedResult, generation: int) -> bool:
        """Cache ``combined`` if it was built from the current generation.

        Returns ``False`` and leaves the cache untouched for stale results.
        """
        if generation != self.generation or not self.has_multiple_results:
            return False
        self._combined = combined
        self._combined_generation = generation
        return True


__all__ = ["ResultStore"]
