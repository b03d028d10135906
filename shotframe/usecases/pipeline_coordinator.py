from __future__ import annotations

"""Coordinator sequencing framing, combining and view-state updates without UI concerns."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from ..domain.entities import (
    CombinedResult,
    DisplayMode,
    DroppedItems,
    ExistingScreenshots,
    ImageQuality,
    PhotoSource,
    PickerSelection,
    Screenshot,
)
from ..domain.errors import CombineCanceled, PipelineError, UnsupportedImageError
from ..domain.ports import (
    DecoderPort,
    EncoderPort,
    FilesPort,
    LibraryPort,
    RendererPort,
    ReviewPromptPort,
    SelectionLoaderPort,
    SettingsPort,
    TempWriterPort,
)
from ..domain.result_store import ResultStore
from ..domain.view_state import (
    CombinedPlaceholder,
    IndividualPlaceholder,
    ViewState,
    derive_state,
)
from .auto_save import AutoDeleteSources, AutoSaveResults, SleepFn, TOAST_DELAY_S
from .combine_images import CombineTask
from .frame_screenshots import FrameScreenshot
from .review_prompt import AskForReview


def _noop(*_: object, **__: object) -> None:
    """Default no-op callback used for hooks."""


@dataclass
class PipelineHooks:
    """Optional callbacks fired whenever observable pipeline state changes."""

    on_view_state: Callable[[ViewState], None] = _noop
    on_mode: Callable[[DisplayMode], None] = _noop
    on_loading: Callable[[bool], None] = _noop
    on_toast: Callable[[Optional[str]], None] = _noop
    on_error: Callable[[BaseException], None] = _noop

    def __post_init__(self) -> None:
        self.on_view_state = self.on_view_state or _noop
        self.on_mode = self.on_mode or _noop
        self.on_loading = self.on_loading or _noop
        self.on_toast = self.on_toast or _noop
        self.on_error = self.on_error or _noop


class PipelineCoordinator:
    """Owns the result store, the display mode and the single combine task.

    Every public coroutine must run on the same event loop; the loop is the
    only context that mutates pipeline state. Two counters guard resumptions
    after a suspension point: ``_run_generation`` (a newer selection or a
    clear supersedes a run) and ``_mode_generation`` (a mode toggle
    supersedes a pending combined resolution).
    """

    def __init__(
        self,
        *,
        settings: SettingsPort,
        frame_screenshot: FrameScreenshot,
        encoder: EncoderPort,
        writer: TempWriterPort,
        decoder: DecoderPort,
        auto_save: AutoSaveResults,
        auto_delete: AutoDeleteSources,
        ask_for_review: AskForReview,
        loader: Optional[SelectionLoaderPort] = None,
        hooks: Optional[PipelineHooks] = None,
    ) -> None:
        self.settings = settings
        self.frame_screenshot = frame_screenshot
        self.encoder = encoder
        self.writer = writer
        self.decoder = decoder
        self.auto_save = auto_save
        self.auto_delete = auto_delete
        self.ask_for_review = ask_for_review
        self.loader = loader
        self.hooks = hooks or PipelineHooks()
        self._log = logging.getLogger(__name__)

        self.store = ResultStore()
        self.mode: DisplayMode = DisplayMode.INDIVIDUAL
        self.view_state: ViewState = IndividualPlaceholder()
        self.is_loading = False
        self.last_error: Optional[BaseException] = None
        self._quality: ImageQuality = settings.image_quality
        self._combine_task: Optional[CombineTask] = None
        self._source_ids: Tuple[str, ...] = ()
        self._run_generation = 0
        self._mode_generation = 0

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------
    @property
    def combine_task(self) -> Optional[CombineTask]:
        return self._combine_task

    @property
    def combine_in_flight(self) -> bool:
        task = self._combine_task
        return task is not None and not task.done

    @property
    def quality(self) -> ImageQuality:
        """Quality the current results were (or are being) rendered with."""
        return self._quality

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------
    async def process_selection(self, source: PhotoSource, *, reset_view: bool) -> None:
        """
        Run the whole pipeline for ``source``.

        Render failures propagate. A combine failure while combined mode is
        shown surfaces as ``UnsupportedImageError`` after the post-processing
        side effects ran.
        """
        self._run_generation += 1
        run = self._run_generation
        self._log.info("Starting processing selected photos")
        self._set_loading(True)
        try:
            await self._process(source, reset_view=reset_view, run=run)
        finally:
            self._log.info("Ending processing selected photos.")
            if self._is_current(run):
                self._set_loading(False)

    async def toggle_mode(self, mode: DisplayMode) -> None:
        """Switch the display mode; waits once for a pending composite if needed."""
        self._set_mode(mode)
        if mode is DisplayMode.INDIVIDUAL:
            self._refresh_view_state()
            return

        if self.store.valid_combined is not None:
            self._log.info("Using cached combined image.")
            self._refresh_view_state()
            return

        self._publish(CombinedPlaceholder())
        task = self._combine_task
        if task is None:
            return
        error = await self._await_combined(task, run=self._run_generation)
        if error is not None:
            self._report(error)

    async def change_quality(self, quality: Optional[ImageQuality] = None) -> bool:
        """Replay the stored inputs if the image quality changed.

        Returns ``True`` when a replay ran.
        """
        new_quality = quality if quality is not None else self.settings.image_quality
        if new_quality == self._quality:
            return False

        self._log.info("Re-running pipeline due to image quality change.")
        self._quality = new_quality
        self.settings.image_quality = new_quality

        task = self._combine_task
        if task is not None:
            try:
                await task.wait()
            except PipelineError as exc:
                self._log.debug("Previous combined image task ended with %s.", exc.code)

        inputs = self.store.original_inputs
        if not inputs:
            self._log.info("No original screenshots to re-run.")
            return False
        await self.process_selection(ExistingScreenshots(inputs), reset_view=False)
        return True

    def clear_all(self) -> None:
        """Drop every result and return to the empty individual view."""
        self._run_generation += 1
        self._stop_combine_task()
        self.store.reset()
        self._source_ids = ()
        self._set_mode(DisplayMode.INDIVIDUAL)
        self._publish(IndividualPlaceholder())
        self._set_loading(False)

    # ------------------------------------------------------------------
    # Pipeline steps
    # ------------------------------------------------------------------
    async def _process(self, source: PhotoSource, *, reset_view: bool, run: int) -> None:
        self._stop_combine_task()

        screenshots = await self._get_screenshots(source)
        if not self._is_current(run):
            self._log.info("Selection superseded while loading photos.")
            return
        if not screenshots:
            self._log.info("Selection produced no screenshots.")
            return

        if reset_view:
            self._log.info("Resetting view state, display mode, and removing image results.")
            self.store.reset()
            self._set_mode(DisplayMode.INDIVIDUAL)
            self._publish(IndividualPlaceholder())

        if isinstance(source, PickerSelection):
            self._source_ids = source.item_ids
        else:
            self._source_ids = ()

        if not await self._render_all(screenshots, run):
            return

        self._refresh_view_state()
        self._set_loading(False)

        if not self.store.has_results:
            self._log.critical("Returning early because the store has no results.")
            return

        combine_error: Optional[PipelineError] = None
        task = self._combine_results()
        if self.mode is DisplayMode.COMBINED and task is not None:
            self._log.debug("Waiting for combined image task.")
            combine_error = await self._await_combined(task, run=run)
        if not self._is_current(run):
            return

        await self._post_process(run)

        if combine_error is not None:
            raise combine_error

    async def _render_all(self, screenshots: Sequence[Screenshot], run: int) -> bool:
        """Frame ``screenshots`` in order. Returns ``False`` if superseded."""
        self.store.set_inputs(screenshots)
        quality = self.settings.image_quality
        try:
            for index, screenshot in enumerate(screenshots):
                result = await self.frame_screenshot(screenshot, index, quality)
                if not self._is_current(run):
                    self._log.info("Selection superseded while rendering.")
                    return False
                self.store.append_individual_result(result)
                self.settings.render_count += 1
        except Exception as exc:
            if not self._is_current(run):
                self._log.info("Ignoring render failure of a superseded selection: %s", exc)
                return False
            self.store.set_inputs(screenshots)
            self._refresh_view_state()
            raise
        self._quality = quality
        self._log.debug(
            "Stored %d framed results.", len(self.store.individual_results)
        )
        return True

    async def _post_process(self, run: int) -> None:
        await self.auto_save(
            self.store.individual_results,
            on_toast=self.hooks.on_toast,
            on_error=self._report,
        )
        if not self._is_current(run):
            return
        await self.auto_delete(self._source_ids, on_error=self._report)
        self.ask_for_review()

    async def _get_screenshots(self, source: PhotoSource) -> List[Screenshot]:
        if isinstance(source, PickerSelection):
            self._log.info("Fetching images from the photos picker.")
            if self.loader is None:
                raise RuntimeError("No selection loader configured.")
            return list(await self.loader.load(source))
        if isinstance(source, DroppedItems):
            self._log.info("Using dropped photos (%d).", len(source.blobs))
            screenshots = []
            for blob in source.blobs:
                try:
                    screenshots.append(self.decoder.decode(blob))
                except UnsupportedImageError as exc:
                    self._log.warning("Skipping undecodable dropped item: %s", exc)
            return screenshots
        if isinstance(source, ExistingScreenshots):
            self._log.info("Using existing screenshots (%d).", len(source.screenshots))
            return list(source.screenshots)
        raise TypeError(f"Unsupported photo source: {type(source).__name__}")

    # ------------------------------------------------------------------
    # Combine task lifecycle
    # ------------------------------------------------------------------
    def _combine_results(self) -> Optional[CombineTask]:
        """Start combining if there are multiple results; replaces any older task."""
        if not self.store.has_multiple_results:
            return None
        self._stop_combine_task()
        self._combine_task = CombineTask.start(
            [result.image for result in self.store.individual_results],
            encoder=self.encoder,
            writer=self.writer,
            generation=self.store.generation,
            on_complete=self._store_combined,
        )
        return self._combine_task

    def _store_combined(self, task: CombineTask, combined: CombinedResult) -> None:
        """Hand-off from a finished task, executed on the coordinating loop."""
        if task is not self._combine_task or task.canceled:
            self._log.info("Dropping result of a replaced combined image task.")
            return
        if not self.store.set_combined(combined, task.generation):
            self._log.info("Dropping combined image built from outdated results.")

    async def _await_combined(self, task: CombineTask, *, run: int) -> Optional[PipelineError]:
        """Wait for ``task`` and show its composite if still relevant.

        Returns the error to surface, if any. Cancellation and stale
        resolutions are dropped silently.
        """
        mode_generation = self._mode_generation
        try:
            await task.wait()
        except CombineCanceled:
            self._log.debug("Combined image task was canceled.")
            return None
        except PipelineError as exc:
            if self._combine_task is task:
                self._combine_task = None
            if not self._still_showing_combined(mode_generation, run):
                self._log.info("Combined image failed after the view moved on: %s", exc)
                return None
            self._log.error("Combined image task failed: %s", exc)
            error = UnsupportedImageError(exc.message)
            error.__cause__ = exc
            return error

        if self._combine_task is task:
            self._combine_task = None
        if not self._still_showing_combined(mode_generation, run):
            self._log.info("ViewState has changed, no need to switch view state.")
            return None
        if self.store.valid_combined is None:
            self._log.critical("Combined result missing after task completion.")
            return UnsupportedImageError("Combined image is unavailable.")
        self._refresh_view_state()
        return None

    def _stop_combine_task(self) -> None:
        task = self._combine_task
        self._combine_task = None
        if task is not None:
            task.cancel()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _is_current(self, run: int) -> bool:
        return run == self._run_generation

    def _still_showing_combined(self, mode_generation: int, run: int) -> bool:
        return (
            mode_generation == self._mode_generation
            and self.mode is DisplayMode.COMBINED
            and self._is_current(run)
        )

    def _set_mode(self, mode: DisplayMode) -> None:
        self._mode_generation += 1
        if mode is not self.mode:
            self._log.info("Display mode switched to %s.", mode.value)
        self.mode = mode
        self.hooks.on_mode(mode)

    def _refresh_view_state(self) -> None:
        self._publish(derive_state(self.mode, self.store, self.combine_in_flight))

    def _publish(self, state: ViewState) -> None:
        if state == self.view_state:
            return
        self.view_state = state
        self._log.info("ViewState switched to %s.", type(state).__name__)
        self.hooks.on_view_state(state)

    def _set_loading(self, loading: bool) -> None:
        if loading == self.is_loading:
            return
        self.is_loading = loading
        self.hooks.on_loading(loading)

    def _report(self, exc: BaseException) -> None:
        self.last_error = exc
        self.hooks.on_error(exc)


def build_coordinator(
    *,
    settings: SettingsPort,
    renderer: RendererPort,
    encoder: EncoderPort,
    writer: TempWriterPort,
    decoder: DecoderPort,
    files: FilesPort,
    library: LibraryPort,
    review_prompt: ReviewPromptPort,
    loader: Optional[SelectionLoaderPort] = None,
    hooks: Optional[PipelineHooks] = None,
    sleep: SleepFn = asyncio.sleep,
    toast_delay_s: float = TOAST_DELAY_S,
) -> PipelineCoordinator:
    """Wire the default use-cases around the given ports."""
    return PipelineCoordinator(
        settings=settings,
        frame_screenshot=FrameScreenshot(renderer=renderer, encoder=encoder, writer=writer),
        encoder=encoder,
        writer=writer,
        decoder=decoder,
        auto_save=AutoSaveResults(
            settings=settings,
            files=files,
            library=library,
            sleep=sleep,
            toast_delay_s=toast_delay_s,
        ),
        auto_delete=AutoDeleteSources(settings=settings, library=library),
        ask_for_review=AskForReview(settings=settings, prompt=review_prompt),
        loader=loader,
        hooks=hooks,
    )


__all__ = [
    "PipelineCoordinator",
    "PipelineHooks",
    "build_coordinator",
]
