"""Home screen view-model around ``PipelineCoordinator``.

Call context:
    The composition root builds one ``HomeVM`` per window and binds views to
    its ``on_change`` callback. Every coroutine runs on the UI event loop.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, List, Optional, Sequence

from ..domain.entities import (
    DisplayMode,
    DroppedItems,
    PickerItem,
    PickerSelection,
    SelectionFilter,
)
from ..domain.ports import ClipboardPort, LibraryPort, SettingsPort, UseCaseError
from ..domain.view_state import IndividualPlaceholder, ViewState
from ..usecases.auto_save import toast_text
from ..usecases.error_mapping import map_pipeline_error
from ..usecases.pipeline_coordinator import PipelineCoordinator, PipelineHooks

if TYPE_CHECKING:  # pragma: no cover - type checking helper
    from PIL.Image import Image


class HomeVM:
    """Observable UI state for the home screen plus its command surface."""

    def __init__(
        self,
        *,
        settings: SettingsPort,
        library: LibraryPort,
        clipboard: ClipboardPort,
        coordinator_factory: Callable[[PipelineHooks], PipelineCoordinator],
        on_change: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.settings = settings
        self.library = library
        self.clipboard = clipboard
        self.on_change = on_change
        self._log = logging.getLogger(__name__)

        self.view_state: ViewState = IndividualPlaceholder()
        self.display_mode: DisplayMode = DisplayMode.INDIVIDUAL
        self.is_loading = False
        self.error: Optional[UseCaseError] = None
        self.show_purchase_view = False
        self.show_photos_picker = False
        self.show_auto_save_toast = False
        self.show_copy_toast = False
        self.show_quick_save_toast = False
        self.image_selections: List[PickerItem] = []

        self.coordinator = coordinator_factory(
            PipelineHooks(
                on_view_state=self._on_view_state,
                on_mode=self._on_mode,
                on_loading=self._on_loading,
                on_toast=self._on_toast,
                on_error=self._on_error,
            )
        )

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------
    @property
    def toast_text(self) -> Optional[str]:
        return toast_text(self.settings)

    @property
    def photo_filter(self) -> SelectionFilter:
        return self.settings.selection_filter

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def select_photos(self) -> None:
        """Show the photo picker unless the free tier is used up or work is running."""
        if not self.settings.can_save_result:
            self._set("show_purchase_view", True)
            return
        if self.is_loading:
            self._log.warning("Trying to select photos while in a loading state.")
            return
        self._set("show_photos_picker", True)

    async def image_selections_did_change(self, selections: Sequence[PickerItem]) -> None:
        self.image_selections = list(selections)
        try:
            await self.coordinator.process_selection(
                PickerSelection(tuple(self.image_selections)), reset_view=True
            )
        except Exception as exc:
            self._on_error(exc)

    async def did_drop_items(self, items: Sequence[bytes]) -> None:
        try:
            await self.coordinator.process_selection(DroppedItems(tuple(items)), reset_view=False)
        except Exception as exc:
            self._on_error(exc)

    async def set_display_mode(self, mode: DisplayMode) -> None:
        await self.coordinator.toggle_mode(mode)

    async def change_image_quality_if_needed(self) -> None:
        try:
            await self.coordinator.change_quality()
        except Exception as exc:
            self._on_error(exc)

    def clear_images_on_app_background(self) -> None:
        if not self.settings.clear_images_on_background:
            return
        self.coordinator.clear_all()
        self.image_selections = []
        self._log.info("Clearing images on app background")

    def copy(self, image: "Image") -> None:
        if not self.settings.can_save_result:
            self._set("show_purchase_view", True)
            return
        self.clipboard.copy_image(image)
        self._set("show_copy_toast", True)
        self._log.debug("Copying image.")

    async def save(self, image: "Image") -> None:
        if not self.settings.can_save_result:
            self._set("show_purchase_view", True)
            return
        try:
            await self.library.save_image(image)
        except Exception as exc:
            self._log.error("Error manually saving image: %s.", exc)
            self._on_error(exc)
            return
        self._set("show_quick_save_toast", True)
        self._log.debug("Manually saving image.")

    async def request_library_permission(self) -> None:
        status = await self.library.request_addition_permission()
        self._log.info(
            "Finished requesting photo library addition authorization. Status: %s.",
            status.title,
        )

    def dismiss_error(self) -> None:
        self._set("error", None)

    # ------------------------------------------------------------------
    # Coordinator hooks
    # ------------------------------------------------------------------
    def _on_view_state(self, state: ViewState) -> None:
        self._set("view_state", state)

    def _on_mode(self, mode: DisplayMode) -> None:
        self._set("display_mode", mode)

    def _on_loading(self, loading: bool) -> None:
        self._set("is_loading", loading)

    def _on_toast(self, text: Optional[str]) -> None:
        self._set("show_auto_save_toast", True)

    def _on_error(self, exc: BaseException) -> None:
        error = map_pipeline_error(exc)
        self._log.warning("Pipeline error (%s): %s", error.code, error.message)
        self._set("error", error)

    def _set(self, name: str, value: object) -> None:
        setattr(self, name, value)
        if self.on_change:
            self.on_change(name)


__all__ = ["HomeVM"]
