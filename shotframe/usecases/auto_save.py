"""Post-processing side effects that run after a successful framing pass."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Sequence

from ..domain.entities import FramedResult
from ..domain.errors import PipelineError
from ..domain.ports import FilesPort, LibraryPort, SettingsPort

_log = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]
ErrorHook = Callable[[BaseException], None]
ToastHook = Callable[[Optional[str]], None]

TOAST_DELAY_S = 0.75


def toast_text(settings: SettingsPort) -> Optional[str]:
    """Confirmation text for the enabled auto-save targets."""
    files = settings.auto_save_to_files
    photos = settings.auto_save_to_photos
    if files and photos:
        return "Saved to photos & files"
    if files:
        return "Saved to files"
    if photos:
        return "Saved to photos"
    return None


def _noop_error(_: BaseException) -> None:
    """Default error hook."""


@dataclass
class AutoSaveResults:
    """Save every framed result to the enabled targets, one at a time, in order.

    A failure on one item is reported through ``on_error`` and the loop moves
    on to the next item.
    """

    settings: SettingsPort
    files: FilesPort
    library: LibraryPort
    sleep: SleepFn = field(default=asyncio.sleep)
    toast_delay_s: float = TOAST_DELAY_S

    async def __call__(
        self,
        results: Sequence[FramedResult],
        on_toast: ToastHook,
        on_error: ErrorHook = _noop_error,
    ) -> List[BaseException]:
        errors: List[BaseException] = []
        if not (self.settings.auto_save_to_files or self.settings.auto_save_to_photos):
            return errors

        for result in results:
            try:
                if self.settings.auto_save_to_files:
                    self.files.copy_to_files(result.path)
                    _log.info("Saving %s to files.", result.path.name)

                if self.settings.auto_save_to_photos:
                    await self.library.save_file(result.path)
                    _log.info("Saving %s to photo library.", result.path.name)

                await self.sleep(self.toast_delay_s)
                text = toast_text(self.settings)
                if text is None:
                    _log.critical("Toast text returned None.")
                on_toast(text)
                await self.sleep(self.toast_delay_s)
            except (PipelineError, OSError) as exc:
                _log.info("An autosave error occurred: %s.", exc)
                errors.append(exc)
                on_error(exc)
        return errors


@dataclass
class AutoDeleteSources:
    """Remove the picked originals from the photo library when enabled."""

    settings: SettingsPort
    library: LibraryPort

    async def __call__(self, ids: Sequence[str], on_error: ErrorHook = _noop_error) -> bool:
        if not self.settings.auto_delete_screenshots:
            return False
        if not ids:
            _log.debug("Auto delete enabled but the run has no library identifiers.")
            return False
        try:
            await self.library.delete(list(ids))
        except (PipelineError, OSError) as exc:
            _log.warning("Auto delete of %d images failed: %s", len(ids), exc)
            on_error(exc)
            return False
        _log.info("Deleting %d images.", len(ids))
        return True


__all__ = ["AutoDeleteSources", "AutoSaveResults", "TOAST_DELAY_S", "toast_text"]
