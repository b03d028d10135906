"""Background composition of every framed result into one horizontal strip.

Call context:
    ``PipelineCoordinator`` starts at most one ``CombineTask`` at a time from
    the event loop. The pixel work runs on the loop's default executor and is
    handed back to the loop through ``on_complete``.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, List, Optional, Sequence

import numpy as np
from PIL import Image

from ..domain.entities import CombinedResult
from ..domain.errors import CombineCanceled, PipelineError, UnsupportedImageError
from ..domain.ports import EncoderPort, TempWriterPort

if TYPE_CHECKING:  # pragma: no cover - type checking helper
    from PIL.Image import Image as PILImage

_log = logging.getLogger(__name__)

CancelCallback = Callable[[], bool]
CompletionCallback = Callable[["CombineTask", CombinedResult], None]


def _never_canceled() -> bool:
    return False


def compose_horizontally(
    images: Sequence["PILImage"], is_canceled: CancelCallback = _never_canceled
) -> "PILImage":
    """Scale each image by its share of the total width and lay them side by side.

    Shorter images are centered vertically on a transparent background so the
    strip has a single consistent height.
    """
    if not images:
        raise UnsupportedImageError("Nothing to combine.")
    total_width = sum(image.size[0] for image in images)
    if total_width <= 0:
        raise UnsupportedImageError("Images have no width.")

    if is_canceled():
        raise CombineCanceled()
    resized: List["PILImage"] = []
    for image in images:
        width, height = image.size
        scale = width / total_width
        size = (max(1, round(width * scale)), max(1, round(height * scale)))
        resized.append(image.convert("RGBA").resize(size, Image.Resampling.LANCZOS))

    strip_height = max(image.size[1] for image in resized)
    columns = []
    for image in resized:
        pixels = np.asarray(image, dtype=np.uint8)
        gap = strip_height - pixels.shape[0]
        top = gap // 2
        columns.append(np.pad(pixels, ((top, gap - top), (0, 0), (0, 0))))
    return Image.fromarray(np.hstack(columns))


@dataclass
class _Outcome:
    result: Optional[CombinedResult] = None
    error: Optional[BaseException] = None


class CombineTask:
    """Cancelable, awaitable unit of work producing one ``CombinedResult``.

    Cancellation is cooperative: ``cancel`` sets a flag the worker checks
    before scaling, encoding and writing. A canceled task never reaches
    ``on_complete`` and ``wait`` raises ``CombineCanceled``.
    """

    def __init__(
        self,
        frames: Sequence["PILImage"],
        *,
        encoder: EncoderPort,
        writer: TempWriterPort,
        generation: int = 0,
        on_complete: Optional[CompletionCallback] = None,
    ) -> None:
        if len(frames) < 2:
            raise ValueError("CombineTask requires at least two frames.")
        self.frames = tuple(frames)
        self.encoder = encoder
        self.writer = writer
        self.generation = generation
        self.on_complete = on_complete
        self._cancel_evt = threading.Event()
        self._task: Optional[asyncio.Task] = None

    @classmethod
    def start(
        cls,
        frames: Sequence["PILImage"],
        *,
        encoder: EncoderPort,
        writer: TempWriterPort,
        generation: int = 0,
        on_complete: Optional[CompletionCallback] = None,
    ) -> "CombineTask":
        """Create a task and schedule it on the running loop immediately."""
        task = cls(
            frames,
            encoder=encoder,
            writer=writer,
            generation=generation,
            on_complete=on_complete,
        )
        task._task = asyncio.get_running_loop().create_task(task._run())
        return task

    @property
    def canceled(self) -> bool:
        return self._cancel_evt.is_set()

    @property
    def done(self) -> bool:
        return self._task is not None and self._task.done()

    def cancel(self) -> None:
        """Request cooperative cancellation without waiting for the worker."""
        if not self._cancel_evt.is_set():
            _log.debug("Stopping combined image task.")
        self._cancel_evt.set()

    async def wait(self) -> CombinedResult:
        """Suspend until the task finishes; raise its failure or ``CombineCanceled``."""
        if self._task is None:
            raise RuntimeError("CombineTask was never started.")
        outcome = await asyncio.shield(self._task)
        if outcome.error is not None:
            raise outcome.error
        if outcome.result is None:
            raise CombineCanceled()
        return outcome.result

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    async def _run(self) -> _Outcome:
        _log.info("Starting combined image task.")
        loop = asyncio.get_running_loop()
        try:
            combined = await loop.run_in_executor(None, self._work)
        except CombineCanceled as exc:
            return _Outcome(error=exc)
        except PipelineError as exc:
            _log.error("Combined image task failed: %s", exc)
            return _Outcome(error=exc)
        except Exception as exc:
            _log.exception("Unexpected combined image failure")
            return _Outcome(error=UnsupportedImageError(str(exc)))
        finally:
            _log.info("Ending combined image task.")

        if self.canceled:
            return _Outcome(error=CombineCanceled())
        if self.on_complete is not None:
            self.on_complete(self, combined)
        return _Outcome(result=combined)

    def _work(self) -> CombinedResult:
        combined = compose_horizontally(self.frames, self._cancel_evt.is_set)
        self._raise_if_canceled()
        data = self.encoder.encode(combined)
        self._raise_if_canceled()
        path = self.writer.write_temp(data, f"Combined_{uuid.uuid4()}.png")
        _log.info("Saving combined data to temporary file %s.", path)
        return CombinedResult(image=combined, path=path)

    def _raise_if_canceled(self) -> None:
        if self._cancel_evt.is_set():
            raise CombineCanceled()


__all__ = ["CombineTask", "compose_horizontally"]
