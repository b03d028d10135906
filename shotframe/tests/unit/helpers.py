from __future__ import annotations

import asyncio
import threading
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from PIL import Image

from shotframe.adapters.image_codec import PngCodec, TempDirWriter
from shotframe.adapters.library_mock import FilesMock, LibraryMock, ReviewPromptMock
from shotframe.adapters.pillow_renderer import PillowRenderer
from shotframe.adapters.settings_memory import SettingsMemory
from shotframe.domain.entities import ImageQuality, Screenshot
from shotframe.domain.errors import PipelineError, UnsupportedImageError
from shotframe.usecases.auto_save import AutoDeleteSources, AutoSaveResults
from shotframe.usecases.frame_screenshots import FrameScreenshot
from shotframe.usecases.pipeline_coordinator import PipelineCoordinator, PipelineHooks
from shotframe.usecases.review_prompt import AskForReview


def make_image(width: int, height: int, color=(200, 40, 40, 255)) -> Image.Image:
    return Image.new("RGBA", (width, height), color)


def make_screenshots(count: int, *, base_width: int = 40, height: int = 80) -> List[Screenshot]:
    return [
        Screenshot(image=make_image(base_width + 10 * i, height), source_id=f"asset-{i}")
        for i in range(count)
    ]


def png_bytes(width: int = 20, height: int = 30) -> bytes:
    return PngCodec().encode(make_image(width, height))


class RecordingRenderer(PillowRenderer):
    """Pillow renderer that records inputs and can fail on a given index."""

    def __init__(self, fail_at: Optional[int] = None) -> None:
        super().__init__()
        self.rendered: List[Tuple[Screenshot, ImageQuality]] = []
        self.fail_at = fail_at

    def render(self, screenshot: Screenshot, quality: ImageQuality) -> Image.Image:
        if self.fail_at is not None and len(self.rendered) == self.fail_at:
            self.rendered.append((screenshot, quality))
            raise UnsupportedImageError("broken screenshot")
        self.rendered.append((screenshot, quality))
        return super().render(screenshot, quality)


class BlockingRenderer(RecordingRenderer):
    """Renderer that blocks on ``gate`` for one source id, then fails it."""

    def __init__(self, blocked_id: str) -> None:
        super().__init__()
        self.blocked_id = blocked_id
        self.gate = threading.Event()
        self.started = threading.Event()

    def render(self, screenshot: Screenshot, quality: ImageQuality) -> Image.Image:
        if screenshot.source_id != self.blocked_id:
            return super().render(screenshot, quality)
        self.rendered.append((screenshot, quality))
        self.started.set()
        self.gate.wait(timeout=5)
        raise UnsupportedImageError("blocked screenshot")


class GatedEncoder(PngCodec):
    """PNG encoder that blocks the worker thread until ``gate`` is set."""

    def __init__(self, *, error: Optional[PipelineError] = None) -> None:
        self.gate = threading.Event()
        self.started = threading.Event()
        self.error = error
        self.calls = 0

    def encode(self, image: Image.Image) -> bytes:
        self.calls += 1
        self.started.set()
        if not self.gate.wait(timeout=5):
            raise RuntimeError("gate never opened")
        if self.error is not None:
            raise self.error
        return super().encode(image)


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class Harness:
    """Coordinator wired to in-memory doubles."""

    def __init__(
        self,
        tmp_path: Path,
        *,
        settings: Optional[SettingsMemory] = None,
        renderer: Optional[RecordingRenderer] = None,
        combine_encoder: Optional[PngCodec] = None,
        library: Optional[LibraryMock] = None,
        hooks: Optional[PipelineHooks] = None,
    ) -> None:
        self.calls: List[str] = []
        self.settings = settings or SettingsMemory()
        self.renderer = renderer or RecordingRenderer()
        self.codec = PngCodec()
        self.combine_encoder = combine_encoder or self.codec
        self.writer = TempDirWriter(tmp_path)
        self.library = library or LibraryMock(calls=self.calls)
        self.files = FilesMock(calls=self.calls)
        self.review = ReviewPromptMock()
        self.sleep = RecordingSleep()
        self.toasts: List[Optional[str]] = []
        self.errors: List[BaseException] = []
        self.states: List[object] = []
        self.hooks = hooks or PipelineHooks(
            on_view_state=self.states.append,
            on_toast=self.toasts.append,
            on_error=self.errors.append,
        )
        self.coordinator = PipelineCoordinator(
            settings=self.settings,
            frame_screenshot=FrameScreenshot(
                renderer=self.renderer, encoder=self.codec, writer=self.writer
            ),
            encoder=self.combine_encoder,
            writer=self.writer,
            decoder=self.codec,
            auto_save=AutoSaveResults(
                settings=self.settings,
                files=self.files,
                library=self.library,
                sleep=self.sleep,
            ),
            auto_delete=AutoDeleteSources(settings=self.settings, library=self.library),
            ask_for_review=AskForReview(settings=self.settings, prompt=self.review),
            hooks=self.hooks,
        )


async def wait_until(predicate: Callable[[], bool], timeout: float = 5.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.01)


def release_all(encoders: Sequence[GatedEncoder]) -> None:
    for encoder in encoders:
        encoder.gate.set()


__all__ = [
    "BlockingRenderer",
    "GatedEncoder",
    "Harness",
    "RecordingRenderer",
    "RecordingSleep",
    "make_image",
    "make_screenshots",
    "png_bytes",
    "release_all",
    "wait_until",
]
