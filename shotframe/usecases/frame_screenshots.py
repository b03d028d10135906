from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass

from ..domain.entities import FramedResult, ImageQuality, Screenshot
from ..domain.ports import EncoderPort, RendererPort, TempWriterPort

_log = logging.getLogger(__name__)


@dataclass
class FrameScreenshot:
    """Render one screenshot, encode it and park it in a temporary file."""

    renderer: RendererPort
    encoder: EncoderPort
    writer: TempWriterPort

    async def __call__(
        self, screenshot: Screenshot, index: int, quality: ImageQuality
    ) -> FramedResult:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.frame, screenshot, index, quality)

    def frame(self, screenshot: Screenshot, index: int, quality: ImageQuality) -> FramedResult:
        framed = self.renderer.render(screenshot, quality)
        data = self.encoder.encode(framed)
        name = f"Framed Screenshot {index}_{uuid.uuid4()}.png"
        path = self.writer.write_temp(data, name)
        _log.info("Writing %s to temporary file.", name)
        return FramedResult(image=framed, path=path)


__all__ = ["FrameScreenshot"]
