from __future__ import annotations

import logging
from typing import Tuple

from PIL import Image, ImageDraw

from shotframe.domain.entities import ImageQuality, Screenshot
from shotframe.domain.errors import UnsupportedImageError
from shotframe.domain.ports import RendererPort

_log = logging.getLogger(__name__)

RGBA = Tuple[int, int, int, int]


class PillowRenderer(RendererPort):
    """Draws a rounded device bezel around the screenshot with Pillow.

    The bezel thickness and corner radius scale with the shorter screenshot
    side; the finished frame is then downscaled by the quality factor.
    """

    def __init__(
        self,
        *,
        bezel_ratio: float = 0.04,
        corner_ratio: float = 0.08,
        bezel_color: RGBA = (20, 20, 22, 255),
    ) -> None:
        self.bezel_ratio = bezel_ratio
        self.corner_ratio = corner_ratio
        self.bezel_color = bezel_color

    def render(self, screenshot: Screenshot, quality: ImageQuality) -> Image.Image:
        width, height = screenshot.width, screenshot.height
        if width <= 0 or height <= 0:
            raise UnsupportedImageError("Screenshot has no pixels.")
        try:
            screen = screenshot.image.convert("RGBA")
        except (OSError, ValueError) as exc:
            raise UnsupportedImageError(str(exc)) from exc

        short_side = min(width, height)
        bezel = max(2, round(short_side * self.bezel_ratio))
        inner_radius = max(1, round(short_side * self.corner_ratio))
        outer_radius = inner_radius + bezel

        frame_size = (width + 2 * bezel, height + 2 * bezel)
        frame = Image.new("RGBA", frame_size, (0, 0, 0, 0))
        ImageDraw.Draw(frame).rounded_rectangle(
            (0, 0, frame_size[0] - 1, frame_size[1] - 1),
            radius=outer_radius,
            fill=self.bezel_color,
        )

        mask = Image.new("L", (width, height), 0)
        ImageDraw.Draw(mask).rounded_rectangle(
            (0, 0, width - 1, height - 1), radius=inner_radius, fill=255
        )
        frame.paste(screen, (bezel, bezel), mask)

        scale = quality.scale
        if scale != 1.0:
            target = (
                max(1, round(frame_size[0] * scale)),
                max(1, round(frame_size[1] * scale)),
            )
            frame = frame.resize(target, Image.Resampling.LANCZOS)
        _log.debug("Rendered %dx%d frame at %s quality.", frame.size[0], frame.size[1], quality.value)
        return frame


__all__ = ["PillowRenderer"]
