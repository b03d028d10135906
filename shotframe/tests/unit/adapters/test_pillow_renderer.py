from __future__ import annotations

import pytest
from PIL import Image

from shotframe.adapters.pillow_renderer import PillowRenderer
from shotframe.domain.entities import ImageQuality, Screenshot
from shotframe.domain.errors import UnsupportedImageError
from shotframe.tests.unit.helpers import make_image


def test_frame_adds_bezel_on_every_side() -> None:
    framed = PillowRenderer().render(Screenshot(make_image(40, 80)), ImageQuality.ORIGINAL)

    assert framed.size == (44, 84)
    assert framed.mode == "RGBA"
    # Corners stay transparent, the screen content is pasted in the middle.
    assert framed.getpixel((0, 0))[3] == 0
    assert framed.getpixel((22, 42)) == (200, 40, 40, 255)


def test_bezel_scales_with_short_side() -> None:
    framed = PillowRenderer().render(Screenshot(make_image(400, 800)), ImageQuality.ORIGINAL)

    assert framed.size == (432, 832)


def test_quality_downscales_frame() -> None:
    renderer = PillowRenderer()
    screenshot = Screenshot(make_image(40, 80))

    assert renderer.render(screenshot, ImageQuality.LOW).size == (11, 21)
    assert renderer.render(screenshot, ImageQuality.MEDIUM).size == (22, 42)


def test_non_rgba_input_is_converted() -> None:
    framed = PillowRenderer().render(
        Screenshot(Image.new("RGB", (40, 80), (0, 255, 0))), ImageQuality.ORIGINAL
    )

    assert framed.getpixel((22, 42)) == (0, 255, 0, 255)


def test_empty_screenshot_is_rejected() -> None:
    with pytest.raises(UnsupportedImageError):
        PillowRenderer().render(Screenshot(Image.new("RGBA", (0, 0))), ImageQuality.ORIGINAL)
