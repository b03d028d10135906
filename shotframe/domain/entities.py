from __future__ import annotations

"""Domain value objects shared across adapters, use-cases, and view models."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Tuple, Union

if TYPE_CHECKING:  # pragma: no cover - type checking helper
    from PIL.Image import Image


class DisplayMode(str, Enum):
    """Which result branch the home screen is showing."""

    INDIVIDUAL = "individual"
    COMBINED = "combined"


class ImageQuality(str, Enum):
    """Output quality of framed results, expressed as a downscale factor."""

    ORIGINAL = "original"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def scale(self) -> float:
        return _QUALITY_SCALE[self]


_QUALITY_SCALE = {
    ImageQuality.ORIGINAL: 1.0,
    ImageQuality.HIGH: 0.75,
    ImageQuality.MEDIUM: 0.5,
    ImageQuality.LOW: 0.25,
}


class SelectionFilter(str, Enum):
    """Filter applied by the photo picker."""

    ALL = "all"
    SCREENSHOTS = "screenshots"


class LibraryPermission(str, Enum):
    """Authorization status for adding images to the photo library."""

    NOT_DETERMINED = "not_determined"
    AUTHORIZED = "authorized"
    LIMITED = "limited"
    DENIED = "denied"
    RESTRICTED = "restricted"

    @property
    def title(self) -> str:
        return self.value.replace("_", " ").title()


@dataclass(frozen=True, eq=False)
class Screenshot:
    """Raw input image before framing."""

    image: "Image"
    """Decoded pixel data."""
    source_id: Optional[str] = None
    """Photo library identifier when the image came from the picker."""

    @property
    def width(self) -> int:
        return self.image.size[0]

    @property
    def height(self) -> int:
        return self.image.size[1]


@dataclass(frozen=True, eq=False)
class FramedResult:
    """Framed rendition of one screenshot plus its temporary file."""

    image: "Image"
    path: Path


@dataclass(frozen=True, eq=False)
class CombinedResult:
    """Single composite of every framed result, laid out horizontally."""

    image: "Image"
    path: Path


@dataclass(frozen=True)
class PickerItem:
    """One entry of a photo picker selection."""

    item_id: Optional[str]
    payload: Optional[bytes] = None


@dataclass(frozen=True)
class PickerSelection:
    items: Tuple[PickerItem, ...] = field(default_factory=tuple)

    @property
    def item_ids(self) -> Tuple[str, ...]:
        return tuple(item.item_id for item in self.items if item.item_id)


@dataclass(frozen=True)
class DroppedItems:
    blobs: Tuple[bytes, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ExistingScreenshots:
    screenshots: Tuple[Screenshot, ...] = field(default_factory=tuple)


PhotoSource = Union[PickerSelection, DroppedItems, ExistingScreenshots]


__all__ = [
    "CombinedResult",
    "DisplayMode",
    "DroppedItems",
    "ExistingScreenshots",
    "FramedResult",
    "ImageQuality",
    "LibraryPermission",
    "PhotoSource",
    "PickerItem",
    "PickerSelection",
    "Screenshot",
    "SelectionFilter",
]
