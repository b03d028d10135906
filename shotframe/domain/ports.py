from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Protocol, Sequence

from .entities import (
    ImageQuality,
    LibraryPermission,
    PickerSelection,
    Screenshot,
    SelectionFilter,
)

if TYPE_CHECKING:  # pragma: no cover - type checking helper
    from PIL.Image import Image


# ---- Error model ----
class UseCaseError(Exception):
    """Base class for use case level errors (user-presentable)."""

    def __init__(self, code: str, message: str, title: str = "Something went wrong."):
        super().__init__(message)
        self.code = code
        self.message = message
        self.title = title


# ---- Ports (Hexagonal boundaries) ----
class RendererPort(Protocol):
    """Turns a raw screenshot into its framed image.

    Raises ``UnsupportedImageError`` for malformed input.
    """

    def render(self, screenshot: Screenshot, quality: ImageQuality) -> "Image": ...


class EncoderPort(Protocol):
    def encode(self, image: "Image") -> bytes: ...  # raises EncodingFailedError


class TempWriterPort(Protocol):
    def write_temp(self, data: bytes, name: str) -> Path: ...  # raises ImageIOError


class SettingsPort(Protocol):
    """Persisted user settings and usage counters."""

    auto_save_to_files: bool
    auto_save_to_photos: bool
    auto_delete_screenshots: bool
    clear_images_on_background: bool
    selection_filter: SelectionFilter
    image_quality: ImageQuality
    render_count: int
    launch_count: int
    activation_count: int
    last_review_prompt: Optional[datetime]
    is_subscribed: bool

    @property
    def can_save_result(self) -> bool: ...
    @property
    def free_results_remaining(self) -> int: ...


class LibraryPort(Protocol):
    """System photo library. Failures raise PermissionDeniedError or ImageIOError."""

    async def save_file(self, path: Path) -> None: ...
    async def save_image(self, image: "Image") -> None: ...
    async def delete(self, ids: Sequence[str]) -> None: ...
    async def request_addition_permission(self) -> LibraryPermission: ...


class FilesPort(Protocol):
    """User-visible document storage (cloud files)."""

    def copy_to_files(self, path: Path) -> Path: ...  # raises ImageIOError


class ReviewPromptPort(Protocol):
    def request_review(self) -> None: ...


class SelectionLoaderPort(Protocol):
    """Loads picker selections into decoded screenshots."""

    async def load(self, selection: PickerSelection) -> Sequence[Screenshot]: ...


class ClipboardPort(Protocol):
    def copy_image(self, image: "Image") -> None: ...


class DecoderPort(Protocol):
    def decode(self, data: bytes) -> Screenshot: ...  # raises UnsupportedImageError

