from __future__ import annotations

import io
import logging
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence

from PIL import Image, UnidentifiedImageError

from shotframe.domain.entities import PickerSelection, Screenshot
from shotframe.domain.errors import EncodingFailedError, ImageIOError, UnsupportedImageError
from shotframe.domain.ports import DecoderPort, EncoderPort, SelectionLoaderPort, TempWriterPort

_log = logging.getLogger(__name__)


class PngCodec(EncoderPort, DecoderPort):
    """PNG encoding for results and Pillow decoding for raw inputs."""

    def encode(self, image: Image.Image) -> bytes:
        buffer = io.BytesIO()
        try:
            image.save(buffer, format="PNG")
        except (OSError, ValueError) as exc:
            _log.error("Could not get png data for image: %s", exc)
            raise EncodingFailedError(str(exc)) from exc
        return buffer.getvalue()

    def decode(self, data: bytes, source_id: Optional[str] = None) -> Screenshot:
        if not data:
            raise UnsupportedImageError("Empty image data.")
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError, ValueError) as exc:
            raise UnsupportedImageError(str(exc)) from exc
        return Screenshot(image=image, source_id=source_id)


class TempDirWriter(TempWriterPort):
    """Writes encoded images below a private temporary directory."""

    def __init__(self, root: Optional[Path] = None) -> None:
        self.root = Path(root) if root is not None else Path(tempfile.gettempdir()) / "shotframe"

    def write_temp(self, data: bytes, name: str) -> Path:
        path = self.root / name
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise ImageIOError(f"Could not write {name}: {exc}") from exc
        return path


class PayloadSelectionLoader(SelectionLoaderPort):
    """Decodes picker items that already carry their image bytes."""

    def __init__(self, codec: Optional[PngCodec] = None) -> None:
        self.codec = codec or PngCodec()

    async def load(self, selection: PickerSelection) -> Sequence[Screenshot]:
        screenshots: List[Screenshot] = []
        for item in selection.items:
            if item.payload is None:
                raise UnsupportedImageError(f"Picker item {item.item_id} has no data.")
            screenshots.append(self.codec.decode(item.payload, source_id=item.item_id))
        return screenshots


__all__ = ["PayloadSelectionLoader", "PngCodec", "TempDirWriter"]
