"""Directory-backed stand-ins for the photo library and cloud files.

Used by the command-line entry point: "photos" and "files" are plain folders,
and picker items are image paths on disk.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
import uuid
from pathlib import Path
from typing import List, Optional, Sequence

from PIL import Image

from shotframe.domain.entities import LibraryPermission, PickerSelection, Screenshot
from shotframe.domain.errors import ImageIOError, PermissionDeniedError, UnsupportedImageError
from shotframe.domain.ports import FilesPort, LibraryPort, SelectionLoaderPort

from .image_codec import PngCodec

_log = logging.getLogger(__name__)


class DirectoryLibrary(LibraryPort):
    """Photo library kept in a single directory."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    async def save_file(self, path: Path) -> None:
        await asyncio.to_thread(self._copy, Path(path))

    async def save_image(self, image: Image.Image) -> None:
        target = self._ensure_root() / f"Framed Screenshot_{uuid.uuid4()}.png"
        try:
            await asyncio.to_thread(image.save, target, "PNG")
        except (OSError, ValueError) as exc:
            raise ImageIOError(f"Could not save image: {exc}") from exc

    async def delete(self, ids: Sequence[str]) -> None:
        for item_id in ids:
            path = Path(item_id)
            try:
                path.unlink()
            except FileNotFoundError:
                _log.warning("Asset %s already removed.", path)
            except PermissionError as exc:
                raise PermissionDeniedError(str(exc)) from exc
            except OSError as exc:
                raise ImageIOError(f"Could not delete {path}: {exc}") from exc

    async def request_addition_permission(self) -> LibraryPermission:
        try:
            self._ensure_root()
        except PermissionDeniedError:
            return LibraryPermission.DENIED
        if not os.access(self.root, os.W_OK):
            return LibraryPermission.DENIED
        return LibraryPermission.AUTHORIZED

    def _ensure_root(self) -> Path:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except PermissionError as exc:
            raise PermissionDeniedError(str(exc)) from exc
        except OSError as exc:
            raise ImageIOError(str(exc)) from exc
        return self.root

    def _copy(self, path: Path) -> None:
        target = self._ensure_root() / path.name
        try:
            shutil.copy2(path, target)
        except OSError as exc:
            raise ImageIOError(f"Could not save {path.name}: {exc}") from exc


class DirectoryFiles(FilesPort):
    """Document storage kept in a single directory."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def copy_to_files(self, path: Path) -> Path:
        source = Path(path)
        target = self.root / source.name
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, target)
        except OSError as exc:
            raise ImageIOError(f"Could not copy {source.name} to files: {exc}") from exc
        return target


class FileSelectionLoader(SelectionLoaderPort):
    """Reads picker items whose identifiers are image paths."""

    def __init__(self, codec: Optional[PngCodec] = None) -> None:
        self.codec = codec or PngCodec()

    async def load(self, selection: PickerSelection) -> Sequence[Screenshot]:
        screenshots: List[Screenshot] = []
        for item in selection.items:
            if not item.item_id:
                raise UnsupportedImageError("Picker item has no path.")
            try:
                data = await asyncio.to_thread(Path(item.item_id).read_bytes)
            except OSError as exc:
                raise ImageIOError(f"Could not read {item.item_id}: {exc}") from exc
            screenshots.append(self.codec.decode(data, source_id=item.item_id))
        return screenshots


__all__ = ["DirectoryFiles", "DirectoryLibrary", "FileSelectionLoader"]
