from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional, Sequence

from shotframe.domain.entities import LibraryPermission
from shotframe.domain.ports import ClipboardPort, FilesPort, LibraryPort, ReviewPromptPort


class LibraryMock(LibraryPort):
    """In-memory photo library that records every call, for tests and offline use."""

    def __init__(
        self,
        *,
        fail_on: Optional[Sequence[str]] = None,
        error: Optional[BaseException] = None,
        permission: LibraryPermission = LibraryPermission.AUTHORIZED,
        calls: Optional[List[str]] = None,
    ) -> None:
        self.fail_on = set(fail_on or ())
        self.error = error
        self.permission = permission
        self.saved: List[Path] = []
        self.saved_images: List[Any] = []
        self.deleted: List[List[str]] = []
        self.calls: List[str] = calls if calls is not None else []

    async def save_file(self, path: Path) -> None:
        self.calls.append(f"save:{Path(path).name}")
        failing = Path(path).name in self.fail_on or "save_file" in self.fail_on
        if self.error is not None and failing:
            raise self.error
        self.saved.append(Path(path))

    async def save_image(self, image: Any) -> None:
        self.calls.append("save_image")
        if self.error is not None and "save_image" in self.fail_on:
            raise self.error
        self.saved_images.append(image)

    async def delete(self, ids: Sequence[str]) -> None:
        self.calls.append(f"delete:{len(ids)}")
        if self.error is not None and "delete" in self.fail_on:
            raise self.error
        self.deleted.append(list(ids))

    async def request_addition_permission(self) -> LibraryPermission:
        self.calls.append("permission")
        return self.permission


class FilesMock(FilesPort):
    def __init__(self, calls: Optional[List[str]] = None) -> None:
        self.copied: List[Path] = []
        self.calls = calls if calls is not None else []

    def copy_to_files(self, path: Path) -> Path:
        self.calls.append(f"files:{Path(path).name}")
        self.copied.append(Path(path))
        return Path(path)


class ReviewPromptMock(ReviewPromptPort):
    def __init__(self) -> None:
        self.requests = 0

    def request_review(self) -> None:
        self.requests += 1


class ClipboardMock(ClipboardPort):
    def __init__(self) -> None:
        self.images: List[Any] = []

    def copy_image(self, image: Any) -> None:
        self.images.append(image)


__all__ = ["ClipboardMock", "FilesMock", "LibraryMock", "ReviewPromptMock"]
