"""Translate pipeline errors into user-facing UseCaseError instances."""

from __future__ import annotations

from typing import Optional

from ..domain.errors import (
    CombineCanceled,
    EncodingFailedError,
    ImageIOError,
    PermissionDeniedError,
    PipelineError,
    UnsupportedImageError,
)
from ..domain.ports import UseCaseError

ALERT_TITLE = "Something went wrong."
ALERT_MESSAGE = "Please make sure you are selecting a screenshot."


def map_pipeline_error(
    exc: BaseException,
    *,
    default_code: str = "UNEXPECTED",
    default_message: Optional[str] = None,
) -> UseCaseError:
    """Map pipeline and adapter exceptions to stable UseCaseError codes."""
    if isinstance(exc, UseCaseError):
        return exc
    if isinstance(exc, UnsupportedImageError):
        return UseCaseError(exc.code, ALERT_MESSAGE, ALERT_TITLE)
    if isinstance(exc, EncodingFailedError):
        return UseCaseError(exc.code, _compose("Could not encode the image", exc.message))
    if isinstance(exc, PermissionDeniedError):
        return UseCaseError(
            exc.code,
            "Photo library access was denied. Allow access in Settings and try again.",
        )
    if isinstance(exc, (ImageIOError, OSError)):
        code = getattr(exc, "code", ImageIOError.code)
        if not isinstance(code, str):
            code = ImageIOError.code
        return UseCaseError(code, _compose("Could not save the image", str(exc)))
    if isinstance(exc, CombineCanceled):
        return UseCaseError(exc.code, "Canceled.")
    if isinstance(exc, PipelineError):
        return UseCaseError(exc.code, exc.message)

    message = default_message or str(exc) or "Unexpected error."
    return UseCaseError(default_code, message)


def _compose(base: str, hint: Optional[str]) -> str:
    hint_text = (hint or "").strip()
    if hint_text:
        return f"{base}: {hint_text}"
    return f"{base}."


__all__ = ["ALERT_MESSAGE", "ALERT_TITLE", "map_pipeline_error"]
