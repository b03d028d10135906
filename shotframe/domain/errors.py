"""Domain-level error types shared by adapters, use-cases and view models.

Adapters translate library exceptions into these types at the port boundary so
the pipeline never has to know about Pillow or filesystem specifics.
"""

from __future__ import annotations


class PipelineError(RuntimeError):
    """Base class for pipeline failures that are recoverable per run."""

    code = "PIPELINE_ERROR"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.code)
        self.message = message or self.code


class UnsupportedImageError(PipelineError):
    """Render or combine input was malformed or empty."""

    code = "UNSUPPORTED_IMAGE"


class EncodingFailedError(PipelineError):
    """An image could not be serialized."""

    code = "ENCODING_FAILED"


class ImageIOError(PipelineError):
    """Writing, copying, saving or deleting an image failed."""

    code = "IO_ERROR"


class PermissionDeniedError(PipelineError):
    """Photo library access was refused."""

    code = "PERMISSION_DENIED"


class CombineCanceled(PipelineError):
    """A combine task stopped cooperatively. Never shown to the user."""

    code = "CANCELED"


__all__ = [
    "CombineCanceled",
    "EncodingFailedError",
    "ImageIOError",
    "PermissionDeniedError",
    "PipelineError",
    "UnsupportedImageError",
]
