"""Renderer error taxonomy."""

from __future__ import annotations

from pathlib import Path


class RenderError(Exception):
    """Input, decode or output failure while producing a frame."""


class ResourceError(RenderError):
    def __init__(self, path: str | Path, detail: str) -> None:
        super().__init__(f"{detail}: {path}")
        self.path = str(path)


class ImageDecodeError(RenderError):
    def __init__(self, path: str | Path, detail: str) -> None:
        super().__init__(f"Unable to decode image {path}: {detail}")
        self.path = str(path)


class FontDecodeError(RenderError):
    def __init__(self, path: str | Path, detail: str) -> None:
        super().__init__(f'Invalid font provided at "{path}": {detail}')
        self.path = str(path)


class InvariantViolation(AssertionError):
    """Internal geometry or layout state that correct callers never reach."""


class ImpossibleCropError(InvariantViolation):
    pass


class CaptionFitError(InvariantViolation):
    pass
