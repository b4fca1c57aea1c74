"""TrueType font resource shared by every text element of a run."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path

from PIL import ImageFont

from .errors import FontDecodeError, ResourceError
from .models import TextExtent


class FontResource:
    """Font bytes loaded once, with one Pillow font object per pixel size."""

    def __init__(self, data: bytes, path: str | Path = "<memory>") -> None:
        self.path = str(path)
        self._data = data
        self._sizes: dict[int, ImageFont.FreeTypeFont] = {}
        try:
            self.at(20)
        except (OSError, ValueError) as exc:
            raise FontDecodeError(self.path, str(exc)) from exc

    @classmethod
    def load(cls, path: str | Path) -> "FontResource":
        try:
            data = Path(path).read_bytes()
        except OSError as exc:
            raise ResourceError(path, f"Unable to read font ({exc.strerror or exc})") from exc
        return cls(data, path)

    def at(self, size: int) -> ImageFont.FreeTypeFont:
        size = max(1, int(size))
        font = self._sizes.get(size)
        if font is None:
            font = ImageFont.truetype(BytesIO(self._data), size=size)
            self._sizes[size] = font
        return font

    def measure(self, text: str, size: int) -> tuple[int, int]:
        """Extent of the drawn text measured from the drawing origin."""
        _left, _top, right, bottom = self.at(size).getbbox(text)
        return int(right), int(bottom)

    def extent(self, text: str, size: int) -> TextExtent:
        left, top, right, bottom = self.at(size).getbbox(text)
        return TextExtent(width=int(right - left), height=int(bottom - top), left=int(left), top=int(top))
