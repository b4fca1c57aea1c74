"""Brightness-adaptive translucent wash with a cut-out caption."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from PIL import Image

from .errors import CaptionFitError
from .fonts import FontResource
from .models import FrameSize, Rgba
from .text import render_glyph_mask

ALPHA_MIN = 48
ALPHA_MAX = 127
DARK_THRESHOLD = 127
OVERLAY_MARGIN_PX = 48
DEFAULT_VERTICAL_OFFSET_PX = 20


@dataclass(frozen=True)
class OverlayResult:
    mean_brightness: float
    wash: Rgba
    caption_size: int


def mean_brightness(frame: Image.Image) -> float:
    """Average of (r + g + b) / 3 over every pixel, in 0..255."""
    rgb = np.asarray(frame.convert("RGB"))
    total = int(rgb.sum(dtype=np.uint64))
    return total / (rgb.shape[0] * rgb.shape[1] * 3)


def wash_alpha(mean: float) -> int:
    # Strongest near mid-grey, weakest at either extreme.
    level = mean if mean <= DARK_THRESHOLD else 255 - mean
    alpha = ALPHA_MIN + (level / DARK_THRESHOLD) * (ALPHA_MAX - ALPHA_MIN)
    return max(ALPHA_MIN, min(ALPHA_MAX, int(alpha + 0.5)))


def wash_colour(mean: float) -> Rgba:
    alpha = wash_alpha(mean)
    if mean <= DARK_THRESHOLD:
        return (255, 255, 255, alpha)
    return (0, 0, 0, alpha)


def fit_caption_size(fonts: FontResource, text: str, frame: FrameSize, margin: int = OVERLAY_MARGIN_PX) -> int:
    """Largest font size whose tight text box fits the caption bounds.

    Starts from the frame height. Text too wide is shrunk to the width
    bound; text that fits is grown until it touches whichever bound it
    reaches first. Integer sizes can overshoot after rounding, so the size
    is then stepped down until it fits.
    """
    bound_w = frame.width - 2 * margin
    bound_h = frame.height
    size = frame.height
    ext = fonts.extent(text, size)
    if ext.width <= 0 or ext.height <= 0:
        raise CaptionFitError(f"Caption {text!r} has no visible glyphs")

    if ext.width > bound_w:
        size = int(size * bound_w / ext.width)
    elif ext.height > bound_h:
        raise CaptionFitError(
            f"Caption {text!r} is {ext.height}px tall at size {size}, above the {bound_h}px bound"
        )
    elif ext.height / ext.width > bound_h / bound_w:
        size = int(size * bound_h / ext.height)
    else:
        size = int(size * bound_w / ext.width)

    ext = fonts.extent(text, size)
    while size > 1 and (ext.width > bound_w or ext.height > bound_h):
        size -= 1
        ext = fonts.extent(text, size)
    return size


class OverlayCompositor:
    def __init__(
        self,
        fonts: FontResource,
        frame: FrameSize,
        margin: int = OVERLAY_MARGIN_PX,
        vertical_offset: int = DEFAULT_VERTICAL_OFFSET_PX,
    ) -> None:
        self.fonts = fonts
        self.frame = frame
        self.margin = margin
        self.vertical_offset = vertical_offset

    def render_wash(self, text: str, mean: float) -> tuple[Image.Image, int]:
        colour = wash_colour(mean)
        size = fit_caption_size(self.fonts, text, self.frame, self.margin)
        ext = self.fonts.extent(text, size)
        x = (self.frame.width - ext.width) // 2 - ext.left
        # Shifted up to stay centred above the taskbar.
        y = (self.frame.height - ext.height) // 2 - ext.top - self.vertical_offset
        mask = render_glyph_mask(self.frame.as_tuple(), text, self.fonts.at(size), (x, y))

        alpha = Image.new("L", self.frame.as_tuple(), colour[3])
        alpha.paste(0, (0, 0), mask)
        wash = Image.new("RGBA", self.frame.as_tuple(), colour)
        wash.putalpha(alpha)
        return wash, size

    def apply(self, canvas: Image.Image, text: str | None) -> OverlayResult | None:
        if not text or not text.strip():
            return None
        if canvas.size != self.frame.as_tuple():
            raise ValueError("Canvas does not match the overlay frame size")
        mean = mean_brightness(canvas)
        wash, size = self.render_wash(text, mean)
        canvas.alpha_composite(wash)
        return OverlayResult(mean_brightness=mean, wash=wash_colour(mean), caption_size=size)
