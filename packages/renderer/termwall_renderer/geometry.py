"""Cover-scale and center-crop of source photographs onto the screen frame."""

from __future__ import annotations

import math
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .errors import ImageDecodeError, ImpossibleCropError, ResourceError
from .models import FitOutcome, FrameSize

# Pillow's bicubic kernel uses a = -0.5, i.e. Catmull-Rom.
CATMULL_ROM = Image.Resampling.BICUBIC

# Pillow silently falls back to nearest-neighbour for palette and bilevel images.
_RESAMPLE_MODES = ("RGB", "RGBA")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _resample_ready(image: Image.Image) -> Image.Image:
    if image.mode in _RESAMPLE_MODES:
        return image
    return image.convert("RGBA")


def load_image(path: str | Path) -> Image.Image:
    path = Path(path)
    try:
        fh = path.open("rb")
    except OSError as exc:
        raise ResourceError(path, f"Unable to read source image ({exc.strerror or exc})") from exc
    with fh:
        try:
            image = Image.open(fh)
            image.load()
        except UnidentifiedImageError as exc:
            raise ImageDecodeError(path, "unsupported image format") from exc
        except (OSError, SyntaxError, Image.DecompressionBombError) as exc:
            raise ImageDecodeError(path, str(exc)) from exc
    return _resample_ready(image)


def cover_scale(image: Image.Image, frame: FrameSize) -> Image.Image:
    """Resize so the image covers ``frame``; one side may overhang. No cropping."""
    image = _resample_ready(image)
    width, height = image.size
    if width / height <= frame.aspect:
        # in terms of aspect ratio, image too tall; fit width
        if width == frame.width:
            return image
        target = (frame.width, _round_half_up(height * frame.width / width))
    else:
        # image too wide; fit height
        if height == frame.height:
            return image
        target = (_round_half_up(width * frame.height / height), frame.height)
    return image.resize(target, CATMULL_ROM)


def classify_fit(size: tuple[int, int], frame: FrameSize) -> FitOutcome:
    width, height = size
    if width == frame.width and height == frame.height:
        return FitOutcome.FITS_EXACTLY
    if height == frame.height and width > frame.width:
        return FitOutcome.FITS_HEIGHT
    if width == frame.width and height > frame.height:
        return FitOutcome.FITS_WIDTH
    return FitOutcome.UNREACHABLE


def center_crop(image: Image.Image, frame: FrameSize) -> Image.Image:
    """Trim the overhanging side symmetrically. Expects ``cover_scale`` output."""
    width, height = image.size
    outcome = classify_fit(image.size, frame)
    if outcome is FitOutcome.FITS_EXACTLY:
        return image
    if outcome is FitOutcome.FITS_HEIGHT:
        left = width // 2 - frame.width // 2
        return image.crop((left, 0, left + frame.width, frame.height))
    if outcome is FitOutcome.FITS_WIDTH:
        top = height // 2 - frame.height // 2
        return image.crop((0, top, frame.width, top + frame.height))
    raise ImpossibleCropError(
        f"Impossible branch: {width}x{height} neither matches nor overhangs {frame.width}x{frame.height} on one side"
    )


def fit_to_frame(image: Image.Image, frame: FrameSize) -> Image.Image:
    return center_crop(cover_scale(image, frame), frame)
