"""Renderer package for wallpaper frame composition."""

from .errors import (
    CaptionFitError,
    FontDecodeError,
    ImageDecodeError,
    ImpossibleCropError,
    InvariantViolation,
    RenderError,
    ResourceError,
)
from .fonts import FontResource
from .geometry import center_crop, classify_fit, cover_scale, fit_to_frame, load_image
from .models import FitOutcome, FrameSize, RenderSpec, TextExtent
from .overlay import OverlayCompositor, OverlayResult, fit_caption_size, mean_brightness, wash_alpha, wash_colour
from .text import composite_outlined_mask, dilate, draw_text_with_outline, render_glyph_mask

__all__ = [
    "CaptionFitError",
    "FitOutcome",
    "FontDecodeError",
    "FontResource",
    "FrameSize",
    "ImageDecodeError",
    "ImpossibleCropError",
    "InvariantViolation",
    "OverlayCompositor",
    "OverlayResult",
    "RenderError",
    "RenderSpec",
    "ResourceError",
    "TextExtent",
    "center_crop",
    "classify_fit",
    "composite_outlined_mask",
    "cover_scale",
    "dilate",
    "draw_text_with_outline",
    "fit_caption_size",
    "fit_to_frame",
    "load_image",
    "mean_brightness",
    "render_glyph_mask",
    "wash_alpha",
    "wash_colour",
]
