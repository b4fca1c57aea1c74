"""Single-line text with a solid outline built from a dilated glyph mask."""

from __future__ import annotations

from PIL import Image, ImageDraw, ImageFilter, ImageFont

from .fonts import FontResource
from .models import RenderSpec, Rgba


def render_glyph_mask(
    size: tuple[int, int],
    text: str,
    font: ImageFont.FreeTypeFont,
    xy: tuple[int, int],
) -> Image.Image:
    mask = Image.new("L", size, 0)
    ImageDraw.Draw(mask).text(xy, text, font=font, fill=255)
    return mask


def dilate(mask: Image.Image, radius: int) -> Image.Image:
    """Grow every lit pixel into a square of side ``2 * radius + 1`` (L-infinity norm).

    Only the glyph bounding box, padded by ``radius``, is filtered.
    """
    if radius <= 0:
        return mask.copy()
    bbox = mask.getbbox()
    if bbox is None:
        return mask.copy()
    left, top, right, bottom = bbox
    box = (
        max(0, left - radius),
        max(0, top - radius),
        min(mask.width, right + radius),
        min(mask.height, bottom + radius),
    )
    grown = Image.new("L", mask.size, 0)
    grown.paste(mask.crop(box).filter(ImageFilter.MaxFilter(2 * radius + 1)), box[:2])
    return grown


def composite_outlined_mask(
    canvas: Image.Image,
    mask: Image.Image,
    fill: Rgba,
    outline: Rgba,
    outline_width: int,
) -> None:
    if canvas.mode != "RGBA":
        raise ValueError("Outlined text requires an RGBA canvas")
    if mask.size != canvas.size:
        raise ValueError("Glyph mask must match the canvas size")

    lit = dilate(mask, outline_width).point(lambda v: 255 if v else 0)
    layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    layer.paste(outline, (0, 0), lit)
    canvas.alpha_composite(layer)

    # Fill on top of the outline, weighted by glyph coverage.
    canvas.paste(fill, (0, 0), mask)


def draw_text_with_outline(canvas: Image.Image, spec: RenderSpec, fonts: FontResource) -> None:
    font = fonts.at(spec.size)
    mask = render_glyph_mask(canvas.size, spec.text, font, (spec.x, spec.y))
    composite_outlined_mask(canvas, mask, spec.fill, spec.outline, spec.outline_width)
