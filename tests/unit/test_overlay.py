import sys
import unittest
from pathlib import Path

import numpy as np
from PIL import Image, ImageFont

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from termwall_renderer import (
    CaptionFitError,
    FontResource,
    FrameSize,
    OverlayCompositor,
    TextExtent,
    fit_caption_size,
    mean_brightness,
    wash_alpha,
    wash_colour,
)


class _LinearFonts:
    """Font stand-in whose extents scale exactly with size."""

    def __init__(self, width_per_px: float, height_per_px: float) -> None:
        self.width_per_px = width_per_px
        self.height_per_px = height_per_px

    def extent(self, text: str, size: int) -> TextExtent:
        return TextExtent(width=int(size * self.width_per_px), height=int(size * self.height_per_px), left=0, top=0)


class WashTests(unittest.TestCase):
    def test_alpha_boundaries(self):
        self.assertEqual(wash_alpha(0), 48)
        self.assertEqual(wash_alpha(127), 127)
        self.assertEqual(wash_alpha(128), 127)
        self.assertEqual(wash_alpha(255), 48)

    def test_alpha_is_piecewise_linear(self):
        self.assertEqual(wash_alpha(63.5), 88)
        self.assertEqual(wash_alpha(255 - 63.5), 88)

    def test_colour_flips_at_midpoint(self):
        self.assertEqual(wash_colour(0), (255, 255, 255, 48))
        self.assertEqual(wash_colour(127), (255, 255, 255, 127))
        self.assertEqual(wash_colour(128), (0, 0, 0, 127))
        self.assertEqual(wash_colour(255), (0, 0, 0, 48))

    def test_mean_brightness_ignores_alpha(self):
        frame = Image.new("RGBA", (8, 4), (10, 20, 30, 0))
        self.assertAlmostEqual(mean_brightness(frame), 20.0)

    def test_mean_brightness_averages_pixels(self):
        frame = Image.new("RGB", (4, 1), (0, 0, 0))
        frame.paste((255, 255, 255), (0, 0, 2, 1))
        self.assertAlmostEqual(mean_brightness(frame), 127.5)


class FitCaptionTests(unittest.TestCase):
    def test_wide_text_shrinks_to_width_bound(self):
        size = fit_caption_size(_LinearFonts(20.0, 0.5), "x", FrameSize(1000, 100), margin=0)
        self.assertEqual(size, 50)

    def test_short_wide_text_grows_to_height_bound(self):
        size = fit_caption_size(_LinearFonts(2.0, 0.5), "x", FrameSize(1000, 100), margin=0)
        self.assertEqual(size, 200)

    def test_narrow_text_grows_to_width_bound(self):
        size = fit_caption_size(_LinearFonts(2.0, 0.1), "x", FrameSize(1000, 100), margin=50)
        self.assertEqual(size, 450)

    def test_too_tall_at_frame_height_is_an_invariant_violation(self):
        with self.assertRaises(CaptionFitError):
            fit_caption_size(_LinearFonts(0.1, 1.5), "x", FrameSize(1000, 100), margin=0)

    def test_empty_extent_is_rejected(self):
        with self.assertRaises(CaptionFitError):
            fit_caption_size(_LinearFonts(0.0, 0.0), " ", FrameSize(1000, 100), margin=0)


class OverlayCompositorTests(unittest.TestCase):
    def setUp(self):
        data = getattr(ImageFont.load_default(size=20), "font_bytes", None)
        if not data:
            self.skipTest("Pillow built without FreeType")
        self.fonts = FontResource(data)
        self.frame = FrameSize(400, 200)

    def test_real_font_caption_fits_bounds(self):
        size = fit_caption_size(self.fonts, "Hello world", self.frame, margin=20)
        ext = self.fonts.extent("Hello world", size)
        self.assertLessEqual(ext.width, 360)
        self.assertLessEqual(ext.height, 200)
        self.assertGreaterEqual(ext.width, 300)

    def test_dark_frame_gets_light_wash_with_clear_caption(self):
        canvas = Image.new("RGBA", self.frame.as_tuple(), (0, 0, 0, 255))
        result = OverlayCompositor(self.fonts, self.frame, margin=20, vertical_offset=0).apply(canvas, "HELLO")

        self.assertIsNotNone(result)
        self.assertEqual(result.wash, (255, 255, 255, 48))
        self.assertEqual(canvas.getpixel((0, 0))[3], 255)
        self.assertTrue(46 <= canvas.getpixel((0, 0))[0] <= 50)
        px = np.array(canvas)[:, :, 0]
        # Glyph interiors are holes in the wash, so the black frame shows through.
        self.assertTrue((px < 5).any())

    def test_bright_frame_gets_dark_wash(self):
        canvas = Image.new("RGBA", self.frame.as_tuple(), (255, 255, 255, 255))
        result = OverlayCompositor(self.fonts, self.frame, margin=20).apply(canvas, "Hi")
        self.assertEqual(result.wash, (0, 0, 0, 48))
        self.assertTrue(205 <= canvas.getpixel((0, 0))[0] <= 209)

    def test_blank_text_is_a_no_op(self):
        canvas = Image.new("RGBA", self.frame.as_tuple(), (9, 9, 9, 255))
        before = canvas.tobytes()
        self.assertIsNone(OverlayCompositor(self.fonts, self.frame).apply(canvas, "   "))
        self.assertEqual(canvas.tobytes(), before)


if __name__ == "__main__":
    unittest.main()
