"""
Tone-to-glyph mapper tests
==========================
Covers the tone curve, ramp indexing, the paint/skip decision and the
all-black / all-white scenarios.
"""

import math
import unittest

import numpy as np

from le_ascii.bitmap import SourceBitmap
from le_ascii.charsets import RAMP_DETAIL, get_ramp
from le_ascii.mapper import (
    GlyphGrid,
    contrast_factor,
    fast_contrast_factor,
    map_pixel,
    ramp_indices,
    render,
    tone_map,
)
from le_ascii.settings import AsciiSettings


def uniform_bitmap(value, width=40, height=22):
    rgb = np.full((height, width, 3), value, dtype=np.uint8)
    return SourceBitmap.from_rgb_array(rgb)


def sampled_scenario(value):
    """100x100 uniform image sampled to the default-resolution grid."""
    return uniform_bitmap(value, 100, 100).sample(40, 22)


class TestToneCurve(unittest.TestCase):

    def test_luma_weights(self):
        settings = AsciiSettings(contrast=1.0)
        gray = tone_map(np.array([100, 150, 200]), settings)
        self.assertAlmostEqual(float(gray), 0.299 * 100 + 0.587 * 150 + 0.114 * 200)

    def test_alpha_is_ignored(self):
        settings = AsciiSettings()
        opaque = tone_map(np.array([10, 200, 90, 255]), settings)
        clear = tone_map(np.array([10, 200, 90, 0]), settings)
        self.assertEqual(float(opaque), float(clear))

    def test_brightness_applies_before_contrast(self):
        settings = AsciiSettings(contrast=2.0, brightness=10)
        gray = tone_map(np.array([100, 100, 100]), settings)
        luma = 0.299 * 100 + 0.587 * 100 + 0.114 * 100
        self.assertAlmostEqual(float(gray), 2.0 * (luma + 10 - 128) + 128)

    def test_linear_curve_pivots_on_mid_gray(self):
        for contrast in (0.5, 1.0, 1.1, 3.0):
            settings = AsciiSettings(contrast=contrast)
            self.assertEqual(contrast_factor(settings), contrast)
            gray = tone_map(np.array([128, 128, 128]), settings)
            self.assertAlmostEqual(float(gray), 128.0, places=6)

    def test_output_is_clamped(self):
        settings = AsciiSettings(contrast=3.0, brightness=100)
        gray = tone_map(np.array([[0, 0, 0], [255, 255, 255]]), settings)
        self.assertTrue(np.all(gray >= 0))
        self.assertTrue(np.all(gray <= 255))

    def test_fast_curve_factor(self):
        expected = (259 * (0.5 * 255 + 255)) / (255 * (259 - 0.5 * 255))
        self.assertAlmostEqual(fast_contrast_factor(0.5), expected)

        settings = AsciiSettings(contrast=0.5, contrast_curve="fast")
        self.assertAlmostEqual(contrast_factor(settings), expected)

    def test_fast_curve_flips_above_one(self):
        """The legacy factor turns negative past contrast 259/255."""
        self.assertLess(fast_contrast_factor(1.1), 0)

        settings = AsciiSettings(contrast=1.1, contrast_curve="fast")
        grid = render(uniform_bitmap(0), settings)
        self.assertTrue(np.all(grid.indices == len(RAMP_DETAIL) - 1))


class TestRampIndices(unittest.TestCase):

    def test_endpoints(self):
        indices = ramp_indices(np.array([0.0, 255.0]), 11)
        self.assertEqual(indices.tolist(), [0, 10])

    def test_floor_not_round(self):
        # 127.5 / 255 * 2 = 1.0, 127.4 just under
        indices = ramp_indices(np.array([127.4, 127.5]), 3)
        self.assertEqual(indices.tolist(), [0, 1])

    def test_empty_ramp_rejected(self):
        with self.assertRaises(ValueError):
            ramp_indices(np.array([10.0]), 0)


class TestScenarios(unittest.TestCase):

    def test_black_image_is_all_background(self):
        grid = render(sampled_scenario(0), AsciiSettings())

        self.assertEqual(grid.shape, (22, 40))
        self.assertTrue(np.all(grid.indices == 0))
        self.assertFalse(grid.paint_mask.any())
        self.assertTrue(all(cell is None for row in grid for cell in row))

    def test_black_image_with_full_brightness(self):
        grid = render(sampled_scenario(0), AsciiSettings(brightness=100))

        gray = 1.1 * (100 - 128) + 128
        expected = math.floor(gray / 255 * (len(RAMP_DETAIL) - 1))
        self.assertEqual(expected, 34)

        self.assertTrue(np.all(grid.indices == expected))
        self.assertEqual(grid.cell(0, 0), RAMP_DETAIL[expected])

    def test_white_image_inverted_is_all_background(self):
        grid = render(sampled_scenario(255), AsciiSettings(invert=True))

        self.assertTrue(np.all(grid.indices == 0))
        self.assertIsNone(grid.cell(5, 5))

    def test_white_image_picks_densest_glyph(self):
        grid = render(sampled_scenario(255), AsciiSettings())
        self.assertTrue(np.all(grid.indices == len(RAMP_DETAIL) - 1))
        self.assertEqual(grid.cell(0, 0), "@")

    def test_invert_swaps_ramp_ends(self):
        for style in ("halftone", "detail", "ascii", "binary", "blocks"):
            ramp = get_ramp(style)
            settings = AsciiSettings(char_set_mode=style)
            inverted = settings.replace(invert=True)

            black = uniform_bitmap(0)
            self.assertTrue(np.all(render(black, settings).indices == 0))
            self.assertTrue(np.all(render(black, inverted).indices == len(ramp) - 1))


class TestRender(unittest.TestCase):

    def setUp(self):
        rng = np.random.default_rng(0)
        pixels = rng.integers(0, 256, size=(30, 50, 4), dtype=np.uint8)
        self.bitmap = SourceBitmap(pixels)

    def test_deterministic(self):
        settings = AsciiSettings(contrast=1.7, brightness=-15, char_set_mode="ascii")
        first = render(self.bitmap, settings)
        second = render(self.bitmap, settings)

        self.assertEqual(first, second)
        self.assertEqual(first.to_text(), second.to_text())
        self.assertEqual(hash(first), hash(second))

    def test_matches_per_pixel_mapping(self):
        settings = AsciiSettings(contrast=0.8, brightness=20, char_set_mode="halftone")
        grid = render(self.bitmap, settings)

        for row in range(0, 30, 7):
            for col in range(0, 50, 9):
                r, g, b, _ = self.bitmap.pixels[row, col]
                self.assertEqual(grid.cell(row, col), map_pixel(int(r), int(g), int(b), settings))

    def test_shape_follows_bitmap(self):
        grid = render(self.bitmap, AsciiSettings())
        self.assertEqual((grid.rows, grid.cols), (30, 50))
        self.assertEqual(len(grid), 30)
        self.assertEqual(len(grid.lines()), 30)
        self.assertTrue(all(len(line) == 50 for line in grid.lines()))

    def test_does_not_touch_bitmap(self):
        before = self.bitmap.pixels.copy()
        render(self.bitmap, AsciiSettings(invert=True))
        np.testing.assert_array_equal(self.bitmap.pixels, before)

    def test_only_ramp_glyphs(self):
        for style in ("halftone", "detail", "ascii", "binary", "blocks"):
            grid = render(self.bitmap, AsciiSettings(char_set_mode=style))
            self.assertTrue(set(grid.to_text().replace("\n", "")) <= set(get_ramp(style)))


class TestGlyphGrid(unittest.TestCase):

    def test_cells_and_mask(self):
        grid = GlyphGrid(indices=np.array([[0, 1], [2, 0]]), ramp=" 01")

        self.assertIsNone(grid.cell(0, 0))
        self.assertEqual(grid.cell(0, 1), "0")
        self.assertEqual(grid.cell(1, 0), "1")
        self.assertEqual(grid.paint_mask.tolist(), [[False, True], [True, False]])
        self.assertEqual(list(grid), [(None, "0"), ("1", None)])
        self.assertEqual(grid.to_text(), " 0\n1 ")

    def test_immutable(self):
        grid = GlyphGrid(indices=np.zeros((2, 2), dtype=np.intp), ramp=" 01")
        with self.assertRaises(ValueError):
            grid.indices[0, 0] = 1

    def test_caller_array_stays_writable(self):
        indices = np.zeros((2, 2), dtype=np.intp)
        grid = GlyphGrid(indices=indices, ramp=" 01")

        indices[0, 0] = 2

        self.assertTrue(indices.flags.writeable)
        self.assertIsNone(grid.cell(0, 0))

    def test_equality(self):
        a = GlyphGrid(indices=np.array([[0, 1]]), ramp=" 01")
        b = GlyphGrid(indices=np.array([[0, 1]]), ramp=" 01")
        c = GlyphGrid(indices=np.array([[0, 2]]), ramp=" 01")

        self.assertEqual(a, b)
        self.assertNotEqual(a, c)

    def test_rejects_empty_ramp(self):
        with self.assertRaises(ValueError):
            GlyphGrid(indices=np.zeros((1, 1), dtype=np.intp), ramp="")


if __name__ == "__main__":
    unittest.main()
