#!/usr/bin/env python3
"""
Unit tests for core/geometry.py
"""

import unittest

from capture_prep.core.errors import InputError
from capture_prep.core.geometry import (
    compute_crop_rectangle,
    compute_resize_target,
    is_orientation_mismatch
)
from capture_prep.core.models import CropRectangle, ScreenMaskGeometry

# Portrait screen with a 360x224 guide; all values are exact in binary
PORTRAIT_MASK = ScreenMaskGeometry(
    mask_width=360, mask_height=224, mask_left=20, mask_top=288,
    screen_width=400, screen_height=800
)
LANDSCAPE_MASK = ScreenMaskGeometry(
    mask_width=224, mask_height=360, mask_left=288, mask_top=20,
    screen_width=800, screen_height=400
)


def as_tuple(rect: CropRectangle):
    return rect.x, rect.y, rect.width, rect.height


class TestCropRectangle(unittest.TestCase):
    """Test cases for mask-relative crop geometry"""

    def test_matching_orientation_scales_mask(self):
        """Portrait image on portrait screen scales each axis independently"""
        rect = compute_crop_rectangle((800, 1600), PORTRAIT_MASK, 0, 0)
        self.assertEqual(as_tuple(rect), (40, 576, 720, 448))

    def test_padding_expands_outward(self):
        """Padding moves the origin back and grows the extent by twice the padding"""
        rect = compute_crop_rectangle((800, 1600), PORTRAIT_MASK, 0.03125, 0.0625)
        self.assertEqual(as_tuple(rect), (17, 548, 765, 504))

    def test_orientation_mismatch_swaps_axes(self):
        """Landscape image on portrait screen maps the mask with swapped axes"""
        self.assertTrue(is_orientation_mismatch((1600, 800), PORTRAIT_MASK))
        rect = compute_crop_rectangle((1600, 800), PORTRAIT_MASK, 0, 0)
        self.assertEqual(as_tuple(rect), (576, 40, 448, 720))

    def test_reference_capture_scenario(self):
        """3000x2000 photo taken on a 400x800 screen with default padding"""
        mask = ScreenMaskGeometry.for_id_card(400, 800)
        rect = compute_crop_rectangle((3000, 2000), mask, 0.03, 0.05)
        self.assertEqual(as_tuple(rect), (1407, 0, 901, 1980))

    def test_transpose_symmetry(self):
        """Swapping image, screen, mask and paddings transposes the result"""
        rect = compute_crop_rectangle((800, 1600), PORTRAIT_MASK, 0.03125, 0.0625)
        transposed = compute_crop_rectangle((1600, 800), LANDSCAPE_MASK, 0.0625, 0.03125)
        self.assertEqual(as_tuple(transposed), (rect.y, rect.x, rect.height, rect.width))

    def test_rectangle_stays_in_bounds(self):
        """Crop window never leaves the image"""
        masks = [
            PORTRAIT_MASK,
            LANDSCAPE_MASK,
            ScreenMaskGeometry.for_id_card(390, 844),
            ScreenMaskGeometry(mask_width=400, mask_height=800, mask_left=0, mask_top=0,
                               screen_width=400, screen_height=800),
        ]
        sizes = [(3000, 2000), (2000, 3000), (4032, 3024), (640, 480), (1, 1), (5, 3000)]
        for mask in masks:
            for size in sizes:
                for padding in (0, 0.03, 0.25, 0.49):
                    rect = compute_crop_rectangle(size, mask, padding, padding)
                    self.assertGreaterEqual(rect.x, 0)
                    self.assertGreaterEqual(rect.y, 0)
                    self.assertGreaterEqual(rect.width, 1)
                    self.assertGreaterEqual(rect.height, 1)
                    self.assertLessEqual(rect.x + rect.width, size[0], f"{size} {mask} {padding}")
                    self.assertLessEqual(rect.y + rect.height, size[1], f"{size} {mask} {padding}")

    def test_full_screen_mask_clamps_to_image(self):
        """A mask covering the screen plus padding clamps to the full image"""
        mask = ScreenMaskGeometry(mask_width=400, mask_height=800, mask_left=0, mask_top=0,
                                  screen_width=400, screen_height=800)
        rect = compute_crop_rectangle((800, 1600), mask, 0.03125, 0.0625)
        self.assertEqual(as_tuple(rect), (0, 0, 800, 1600))

    def test_padding_is_monotonic(self):
        """More padding never yields a smaller window"""
        previous = None
        for padding in (0, 0.01, 0.03, 0.05, 0.1, 0.2):
            rect = compute_crop_rectangle((3000, 2000), ScreenMaskGeometry.for_id_card(400, 800), padding, padding)
            if previous is not None:
                self.assertLessEqual(rect.x, previous.x)
                self.assertLessEqual(rect.y, previous.y)
                self.assertGreaterEqual(rect.x + rect.width, previous.x + previous.width)
                self.assertGreaterEqual(rect.y + rect.height, previous.y + previous.height)
            previous = rect

    def test_negative_padding_means_no_padding(self):
        """Negative padding is treated as zero"""
        self.assertEqual(
            compute_crop_rectangle((800, 1600), PORTRAIT_MASK, -0.1, -0.2),
            compute_crop_rectangle((800, 1600), PORTRAIT_MASK, 0, 0)
        )

    def test_invalid_inputs(self):
        """Non-positive dimensions and half-size padding are rejected"""
        with self.assertRaises(InputError):
            compute_crop_rectangle((0, 100), PORTRAIT_MASK)
        with self.assertRaises(InputError):
            compute_crop_rectangle((100, -1), PORTRAIT_MASK)
        with self.assertRaises(InputError):
            compute_crop_rectangle((800, 1600), PORTRAIT_MASK, 0.5, 0)
        with self.assertRaises(InputError):
            compute_crop_rectangle((800, 1600), PORTRAIT_MASK, 0, 0.75)

    def test_mask_must_fit_screen(self):
        """Mask geometry outside the screen is rejected"""
        with self.assertRaises(ValueError):
            ScreenMaskGeometry(mask_width=300, mask_height=100, mask_left=200, mask_top=0,
                               screen_width=400, screen_height=800)


class TestResizeTarget(unittest.TestCase):
    """Test cases for the OCR width ceiling"""

    def test_downscales_wide_images(self):
        self.assertEqual(compute_resize_target(4000, 3000, 2000), (2000, 1500))
        self.assertEqual(compute_resize_target(3000, 1999, 2000), (2000, 1333))

    def test_leaves_narrow_images(self):
        self.assertEqual(compute_resize_target(2000, 3000, 2000), (2000, 3000))
        self.assertEqual(compute_resize_target(901, 1980, 2000), (901, 1980))

    def test_never_collapses_height(self):
        self.assertEqual(compute_resize_target(100000, 1, 2000), (2000, 1))


if __name__ == "__main__":
    unittest.main()
