#!/usr/bin/env python3
"""
Crop Geometry for Capture Prep Module

This module maps the on-screen capture guide (in logical pixels) to a crop
window in the captured image's native pixel space. Captured photos are
usually much larger than the preview and may be stored rotated relative to
it, so the scale factors swap axes when the image and screen orientations
disagree.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- image_size=(3000, 2000)
- mask=ScreenMaskGeometry.for_id_card(400, 800)
- padding_horizontal=0.03, padding_vertical=0.05

Expected output:
- CropRectangle(x=1407, y=0, width=901, height=1980)
"""

import math
from typing import Tuple

from loguru import logger

from capture_prep.core.constants import MASK_SETTINGS
from capture_prep.core.errors import InputError
from capture_prep.core.models import CropRectangle, ScreenMaskGeometry
from capture_prep.core.utils import round_half_up

MAX_PADDING_FRACTION = 0.5


def is_orientation_mismatch(image_size: Tuple[int, int], mask: ScreenMaskGeometry) -> bool:
    """True when the image is landscape and the screen portrait, or the reverse."""
    image_width, image_height = image_size
    return (image_width > image_height) != mask.is_screen_landscape


def _validate_padding(name: str, value: float) -> float:
    if value >= MAX_PADDING_FRACTION:
        raise InputError(f"{name} must be below {MAX_PADDING_FRACTION}, got {value}")
    # Negative padding means no expansion
    return max(0.0, value)


def _clamp_axis(origin: float, extent: float, limit: int) -> Tuple[int, int]:
    start = min(max(0, math.floor(origin)), limit - 1)
    length = min(limit - start, math.floor(extent))
    return start, max(1, length)


def compute_crop_rectangle(
    image_size: Tuple[int, int],
    mask: ScreenMaskGeometry,
    padding_horizontal: float = MASK_SETTINGS["PADDING_HORIZONTAL"],
    padding_vertical: float = MASK_SETTINGS["PADDING_VERTICAL"],
) -> CropRectangle:
    """
    Computes the native-resolution crop window for an on-screen mask.

    The mask-aligned window is expanded outward by the padding fractions:
    the origin moves back by the padding (floored at 0) and the extent
    grows by twice the padding, then the window is clamped to the image.

    Args:
        image_size: Native (width, height) of the captured image
        mask: Capture guide and screen geometry in logical pixels
        padding_horizontal: Outward expansion as a fraction of the crop width
        padding_vertical: Outward expansion as a fraction of the crop height

    Returns:
        CropRectangle: Integer window inside the image bounds

    Raises:
        InputError: On non-positive image dimensions or padding >= 0.5
    """
    image_width, image_height = image_size
    if image_width <= 0 or image_height <= 0:
        raise InputError(f"Image dimensions must be positive, got {image_width}x{image_height}")

    padding_horizontal = _validate_padding("padding_horizontal", padding_horizontal)
    padding_vertical = _validate_padding("padding_vertical", padding_vertical)

    mismatch = is_orientation_mismatch(image_size, mask)

    if mismatch:
        scale_x = image_height / mask.screen_width
        scale_y = image_width / mask.screen_height
        base_width = mask.mask_height * scale_y
        base_height = mask.mask_width * scale_x
        origin_x = mask.mask_top * scale_x
        origin_y = mask.mask_left * scale_y
    else:
        scale_x = image_width / mask.screen_width
        scale_y = image_height / mask.screen_height
        base_width = mask.mask_width * scale_x
        base_height = mask.mask_height * scale_y
        origin_x = mask.mask_left * scale_x
        origin_y = mask.mask_top * scale_y

    padding_x = base_width * padding_horizontal
    padding_y = base_height * padding_vertical

    x, width = _clamp_axis(origin_x - padding_x, base_width + padding_x * 2, image_width)
    y, height = _clamp_axis(origin_y - padding_y, base_height + padding_y * 2, image_height)

    logger.debug(
        f"Crop geometry: image={image_width}x{image_height}, mismatch={mismatch}, "
        f"scale=({scale_x:.3f}, {scale_y:.3f}), base=({base_width:.1f}, {base_height:.1f}), "
        f"padding=({padding_x:.1f}, {padding_y:.1f})"
    )

    return CropRectangle(x=x, y=y, width=width, height=height)


def compute_resize_target(width: int, height: int, max_width: int) -> Tuple[int, int]:
    """
    Proportional downscale so the width does not exceed max_width.

    Dimensions at or under the ceiling are returned unchanged.
    """
    if width <= max_width:
        return width, height
    ratio = max_width / width
    return max_width, max(1, round_half_up(height * ratio))


if __name__ == "__main__":
    """Validate crop geometry with the reference capture scenario"""
    import sys

    all_validation_failures = []
    total_tests = 0

    # Test 1: Landscape photo taken on a portrait screen
    total_tests += 1
    portrait_mask = ScreenMaskGeometry.for_id_card(400, 800)
    rect = compute_crop_rectangle((3000, 2000), portrait_mask)
    if rect.x + rect.width > 3000 or rect.y + rect.height > 2000:
        all_validation_failures.append(f"Mismatched crop out of bounds: {rect}")

    # Test 2: Matching orientations produce a card-shaped window
    total_tests += 1
    rect = compute_crop_rectangle((2000, 4000), portrait_mask, 0, 0)
    if abs(rect.width / rect.height - 1 / MASK_SETTINGS["ASPECT_RATIO"]) > 0.01:
        all_validation_failures.append(f"Matched crop is not card-shaped: {rect}")

    # Test 3: Resize ceiling
    total_tests += 1
    if compute_resize_target(4000, 3000, 2000) != (2000, 1500):
        all_validation_failures.append("Resize target for 4000x3000 should be 2000x1500")

    if all_validation_failures:
        print(f"❌ VALIDATION FAILED - {len(all_validation_failures)} of {total_tests} tests failed:")
        for failure in all_validation_failures:
            print(f"  - {failure}")
        sys.exit(1)
    else:
        print(f"✅ VALIDATION PASSED - All {total_tests} tests produced expected results")
        print("Crop geometry functions are validated and ready for use")
        sys.exit(0)
