#!/usr/bin/env python3
"""
Constants for Capture Prep Module

This module defines constants used throughout the image preprocessing
pipeline, ensuring consistent configuration across the application.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- Optional environment variables (or a .env file):
  CAPTURE_PREP_SETTINGS_PATH="~/.capture_prep/settings.json"
  CAPTURE_PREP_OUTPUT_DIR="processed"

Expected output:
- None (module contains only constants)
"""

import os
from typing import Dict, Any

from dotenv import load_dotenv

load_dotenv()

MIB: int = 1024 * 1024

# ID-card capture guide, relative to the screen
MASK_SETTINGS: Dict[str, float] = {
    "WIDTH_RATIO": 0.9,  # Mask width as a fraction of screen width
    "ASPECT_RATIO": 0.63,  # Mask height as a fraction of mask width
    "PADDING_HORIZONTAL": 0.03,  # Outward crop expansion, horizontal
    "PADDING_VERTICAL": 0.05,  # Outward crop expansion, vertical
}

# OCR preparation
OCR_SETTINGS: Dict[str, Any] = {
    "MAX_WIDTH": 2000,  # Width ceiling for text extraction
    "QUALITY": 85,  # Output JPEG quality (0-100)
    "FORMAT": "JPEG",
}

# Size-tier thresholds in bytes
TIER_THRESHOLDS: Dict[str, int] = {
    "LIGHT_BELOW": 1 * MIB,
    "AGGRESSIVE_FROM": 5 * MIB,
}

# Compression defaults merged under stored settings
DEFAULT_COMPRESSION_SETTINGS: Dict[str, Any] = {
    "mode": "tiered",
    "quality": 0.8,
    "light_quality": 0.85,
    "medium_quality": 0.8,
    "aggressive_quality": 0.6,
    "max_width": 1920,
    "max_height": 1920,
    "keep_metadata": False,
    "image_format": "JPEG",
}

# Bounds enforced by settings validation
SETTINGS_LIMITS: Dict[str, Any] = {
    "MIN_DIMENSION": 100,
    "MAX_DIMENSION": 4000,
    "IMAGE_FORMATS": ("JPEG", "PNG"),
    "COMPRESSION_MODES": ("fixed", "tiered"),
}

# Watermark composition
WATERMARK_SETTINGS: Dict[str, Any] = {
    "MAX_WIDTH": 800,  # Render width cap
    "MARGIN": 12,  # Distance of the label box from the bottom-right corner
    "PADDING_X": 6,
    "PADDING_Y": 3,
    "FONT_SIZE": 12,
    "TEXT_COLOR": (255, 255, 255, 255),
    "BOX_COLOR": (0, 0, 0, 153),  # rgba(0,0,0,0.6)
    "BOX_RADIUS": 3,
    "CAPTURE_QUALITY": 90,
    "SETTLE_DELAY": 0.5,  # Seconds between the load signal and capture
    "LOAD_TIMEOUT": 10.0,  # Seconds to wait for the load signal
}

RECEIPT_ID_PREFIX: str = "R"

# Paths
SETTINGS_PATH: str = os.path.expanduser(
    os.environ.get("CAPTURE_PREP_SETTINGS_PATH", "~/.capture_prep/settings.json")
)
SPECIMENS_PATH: str = os.path.expanduser(
    os.environ.get("CAPTURE_PREP_SPECIMENS_PATH", "~/.capture_prep/specimens.json")
)
OUTPUT_DIR: str = os.environ.get("CAPTURE_PREP_OUTPUT_DIR", "processed")

# Logging settings
LOG_LEVEL: str = os.environ.get("CAPTURE_PREP_LOG_LEVEL", "INFO")
LOG_MAX_STR_LEN: int = 100  # Maximum string length for truncated logging


if __name__ == "__main__":
    """Validate module constants"""
    import sys

    all_validation_failures = []
    total_tests = 0

    # Test 1: Padding fractions are in [0, 0.5)
    total_tests += 1
    for key in ("PADDING_HORIZONTAL", "PADDING_VERTICAL"):
        if not 0 <= MASK_SETTINGS[key] < 0.5:
            all_validation_failures.append(f"MASK_SETTINGS[{key}] out of range: {MASK_SETTINGS[key]}")

    # Test 2: Tier thresholds are ordered
    total_tests += 1
    if not TIER_THRESHOLDS["LIGHT_BELOW"] < TIER_THRESHOLDS["AGGRESSIVE_FROM"]:
        all_validation_failures.append(f"Tier thresholds not ordered: {TIER_THRESHOLDS}")

    # Test 3: Default qualities are ordered light >= medium >= aggressive
    total_tests += 1
    d = DEFAULT_COMPRESSION_SETTINGS
    if not d["light_quality"] >= d["medium_quality"] >= d["aggressive_quality"]:
        all_validation_failures.append("Default tier qualities are not ordered")

    if all_validation_failures:
        print(f"❌ VALIDATION FAILED - {len(all_validation_failures)} of {total_tests} tests failed:")
        for failure in all_validation_failures:
            print(f"  - {failure}")
        sys.exit(1)
    else:
        print(f"✅ VALIDATION PASSED - All {total_tests} tests produced expected results")
        print("Constants are valid and ready for use")
        sys.exit(0)
