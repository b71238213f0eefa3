#!/usr/bin/env python3
"""
Compression Planning for Capture Prep Module

This module selects the quality / max-dimension strategy handed to the
compression codec. It looks only at the input's byte size and the active
settings, never at image content, and does not compress anything itself.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- file_byte_size=3_500_000
- settings=CompressionSettings(mode="tiered")

Expected output:
- CompressionStrategy(quality=0.8, max_width=1920, max_height=1920,
  keep_metadata=False, tier="medium")
"""

from typing import Any, Dict, Optional

from loguru import logger

from capture_prep.core.constants import TIER_THRESHOLDS
from capture_prep.core.errors import InputError
from capture_prep.core.models import CompressionSettings, CompressionStrategy


def select_tier(file_byte_size: int) -> str:
    """
    Size tier for a file: light below 1 MiB, medium up to (not including)
    5 MiB, aggressive from 5 MiB.
    """
    if file_byte_size < TIER_THRESHOLDS["LIGHT_BELOW"]:
        return "light"
    if file_byte_size < TIER_THRESHOLDS["AGGRESSIVE_FROM"]:
        return "medium"
    return "aggressive"


def select_strategy(
    file_byte_size: int,
    settings: CompressionSettings,
    overrides: Optional[Dict[str, Any]] = None,
) -> CompressionStrategy:
    """
    Selects the compression strategy for a file of the given size.

    Args:
        file_byte_size: Size of the input file in bytes
        settings: Active compression settings
        overrides: Optional per-call quality/max_width/max_height/keep_metadata

    Returns:
        CompressionStrategy: Strategy taken verbatim from the settings

    Raises:
        InputError: If the byte size is negative
    """
    if file_byte_size < 0:
        raise InputError(f"File size must not be negative, got {file_byte_size}")

    if settings.mode == "fixed":
        tier = "fixed"
        quality = settings.quality
    else:
        tier = select_tier(file_byte_size)
        quality = getattr(settings, f"{tier}_quality")

    values: Dict[str, Any] = {
        "quality": quality,
        "max_width": settings.max_width,
        "max_height": settings.max_height,
        "keep_metadata": settings.keep_metadata,
        "tier": tier,
    }

    if overrides:
        # None means "not overridden"
        values.update({k: v for k, v in overrides.items() if v is not None and k in values})

    strategy = CompressionStrategy(**values)
    logger.debug(f"Selected {strategy.tier} strategy for {file_byte_size} bytes: {strategy}")
    return strategy


def fallback_strategy(settings: CompressionSettings, strategy: CompressionStrategy) -> CompressionStrategy:
    """Strategy recorded when the secondary resize codec produced the output."""
    return CompressionStrategy(
        quality=settings.fallback_quality,
        max_width=strategy.max_width,
        max_height=strategy.max_height,
        keep_metadata=False,
        tier="fallback",
    )


if __name__ == "__main__":
    """Validate strategy selection at the tier boundaries"""
    import sys

    all_validation_failures = []
    total_tests = 0

    tiered = CompressionSettings(mode="tiered")
    mib = 1024 * 1024

    # Test 1: Tier boundaries
    total_tests += 1
    cases = {mib - 1: "light", mib: "medium", 5 * mib - 1: "medium", 5 * mib: "aggressive"}
    for size, expected in cases.items():
        tier = select_strategy(size, tiered).tier
        if tier != expected:
            all_validation_failures.append(f"Size {size}: expected {expected}, got {tier}")

    # Test 2: Fixed mode ignores size
    total_tests += 1
    fixed = CompressionSettings(mode="fixed", quality=0.7)
    if select_strategy(10 * mib, fixed).quality != 0.7:
        all_validation_failures.append("Fixed mode should always use the fixed quality")

    if all_validation_failures:
        print(f"❌ VALIDATION FAILED - {len(all_validation_failures)} of {total_tests} tests failed:")
        for failure in all_validation_failures:
            print(f"  - {failure}")
        sys.exit(1)
    else:
        print(f"✅ VALIDATION PASSED - All {total_tests} tests produced expected results")
        print("Compression planning functions are validated and ready for use")
        sys.exit(0)
