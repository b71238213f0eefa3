#!/usr/bin/env python3
"""
Utility Functions for Capture Prep Module

This module provides common utility functions used by other core modules.
It includes functions for location validation, file naming, ratio
computation and system information.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- normalize_location("file:///tmp/photo.jpg")
- compute_ratio_percent(2_000_000, 500_000)

Expected output:
- "/tmp/photo.jpg"
- 75.0
"""

import os
import time
import uuid
import platform
from typing import Dict, Optional

from loguru import logger

from capture_prep.core.errors import InputError

FILE_SCHEME = "file://"


def normalize_location(location: Optional[str]) -> str:
    """
    Validates an image location and strips a file:// scheme if present.

    Args:
        location: File path or file:// URI

    Returns:
        str: Plain filesystem path

    Raises:
        InputError: If the location is empty or blank
    """
    if location is None or not str(location).strip():
        raise InputError("Image location is empty")

    location = str(location).strip()
    if location.startswith(FILE_SCHEME):
        location = location[len(FILE_SCHEME):]
    return location


def generate_filename(prefix: str = "image", extension: str = "jpg") -> str:
    """
    Generates a unique filename with timestamp.

    Args:
        prefix: Filename prefix
        extension: File extension without dot

    Returns:
        str: Generated filename
    """
    timestamp = int(time.time() * 1000)
    return f"{prefix}_{timestamp}_{uuid.uuid4().hex[:6]}.{extension}"


def ensure_directory(directory: str) -> bool:
    """
    Ensures directory exists, creating it if necessary.

    Args:
        directory: Directory path

    Returns:
        bool: True if successful, False otherwise
    """
    try:
        os.makedirs(directory, exist_ok=True)
        return True
    except OSError as e:
        logger.error(f"Failed to create directory {directory}: {str(e)}")
        return False


def compute_ratio_percent(original_size: int, compressed_size: int) -> float:
    """
    Size reduction in percent, rounded to one decimal.

    Negative when the output grew. An empty original yields 0.0.
    """
    if original_size <= 0:
        return 0.0
    return round((original_size - compressed_size) / original_size * 100, 1)


def round_half_up(value: float) -> int:
    """Round a non-negative value to the nearest integer, halves going up."""
    return int(value + 0.5)


def get_system_info() -> Dict[str, str]:
    """
    Get system information for debugging.

    Returns:
        Dict[str, str]: System information
    """
    return {
        "platform": platform.system(),
        "python_version": platform.python_version(),
        "architecture": platform.architecture()[0],
    }
