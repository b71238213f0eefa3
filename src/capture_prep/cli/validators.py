#!/usr/bin/env python3
"""
Validators for Capture Prep CLI

This module provides Typer callbacks validating CLI inputs: image files,
compression qualities, dimensions and output directories.

This module is part of the Presentation Layer and should only depend on
Core Layer components, not on Integration Layer.

Sample input:
- CLI parameter values

Expected output:
- Validated and processed parameter values
- Friendly error messages
"""

import os
from typing import Optional

import typer

from capture_prep.core.constants import OUTPUT_DIR, SETTINGS_LIMITS
from capture_prep.cli.formatters import print_error


def validate_file_exists(ctx: typer.Context, value: str) -> str:
    """
    Typer callback for validating an image file exists.

    Args:
        ctx: Typer context
        value: File path from CLI

    Returns:
        str: Validated file path
    """
    if not os.path.exists(value):
        print_error(f"File not found: {value}")
        raise typer.Exit(1)

    if not os.path.isfile(value):
        print_error(f"Not a file: {value}")
        raise typer.Exit(1)

    return value


def validate_quality_option(ctx: typer.Context, value: Optional[float]) -> Optional[float]:
    """
    Typer callback for a compression quality on the 0-1 scale.

    Args:
        ctx: Typer context
        value: Quality value from CLI

    Returns:
        Optional[float]: Validated quality, or None when not given
    """
    if value is None:
        return None

    if not 0 < value <= 1:
        print_error(f"Invalid quality value: {value}. Must be greater than 0 and at most 1.")
        raise typer.Exit(1)

    return value


def validate_dimension_option(ctx: typer.Context, value: Optional[int]) -> Optional[int]:
    """
    Typer callback for a maximum width or height.

    Args:
        ctx: Typer context
        value: Dimension from CLI

    Returns:
        Optional[int]: Validated dimension, or None when not given
    """
    if value is None:
        return None

    low, high = SETTINGS_LIMITS["MIN_DIMENSION"], SETTINGS_LIMITS["MAX_DIMENSION"]
    if not low <= value <= high:
        print_error(f"Invalid dimension: {value}. Must be between {low} and {high} pixels.")
        raise typer.Exit(1)

    return value


def validate_positive_option(ctx: typer.Context, value: float) -> float:
    """Typer callback for screen and image sizes."""
    if value <= 0:
        print_error(f"Value must be positive, got {value}")
        raise typer.Exit(1)
    return value


def validate_output_dir(ctx: typer.Context, value: Optional[str]) -> str:
    """
    Typer callback for validating output directory.

    Args:
        ctx: Typer context
        value: Output directory from CLI

    Returns:
        str: Validated output directory
    """
    if value is None:
        value = OUTPUT_DIR

    try:
        os.makedirs(value, exist_ok=True)
        return value
    except OSError as e:
        print_error(f"Cannot create output directory: {value}. Error: {str(e)}")
        raise typer.Exit(1)


def validate_json_output(ctx: typer.Context, value: bool) -> bool:
    """
    Typer callback for validating JSON output option.

    Args:
        ctx: Typer context
        value: JSON output flag from CLI

    Returns:
        bool: Validated JSON output flag
    """
    ctx.ensure_object(dict)
    ctx.obj["json_output"] = value
    return value
