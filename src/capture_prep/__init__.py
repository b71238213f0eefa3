"""
Capture Prep

Adaptive preprocessing of captured photos before they are submitted to a
vision model: mask-relative cropping for OCR, size-tiered compression,
receipt watermarking and base64 encoding.

This package implements a three-layer architecture:

1. Core Layer: Pure business logic
2. Presentation Layer: CLI interface with rich formatting
3. Integration Layer: MCP wrapper for AI agent usage

Usage:
    # Direct API usage (Core Layer)
    from capture_prep.core import ImageTransformPipeline, SettingsStore
    pipeline = ImageTransformPipeline()
    result = pipeline.process_for_submission(pipeline.open_handle("photo.jpg"), SettingsStore().load())

    # CLI usage (Presentation Layer)
    # capture-prep compress photo.jpg --quality 0.7

    # MCP server usage (Integration Layer)
    # capture-prep-mcp start
"""

__version__ = "1.0.0"

from capture_prep.core import (
    ImageTransformPipeline,
    WatermarkComposer,
    ScreenMaskGeometry,
    SettingsStore,
    compute_crop_rectangle,
    select_strategy,
    generate_receipt_id,
)

__all__ = [
    'ImageTransformPipeline',
    'WatermarkComposer',
    'ScreenMaskGeometry',
    'SettingsStore',
    'compute_crop_rectangle',
    'select_strategy',
    'generate_receipt_id',
    '__version__',
]
