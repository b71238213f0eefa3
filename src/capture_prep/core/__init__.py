"""
Core Layer for Capture Prep Module

This package contains the core business logic for preparing captured
images for vision-model submission: crop geometry, compression planning,
the transform pipeline and watermark composition.

The core layer is designed to be:
1. Independent of UI or integration concerns
2. Fully testable in isolation
3. Focused on business logic only

Usage:
    from capture_prep.core import ImageTransformPipeline, ScreenMaskGeometry, SettingsStore
    pipeline = ImageTransformPipeline()
    handle = pipeline.open_handle("photo.jpg")
    final = pipeline.process_for_ocr(handle, ScreenMaskGeometry.for_id_card(400, 800))
    result = pipeline.process_for_submission(handle, SettingsStore().load())
"""

from capture_prep.core.constants import (
    MASK_SETTINGS,
    OCR_SETTINGS,
    TIER_THRESHOLDS,
    DEFAULT_COMPRESSION_SETTINGS,
    WATERMARK_SETTINGS,
)

from capture_prep.core.errors import (
    CapturePrepError,
    InputError,
    ProbeError,
    CodecError,
    CompressionError,
    CaptureError,
    EncodingError,
    SettingsError,
)

from capture_prep.core.models import (
    ImageHandle,
    ScreenMaskGeometry,
    CropRectangle,
    CompressionStrategy,
    CompressionSettings,
    CompressionResult,
    WatermarkRequest,
    WatermarkResult,
    ProcessedImage,
)

from capture_prep.core.geometry import compute_crop_rectangle, compute_resize_target
from capture_prep.core.compression import select_strategy, select_tier
from capture_prep.core.codecs import PillowImageBackend
from capture_prep.core.watermark import (
    WatermarkComposer,
    PillowCaptureSurface,
    generate_receipt_id,
    add_receipt_id_to_image,
)
from capture_prep.core.pipeline import ImageTransformPipeline
from capture_prep.core.settings import SettingsStore, validate_settings
from capture_prep.core.specimens import SpecimenStore
from capture_prep.core.log_utils import configure_logging, truncate_large_value

__all__ = [
    # Constants
    'MASK_SETTINGS',
    'OCR_SETTINGS',
    'TIER_THRESHOLDS',
    'DEFAULT_COMPRESSION_SETTINGS',
    'WATERMARK_SETTINGS',

    # Errors
    'CapturePrepError',
    'InputError',
    'ProbeError',
    'CodecError',
    'CompressionError',
    'CaptureError',
    'EncodingError',
    'SettingsError',

    # Models
    'ImageHandle',
    'ScreenMaskGeometry',
    'CropRectangle',
    'CompressionStrategy',
    'CompressionSettings',
    'CompressionResult',
    'WatermarkRequest',
    'WatermarkResult',
    'ProcessedImage',

    # Pipeline
    'compute_crop_rectangle',
    'compute_resize_target',
    'select_strategy',
    'select_tier',
    'PillowImageBackend',
    'WatermarkComposer',
    'PillowCaptureSurface',
    'generate_receipt_id',
    'add_receipt_id_to_image',
    'ImageTransformPipeline',

    # Storage
    'SettingsStore',
    'validate_settings',
    'SpecimenStore',

    # Logging
    'configure_logging',
    'truncate_large_value',
]
