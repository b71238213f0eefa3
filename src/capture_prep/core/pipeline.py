#!/usr/bin/env python3
"""
Image Transform Pipeline for Capture Prep Module

This module runs one image end-to-end through preprocessing before it is
submitted to a vision model:

1. OCR path: probe -> mask crop -> resize to the OCR width ceiling
2. Submission path: byte-size probe -> strategy selection -> compression
   (one fallback to the resize codec) -> diagnostics
3. Payload builders adding base64 encoding and, for receipts, a watermark

Each step calls the backend primitives in sequence; nothing runs
concurrently and no state is shared between runs.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- pipeline.process_for_submission(ImageHandle(location="photo.jpg", width=4080, height=3060),
                                  CompressionSettings())

Expected output:
- CompressionResult(output_handle=..., original_byte_size=3500000,
  compressed_byte_size=410000, ratio_percent=88.3, strategy_used=..., used_fallback_codec=False)
"""

from typing import Any, Dict, Optional

from loguru import logger

from capture_prep.core.codecs import PillowImageBackend
from capture_prep.core.compression import fallback_strategy, select_strategy
from capture_prep.core.constants import MASK_SETTINGS, OCR_SETTINGS
from capture_prep.core.errors import CompressionError
from capture_prep.core.geometry import compute_crop_rectangle, compute_resize_target
from capture_prep.core.log_utils import truncate_large_value
from capture_prep.core.models import (
    CompressionResult,
    CompressionSettings,
    ImageHandle,
    ProcessedImage,
    ScreenMaskGeometry,
)
from capture_prep.core.utils import compute_ratio_percent, normalize_location
from capture_prep.core.watermark import WatermarkComposer, add_receipt_id_to_image


class ImageTransformPipeline:
    """Sequential preprocessing over a pluggable imaging backend."""

    def __init__(self, backend=None):
        self.backend = backend or PillowImageBackend()

    def open_handle(self, location: str) -> ImageHandle:
        """Probe a location into an ImageHandle."""
        location = normalize_location(location)
        width, height = self.backend.probe_dimensions(location)
        return ImageHandle(location=location, width=width, height=height)

    def process_for_ocr(
        self,
        raw_handle: ImageHandle,
        mask: ScreenMaskGeometry,
        padding_horizontal: float = MASK_SETTINGS["PADDING_HORIZONTAL"],
        padding_vertical: float = MASK_SETTINGS["PADDING_VERTICAL"],
    ) -> ImageHandle:
        """
        Crop to the capture guide and bound the width for text extraction.

        A failing crop codec is not fatal: the uncropped original is used.

        Args:
            raw_handle: Captured image
            mask: Capture guide geometry active when the photo was taken
            padding_horizontal: Outward crop expansion, horizontal fraction
            padding_vertical: Outward crop expansion, vertical fraction

        Returns:
            ImageHandle: Final image, at most OCR_SETTINGS["MAX_WIDTH"] wide

        Raises:
            InputError: If the location is empty
            ProbeError: If the image dimensions cannot be read
            CodecError: If the final resize fails
        """
        location = normalize_location(raw_handle.location)
        logger.info(f"Processing image for OCR: {location}")

        image_size = self.backend.probe_dimensions(location)
        logger.info(f"Original image size: {image_size[0]}x{image_size[1]}")

        rect = compute_crop_rectangle(image_size, mask, padding_horizontal, padding_vertical)
        logger.info(f"Crop parameters: x={rect.x}, y={rect.y}, width={rect.width}, height={rect.height}")

        try:
            cropped = self.backend.crop(location, rect)
        except Exception as e:
            logger.warning(f"Crop failed, continuing with original image: {str(e)}")
            cropped = location

        cropped_width, cropped_height = self.backend.probe_dimensions(cropped)
        target_width, target_height = compute_resize_target(
            cropped_width, cropped_height, OCR_SETTINGS["MAX_WIDTH"]
        )
        logger.info(f"Resizing {cropped_width}x{cropped_height} to {target_width}x{target_height}")

        final = self.backend.resize(
            cropped,
            target_width,
            target_height,
            OCR_SETTINGS["FORMAT"],
            OCR_SETTINGS["QUALITY"],
            0,
            None,
            mode="stretch",
            only_scale_down=False,
        )
        logger.info(f"Final processed image: {final}")
        return ImageHandle(location=final, width=target_width, height=target_height)

    def process_for_submission(
        self,
        raw_handle: ImageHandle,
        settings: CompressionSettings,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> CompressionResult:
        """
        Compress an image using the strategy its byte size selects.

        When the compression codec fails, the resize codec is tried once
        with the fallback quality, contain scaling and scale-down only.

        Args:
            raw_handle: Image to compress
            settings: Compression settings snapshot for this run
            overrides: Optional quality/max_width/max_height/keep_metadata

        Returns:
            CompressionResult: Output handle plus size diagnostics; the
            ratio is negative when the output grew

        Raises:
            InputError: If the location is empty
            ProbeError: If a byte-size or dimension probe fails
            CompressionError: If both codecs failed
        """
        location = normalize_location(raw_handle.location)
        original_size = self.backend.probe_byte_size(location)
        logger.info(f"Original file size: {original_size} bytes")

        strategy = select_strategy(original_size, settings, overrides)
        used_fallback = False

        try:
            output = self.backend.compress(location, strategy, output_format="jpg")
        except Exception as e:
            logger.error(f"Error compressing image: {str(e)}")
            logger.info("Falling back to resize codec...")
            strategy = fallback_strategy(settings, strategy)
            try:
                output = self.backend.resize(
                    location,
                    strategy.max_width,
                    strategy.max_height,
                    "JPEG",
                    strategy.quality_percent,
                    0,
                    None,
                    mode="contain",
                    only_scale_down=True,
                )
            except Exception as fallback_error:
                logger.error(f"Fallback compression also failed: {str(fallback_error)}")
                raise CompressionError(f"Image compression failed: {str(e)}") from fallback_error
            used_fallback = True

        compressed_size = self.backend.probe_byte_size(output)
        width, height = self.backend.probe_dimensions(output)
        ratio = compute_ratio_percent(original_size, compressed_size)
        logger.info(f"Compressed file size: {compressed_size} bytes ({ratio}%, fallback={used_fallback})")

        return CompressionResult(
            output_handle=ImageHandle(location=output, width=width, height=height),
            original_byte_size=original_size,
            compressed_byte_size=compressed_size,
            ratio_percent=ratio,
            strategy_used=strategy,
            used_fallback_codec=used_fallback,
        )

    def encode(self, handle: ImageHandle) -> str:
        """Base64 of the image; EncodingError propagates."""
        encoded = self.backend.encode_base64(handle.location)
        logger.info(f"Image encoded as base64 string ({len(encoded)} characters)")
        logger.debug(f"Base64 payload: {truncate_large_value(encoded)}")
        return encoded

    def build_ocr_payload(self, raw_handle: ImageHandle, mask: ScreenMaskGeometry) -> ProcessedImage:
        final = self.process_for_ocr(raw_handle, mask)
        return ProcessedImage(location=final.location, base64=self.encode(final), compression_info=None)

    def build_submission_payload(
        self,
        raw_handle: ImageHandle,
        settings: CompressionSettings,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> ProcessedImage:
        result = self.process_for_submission(raw_handle, settings, overrides)
        return ProcessedImage(
            location=result.output_handle.location,
            base64=self.encode(result.output_handle),
            compression_info=result.to_info(),
        )

    def build_receipt_payload(
        self,
        raw_handle: ImageHandle,
        settings: CompressionSettings,
        composer: Optional[WatermarkComposer] = None,
    ) -> ProcessedImage:
        """
        Compress, stamp a receipt id, and encode the stamped image.

        The watermark is best-effort; the payload reports whether it was applied.
        """
        composer = composer or WatermarkComposer(backend=self.backend)
        result = self.process_for_submission(raw_handle, settings)
        watermarked = add_receipt_id_to_image(result.output_handle, composer)

        return ProcessedImage(
            location=watermarked.location,
            base64=self.encode(watermarked.handle),
            compression_info=result.to_info(),
            receipt_id=watermarked.label_text,
            has_watermark=watermarked.has_watermark,
        )
