#!/usr/bin/env python3
"""
MCP Wrappers for Capture Prep Module

This module provides MCP-specific wrapper functions for the core
preprocessing functionality, handling parameter validation and error
formatting specific to MCP.

This module is part of the Integration Layer and can depend on both
Core Layer and Presentation Layer components.

Sample input:
- process_submission_wrapper("/tmp/photo.jpg", quality=0.7)

Expected output:
- {"success": True, "location": "processed/compressed_....jpg", "base64": "...",
   "compression_info": {...}}
"""

from typing import Any, Dict, Optional

from loguru import logger

from capture_prep.core.constants import MASK_SETTINGS, OUTPUT_DIR
from capture_prep.core.errors import CapturePrepError
from capture_prep.core.codecs import PillowImageBackend
from capture_prep.core.geometry import compute_crop_rectangle, is_orientation_mismatch
from capture_prep.core.log_utils import log_safe_payload
from capture_prep.core.models import ScreenMaskGeometry
from capture_prep.core.pipeline import ImageTransformPipeline
from capture_prep.core.settings import SettingsStore
from capture_prep.core.watermark import PillowCaptureSurface, WatermarkComposer, generate_receipt_id


def format_mcp_response(
    success: bool,
    data: Optional[Dict[str, Any]] = None,
    error: Optional[str] = None
) -> Dict[str, Any]:
    """
    Format a response in MCP-compatible format.

    Args:
        success: Whether the operation was successful
        data: Response data (for successful operations)
        error: Error message (for failed operations)

    Returns:
        Dict[str, Any]: MCP-compatible response
    """
    response = {"success": success}

    if success and data is not None:
        response.update(data)
    elif not success and error is not None:
        response["error"] = error

    return response


def _pipeline(output_dir: str) -> ImageTransformPipeline:
    return ImageTransformPipeline(PillowImageBackend(output_dir))


def _composer(output_dir: str) -> WatermarkComposer:
    return WatermarkComposer(surface=PillowCaptureSurface(output_dir), backend=PillowImageBackend(output_dir))


def process_ocr_wrapper(
    image_path: str,
    screen_width: float,
    screen_height: float,
    output_dir: str = OUTPUT_DIR
) -> Dict[str, Any]:
    """
    MCP wrapper for the OCR path.

    Args:
        image_path: Captured ID-card photo
        screen_width: Preview screen width in logical pixels
        screen_height: Preview screen height in logical pixels
        output_dir: Directory for intermediate and final images

    Returns:
        Dict[str, Any]: MCP-compatible response
    """
    try:
        pipeline = _pipeline(output_dir)
        mask = ScreenMaskGeometry.for_id_card(screen_width, screen_height)
        payload = pipeline.build_ocr_payload(pipeline.open_handle(image_path), mask)
        data = payload.model_dump(exclude_none=True)
        logger.debug(f"OCR payload: {log_safe_payload(data)}")
        return format_mcp_response(True, data=data)

    except (CapturePrepError, ValueError) as e:
        logger.error(f"OCR processing failed: {str(e)}")
        return format_mcp_response(False, error=str(e))
    except Exception as e:
        error_message = f"OCR processing failed: {str(e)}"
        logger.exception(error_message)
        return format_mcp_response(False, error=error_message)


def process_submission_wrapper(
    image_path: str,
    quality: Optional[float] = None,
    max_width: Optional[int] = None,
    max_height: Optional[int] = None,
    keep_metadata: Optional[bool] = None,
    output_dir: str = OUTPUT_DIR
) -> Dict[str, Any]:
    """
    MCP wrapper for adaptive compression. Unset overrides use the stored settings.

    Returns:
        Dict[str, Any]: MCP-compatible response with compression_info
    """
    overrides = {
        "quality": quality,
        "max_width": max_width,
        "max_height": max_height,
        "keep_metadata": keep_metadata,
    }
    try:
        pipeline = _pipeline(output_dir)
        payload = pipeline.build_submission_payload(
            pipeline.open_handle(image_path), SettingsStore().load(), overrides
        )
        data = payload.model_dump(exclude_none=True)
        logger.debug(f"Submission payload: {log_safe_payload(data)}")
        return format_mcp_response(True, data=data)

    except CapturePrepError as e:
        logger.error(f"Compression failed: {str(e)}")
        return format_mcp_response(False, error=str(e))
    except Exception as e:
        error_message = f"Compression failed: {str(e)}"
        logger.exception(error_message)
        return format_mcp_response(False, error=error_message)


def process_receipt_wrapper(image_path: str, output_dir: str = OUTPUT_DIR) -> Dict[str, Any]:
    """
    MCP wrapper for compress + receipt watermark + encode.

    Returns:
        Dict[str, Any]: MCP-compatible response with receipt_id and has_watermark
    """
    try:
        pipeline = _pipeline(output_dir)
        payload = pipeline.build_receipt_payload(
            pipeline.open_handle(image_path), SettingsStore().load(), _composer(output_dir)
        )
        data = payload.model_dump(exclude_none=True)
        logger.debug(f"Receipt payload: {log_safe_payload(data)}")
        return format_mcp_response(True, data=data)

    except CapturePrepError as e:
        logger.error(f"Receipt processing failed: {str(e)}")
        return format_mcp_response(False, error=str(e))
    except Exception as e:
        error_message = f"Receipt processing failed: {str(e)}"
        logger.exception(error_message)
        return format_mcp_response(False, error=error_message)


def crop_rectangle_wrapper(
    image_width: int,
    image_height: int,
    screen_width: float,
    screen_height: float,
    padding_horizontal: float = MASK_SETTINGS["PADDING_HORIZONTAL"],
    padding_vertical: float = MASK_SETTINGS["PADDING_VERTICAL"]
) -> Dict[str, Any]:
    """
    MCP wrapper for the crop geometry mapping.

    Returns:
        Dict[str, Any]: MCP-compatible response with x, y, width, height
    """
    try:
        mask = ScreenMaskGeometry.for_id_card(screen_width, screen_height)
        image_size = (image_width, image_height)
        rect = compute_crop_rectangle(image_size, mask, padding_horizontal, padding_vertical)
        data = rect.model_dump()
        data["orientation_mismatch"] = is_orientation_mismatch(image_size, mask)
        return format_mcp_response(True, data=data)

    except (CapturePrepError, ValueError) as e:
        logger.error(f"Crop rectangle failed: {str(e)}")
        return format_mcp_response(False, error=str(e))


def watermark_wrapper(
    image_path: str,
    label: Optional[str] = None,
    output_dir: str = OUTPUT_DIR
) -> Dict[str, Any]:
    """
    MCP wrapper for watermark composition. A receipt ID is generated when
    no label is given. A skipped watermark is still a success.

    Returns:
        Dict[str, Any]: MCP-compatible response with location and has_watermark
    """
    try:
        pipeline = _pipeline(output_dir)
        result = _composer(output_dir).compose(pipeline.open_handle(image_path), label or generate_receipt_id())
        return format_mcp_response(True, data={
            "location": result.location,
            "receipt_id": result.label_text,
            "has_watermark": result.has_watermark,
        })

    except CapturePrepError as e:
        logger.error(f"Watermark failed: {str(e)}")
        return format_mcp_response(False, error=str(e))
    except Exception as e:
        error_message = f"Watermark failed: {str(e)}"
        logger.exception(error_message)
        return format_mcp_response(False, error=error_message)


def settings_wrapper() -> Dict[str, Any]:
    """MCP wrapper returning the active compression settings."""
    try:
        return format_mcp_response(True, data={"settings": SettingsStore().load().model_dump()})
    except Exception as e:
        error_message = f"Failed to read settings: {str(e)}"
        logger.exception(error_message)
        return format_mcp_response(False, error=error_message)
