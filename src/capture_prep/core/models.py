#!/usr/bin/env python3
"""
Data Models for Capture Prep Module

Immutable pydantic models passed between the pipeline steps. Every
transformation produces a new model; nothing here is mutated in place.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- ImageHandle(location="/tmp/photo.jpg", width=3000, height=2000)
- ScreenMaskGeometry.for_id_card(400, 800)

Expected output:
- Validated, frozen model instances
"""

from typing import Any, Dict, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from capture_prep.core.constants import DEFAULT_COMPRESSION_SETTINGS, MASK_SETTINGS
from capture_prep.core.utils import round_half_up


class ImageHandle(BaseModel):
    """Reference to image bytes on disk plus their pixel dimensions."""
    model_config = ConfigDict(frozen=True)

    location: str = Field(min_length=1)
    width: int = Field(gt=0)
    height: int = Field(gt=0)


class ScreenMaskGeometry(BaseModel):
    """On-screen capture guide and the screen it is drawn on, in logical pixels."""
    model_config = ConfigDict(frozen=True)

    mask_width: float = Field(gt=0)
    mask_height: float = Field(gt=0)
    mask_left: float = Field(ge=0)
    mask_top: float = Field(ge=0)
    screen_width: float = Field(gt=0)
    screen_height: float = Field(gt=0)

    @model_validator(mode="after")
    def _mask_fits_screen(self) -> "ScreenMaskGeometry":
        if self.mask_left + self.mask_width > self.screen_width:
            raise ValueError(
                f"Mask exceeds screen width: {self.mask_left} + {self.mask_width} > {self.screen_width}"
            )
        if self.mask_top + self.mask_height > self.screen_height:
            raise ValueError(
                f"Mask exceeds screen height: {self.mask_top} + {self.mask_height} > {self.screen_height}"
            )
        return self

    @property
    def is_screen_landscape(self) -> bool:
        return self.screen_width > self.screen_height

    @classmethod
    def for_id_card(cls, screen_width: float, screen_height: float) -> "ScreenMaskGeometry":
        """
        Build the centered ID-card guide used by the OCR capture screen.

        Args:
            screen_width: Screen width in logical pixels
            screen_height: Screen height in logical pixels

        Returns:
            ScreenMaskGeometry: Mask 90% of the screen width, 0.63 as tall as wide
        """
        mask_width = screen_width * MASK_SETTINGS["WIDTH_RATIO"]
        mask_height = mask_width * MASK_SETTINGS["ASPECT_RATIO"]
        return cls(
            mask_width=mask_width,
            mask_height=mask_height,
            mask_left=(screen_width - mask_width) / 2,
            mask_top=(screen_height - mask_height) / 2,
            screen_width=screen_width,
            screen_height=screen_height,
        )


class CropRectangle(BaseModel):
    """Crop window in the source image's native pixel space."""
    model_config = ConfigDict(frozen=True)

    x: int = Field(ge=0)
    y: int = Field(ge=0)
    width: int = Field(gt=0)
    height: int = Field(gt=0)

    def as_box(self) -> Tuple[int, int, int, int]:
        """Return the (left, upper, right, lower) box Pillow expects."""
        return self.x, self.y, self.x + self.width, self.y + self.height


class CompressionStrategy(BaseModel):
    model_config = ConfigDict(frozen=True)

    quality: float = Field(gt=0, le=1)
    max_width: int = Field(gt=0)
    max_height: int = Field(gt=0)
    keep_metadata: bool = False
    tier: str = "fixed"

    @property
    def quality_percent(self) -> int:
        """Quality on the 0-100 scale used by the resize codec."""
        return int(round(self.quality * 100))


class CompressionSettings(BaseModel):
    """
    Compression configuration. In "tiered" mode the quality comes from the
    light/medium/aggressive tier matching the input byte size; in "fixed"
    mode `quality` applies to every input. Dimensions are shared.
    """
    model_config = ConfigDict(frozen=True)

    mode: Literal["fixed", "tiered"] = DEFAULT_COMPRESSION_SETTINGS["mode"]
    quality: float = Field(DEFAULT_COMPRESSION_SETTINGS["quality"], gt=0, le=1)
    light_quality: float = Field(DEFAULT_COMPRESSION_SETTINGS["light_quality"], gt=0, le=1)
    medium_quality: float = Field(DEFAULT_COMPRESSION_SETTINGS["medium_quality"], gt=0, le=1)
    aggressive_quality: float = Field(DEFAULT_COMPRESSION_SETTINGS["aggressive_quality"], gt=0, le=1)
    max_width: int = Field(DEFAULT_COMPRESSION_SETTINGS["max_width"], gt=0)
    max_height: int = Field(DEFAULT_COMPRESSION_SETTINGS["max_height"], gt=0)
    keep_metadata: bool = DEFAULT_COMPRESSION_SETTINGS["keep_metadata"]
    image_format: Literal["JPEG", "PNG"] = DEFAULT_COMPRESSION_SETTINGS["image_format"]

    @property
    def fallback_quality(self) -> float:
        """Quality used by the secondary resize codec."""
        return self.medium_quality if self.mode == "tiered" else self.quality


class CompressionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    output_handle: ImageHandle
    original_byte_size: int = Field(ge=0)
    compressed_byte_size: int = Field(ge=0)
    ratio_percent: float
    strategy_used: CompressionStrategy
    used_fallback_codec: bool = False

    def to_info(self) -> Dict[str, Any]:
        """Diagnostic summary attached to submission payloads."""
        return {
            "original_size": self.original_byte_size,
            "compressed_size": self.compressed_byte_size,
            "compression_ratio": self.ratio_percent,
            "strategy": self.strategy_used.tier,
            "quality": self.strategy_used.quality,
            "is_fallback": self.used_fallback_codec,
        }


class WatermarkRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_handle: ImageHandle
    label_text: str = Field(min_length=1)
    target_width: int = Field(gt=0)
    target_height: int = Field(gt=0)

    @classmethod
    def from_source(cls, source_handle: ImageHandle, label_text: str, max_width: int) -> "WatermarkRequest":
        """Cap the render width at max_width, keeping the source aspect ratio."""
        target_width = min(source_handle.width, max_width)
        target_height = max(1, round_half_up(source_handle.height * target_width / source_handle.width))
        return cls(
            source_handle=source_handle,
            label_text=label_text,
            target_width=target_width,
            target_height=target_height,
        )


class WatermarkResult(BaseModel):
    """Composed image, or the untouched source when has_watermark is False."""
    model_config = ConfigDict(frozen=True)

    handle: ImageHandle
    has_watermark: bool
    label_text: Optional[str] = None

    @property
    def location(self) -> str:
        return self.handle.location


class ProcessedImage(BaseModel):
    """Final descriptor handed to the submission layer."""
    model_config = ConfigDict(frozen=True)

    location: str
    base64: str
    compression_info: Optional[Dict[str, Any]] = None
    receipt_id: Optional[str] = None
    has_watermark: Optional[bool] = None
