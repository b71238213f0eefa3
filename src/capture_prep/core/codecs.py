#!/usr/bin/env python3
"""
Image Codecs for Capture Prep Module

This module provides the Pillow-backed default implementations of the
primitives the pipeline depends on: dimension and byte-size probes, crop,
adaptive compression, resize and base64 encoding. The pipeline only calls
these methods, so any object with the same methods (a mock in tests, a
different imaging backend) can stand in for PillowImageBackend.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- backend.probe_dimensions("/tmp/photo.jpg")
- backend.compress("/tmp/photo.jpg", CompressionStrategy(quality=0.8, max_width=1920, max_height=1920))

Expected output:
- (4080, 2288)
- "processed/compressed_1718000000000_a1b2c3.jpg"
"""

import os
import base64
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError
from loguru import logger

from capture_prep.core.constants import OUTPUT_DIR
from capture_prep.core.errors import CodecError, EncodingError, ProbeError
from capture_prep.core.models import CompressionStrategy, CropRectangle
from capture_prep.core.utils import ensure_directory, generate_filename, normalize_location

RESIZE_MODES = ("contain", "cover", "stretch")


def ensure_rgb(img: Image.Image) -> Image.Image:
    """
    Converts image to RGB mode if needed for JPEG compatibility.

    Args:
        img: PIL Image object to convert

    Returns:
        PIL.Image: Image in RGB mode
    """
    if img.mode == 'RGBA':
        # Flatten onto a white background
        background = Image.new('RGB', img.size, (255, 255, 255))
        background.paste(img, mask=img.split()[3])
        return background
    elif img.mode != 'RGB':
        return img.convert('RGB')
    return img


def fit_within(width: int, height: int, max_width: int, max_height: int, cover: bool = False) -> Tuple[int, int]:
    """
    Scale (width, height) to fit inside (contain) or around (cover) a box,
    preserving aspect ratio.
    """
    scales = (max_width / width, max_height / height)
    scale_factor = max(scales) if cover else min(scales)
    return max(1, int(round(width * scale_factor))), max(1, int(round(height * scale_factor)))


class PillowImageBackend:
    """Default imaging primitives writing their outputs under output_dir."""

    def __init__(self, output_dir: str = OUTPUT_DIR):
        self.output_dir = output_dir

    def _output_path(self, prefix: str, image_format: str) -> str:
        ensure_directory(self.output_dir)
        extension = "png" if image_format.upper() == "PNG" else "jpg"
        return os.path.join(self.output_dir, generate_filename(prefix, extension))

    def _save(self, img: Image.Image, path: str, image_format: str, quality: int, exif: Optional[bytes] = None) -> str:
        image_format = image_format.upper()
        if image_format in ("JPG", "JPEG"):
            img = ensure_rgb(img)
            params = {"quality": quality}
            if exif:
                params["exif"] = exif
            img.save(path, format="JPEG", **params)
        else:
            img.save(path, format=image_format)
        return path

    def probe_dimensions(self, location: str) -> Tuple[int, int]:
        """
        Native pixel (width, height) of an image.

        Raises:
            ProbeError: If the file is missing or not an image
        """
        path = normalize_location(location)
        try:
            with Image.open(path) as img:
                return img.size
        except (OSError, UnidentifiedImageError) as e:
            raise ProbeError(f"Failed to get image size for {path}: {str(e)}") from e

    def probe_byte_size(self, location: str) -> int:
        """
        File size in bytes.

        Raises:
            ProbeError: If the file cannot be stat'ed
        """
        path = normalize_location(location)
        try:
            return os.path.getsize(path)
        except OSError as e:
            raise ProbeError(f"Failed to stat {path}: {str(e)}") from e

    def crop(self, location: str, rect: CropRectangle) -> str:
        """Crop to rect and write a new JPEG."""
        path = normalize_location(location)
        try:
            with Image.open(path) as img:
                cropped = img.crop(rect.as_box())
                output = self._output_path("cropped", "JPEG")
                return self._save(cropped, output, "JPEG", 95)
        except (OSError, ValueError) as e:
            raise CodecError(f"Crop failed for {path}: {str(e)}") from e

    def compress(self, location: str, strategy: CompressionStrategy, output_format: str = "jpg") -> str:
        """
        Scale down to the strategy's bounds and re-encode at its quality.

        EXIF is only carried over when strategy.keep_metadata is set.
        """
        path = normalize_location(location)
        try:
            with Image.open(path) as img:
                exif = img.info.get("exif") if strategy.keep_metadata else None
                img.load()
                width, height = img.size
                if width > strategy.max_width or height > strategy.max_height:
                    target = fit_within(width, height, strategy.max_width, strategy.max_height)
                    logger.info(f"Resizing image from {width}x{height} to {target[0]}x{target[1]}")
                    img = img.resize(target, Image.LANCZOS)
                output = self._output_path("compressed", output_format)
                return self._save(img, output, output_format, strategy.quality_percent, exif)
        except (OSError, ValueError) as e:
            raise CodecError(f"Compression failed for {path}: {str(e)}") from e

    def resize(
        self,
        location: str,
        width: int,
        height: int,
        image_format: str = "JPEG",
        quality: int = 85,
        rotation: int = 0,
        output_path: Optional[str] = None,
        mode: str = "contain",
        only_scale_down: bool = False,
    ) -> str:
        """
        Resize to the target box.

        Args:
            location: Source image
            width: Target width
            height: Target height
            image_format: "JPEG" or "PNG"
            quality: Output quality (0-100)
            rotation: Clockwise rotation in degrees
            output_path: Explicit output file, generated when omitted
            mode: "contain" fits inside the box, "cover" fills it, "stretch" uses it exactly
            only_scale_down: Leave images already inside the box at their size

        Returns:
            str: Path of the resized image
        """
        if mode not in RESIZE_MODES:
            raise CodecError(f"Unknown resize mode: {mode}")

        path = normalize_location(location)
        try:
            with Image.open(path) as img:
                img.load()
                if rotation:
                    img = img.rotate(-rotation, expand=True)
                source_width, source_height = img.size

                if mode == "stretch":
                    target = (width, height)
                else:
                    target = fit_within(source_width, source_height, width, height, cover=(mode == "cover"))

                if only_scale_down and (target[0] > source_width or target[1] > source_height):
                    target = (source_width, source_height)

                if target != img.size:
                    img = img.resize(target, Image.LANCZOS)

                output = output_path or self._output_path("resized", image_format)
                return self._save(img, output, image_format, quality)
        except (OSError, ValueError) as e:
            raise CodecError(f"Resize failed for {path}: {str(e)}") from e

    def encode_base64(self, location: str) -> str:
        """
        Base64 text of the file's bytes.

        Raises:
            EncodingError: If the file cannot be read
        """
        path = normalize_location(location)
        try:
            with open(path, "rb") as f:
                return base64.b64encode(f.read()).decode("utf-8")
        except OSError as e:
            raise EncodingError(f"Error converting image to base64: {str(e)}") from e
