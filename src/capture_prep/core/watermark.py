#!/usr/bin/env python3
"""
Watermark Composition for Capture Prep Module

This module stamps a receipt identifier onto an image. The composition is
rasterized by a capture surface: the surface loads the source image in the
background and signals when it is ready, the composer waits for that
signal plus a settle delay, then asks the surface to capture. Watermarking
is best-effort: any capture problem yields the untouched source with
has_watermark=False.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- ImageHandle(location="processed/compressed_1.jpg", width=1920, height=1440)
- label_text="R123456X7Z"

Expected output:
- WatermarkResult(handle=ImageHandle(location="processed/watermarked_....jpg",
  width=800, height=600), has_watermark=True, label_text="R123456X7Z")
"""

import os
import time
import random
import string
import threading
from typing import Callable, Optional

from PIL import Image, ImageDraw, ImageFont
from loguru import logger

from capture_prep.core.codecs import PillowImageBackend
from capture_prep.core.constants import OUTPUT_DIR, RECEIPT_ID_PREFIX, WATERMARK_SETTINGS
from capture_prep.core.errors import CaptureError, CapturePrepError
from capture_prep.core.models import ImageHandle, WatermarkRequest, WatermarkResult
from capture_prep.core.utils import ensure_directory, generate_filename, normalize_location

RECEIPT_ID_ALPHABET = string.ascii_uppercase + string.digits


def generate_receipt_id(now_ms: Optional[int] = None) -> str:
    """
    Human-readable receipt identifier: "R", the last six digits of the
    epoch milliseconds, then three random uppercase alphanumerics.
    Not collision-proof; it only correlates a photo with its record.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = "".join(random.choices(RECEIPT_ID_ALPHABET, k=3))
    return f"{RECEIPT_ID_PREFIX}{str(now_ms)[-6:]}{suffix}"


class PillowCaptureSurface:
    """
    Off-screen composition of an image with a bottom-right label box.

    mount() starts loading the source in a background thread and returns
    the event that is set once loading finished. capture() renders the
    label and writes a JPEG, or returns None when nothing was loaded.
    A load only lands if its mount is still the current one.
    """

    def __init__(self, output_dir: str = OUTPUT_DIR):
        self.output_dir = output_dir
        self._request: Optional[WatermarkRequest] = None
        self._image: Optional[Image.Image] = None
        self._loaded = threading.Event()
        self._lock = threading.Lock()

    def mount(self, request: WatermarkRequest) -> threading.Event:
        loaded = threading.Event()
        with self._lock:
            self._request = request
            self._image = None
            self._loaded = loaded
        threading.Thread(target=self._load, args=(request, loaded), daemon=True).start()
        return loaded

    def _load(self, request: WatermarkRequest, loaded: threading.Event) -> None:
        try:
            path = normalize_location(request.source_handle.location)
            with Image.open(path) as img:
                image = img.convert("RGBA").resize(
                    (request.target_width, request.target_height), Image.LANCZOS
                )
            with self._lock:
                if loaded is not self._loaded:
                    logger.debug(f"Discarding stale watermark source: {path}")
                    return
                self._image = image
            logger.debug(f"Watermark source loaded: {path}")
        except (OSError, CapturePrepError) as e:
            logger.error(f"Failed to load watermark source: {str(e)}")
        finally:
            loaded.set()

    def capture(self) -> Optional[str]:
        with self._lock:
            image, request = self._image, self._request
        if image is None or request is None:
            return None

        composed = self._draw_label(image, request.label_text)
        ensure_directory(self.output_dir)
        path = os.path.join(self.output_dir, generate_filename("watermarked", "jpg"))
        try:
            composed.save(path, format="JPEG", quality=WATERMARK_SETTINGS["CAPTURE_QUALITY"])
        except OSError as e:
            raise CaptureError(f"Failed to write captured image: {str(e)}") from e
        return path

    def unmount(self) -> None:
        with self._lock:
            self._image = None
            self._request = None
            self._loaded = threading.Event()

    @staticmethod
    def _draw_label(base: Image.Image, label: str) -> Image.Image:
        font = ImageFont.load_default(size=WATERMARK_SETTINGS["FONT_SIZE"])
        overlay = Image.new("RGBA", base.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(overlay)

        left, top, right, bottom = draw.textbbox((0, 0), label, font=font)
        box_width = (right - left) + 2 * WATERMARK_SETTINGS["PADDING_X"]
        box_height = (bottom - top) + 2 * WATERMARK_SETTINGS["PADDING_Y"]
        x1 = base.width - WATERMARK_SETTINGS["MARGIN"]
        y1 = base.height - WATERMARK_SETTINGS["MARGIN"]
        x0 = max(0, x1 - box_width)
        y0 = max(0, y1 - box_height)

        draw.rounded_rectangle(
            [x0, y0, x1, y1],
            radius=WATERMARK_SETTINGS["BOX_RADIUS"],
            fill=WATERMARK_SETTINGS["BOX_COLOR"],
        )
        draw.text(
            (x0 + WATERMARK_SETTINGS["PADDING_X"] - left, y0 + WATERMARK_SETTINGS["PADDING_Y"] - top),
            label,
            font=font,
            fill=WATERMARK_SETTINGS["TEXT_COLOR"],
        )
        return Image.alpha_composite(base.convert("RGBA"), overlay).convert("RGB")


class WatermarkComposer:
    """Composes labels onto images through a capture surface."""

    def __init__(
        self,
        surface=None,
        backend=None,
        settle_delay: float = WATERMARK_SETTINGS["SETTLE_DELAY"],
        load_timeout: float = WATERMARK_SETTINGS["LOAD_TIMEOUT"],
        max_width: int = WATERMARK_SETTINGS["MAX_WIDTH"],
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.backend = backend or PillowImageBackend()
        self.surface = surface or PillowCaptureSurface()
        self.settle_delay = settle_delay
        self.load_timeout = load_timeout
        self.max_width = max_width
        self._sleep = sleep

    def compose(self, source_handle: ImageHandle, label_text: str) -> WatermarkResult:
        """
        Render label_text onto the source image.

        Args:
            source_handle: Image to stamp
            label_text: Identifier drawn in the bottom-right corner

        Returns:
            WatermarkResult: Composed image with has_watermark=True, or the
            source handle with has_watermark=False when capture failed

        Raises:
            ProbeError: If the source dimensions cannot be read
        """
        width, height = self.backend.probe_dimensions(source_handle.location)
        probed = ImageHandle(location=source_handle.location, width=width, height=height)
        request = WatermarkRequest.from_source(probed, label_text, self.max_width)
        fallback = WatermarkResult(handle=source_handle, has_watermark=False, label_text=label_text)

        logger.info(
            f"Adding watermark '{label_text}' to {source_handle.location} "
            f"at {request.target_width}x{request.target_height}"
        )

        try:
            loaded = self.surface.mount(request)
            if not loaded.wait(self.load_timeout):
                logger.warning(f"Image load not signalled within {self.load_timeout}s, skipping watermark")
                return fallback

            # Rendering needs a moment after the load signal before capture is reliable
            self._sleep(self.settle_delay)
            location = self.surface.capture()
        except Exception as e:
            logger.error(f"Error capturing watermarked image: {str(e)}")
            return fallback
        finally:
            self.surface.unmount()

        if not location:
            logger.warning("Capture returned no image, falling back to original without watermark")
            return fallback

        logger.info(f"Watermarked image captured: {location}")
        return WatermarkResult(
            handle=ImageHandle(location=location, width=request.target_width, height=request.target_height),
            has_watermark=True,
            label_text=label_text,
        )


def add_receipt_id_to_image(source_handle: ImageHandle, composer: WatermarkComposer) -> WatermarkResult:
    """
    Generate a receipt id and stamp it onto the image. Never raises for
    pipeline errors: the id is still returned with the original image.
    """
    receipt_id = generate_receipt_id()
    logger.info(f"Generated receipt ID: {receipt_id}")

    try:
        return composer.compose(source_handle, receipt_id)
    except CapturePrepError as e:
        logger.error(f"Error adding receipt ID to image: {str(e)}")
        logger.info("Falling back to original image without watermark")
        return WatermarkResult(handle=source_handle, has_watermark=False, label_text=receipt_id)
