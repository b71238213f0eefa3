#!/usr/bin/env python3
"""
Command Line Interface for Capture Prep Module

This module provides a CLI for the preprocessing pipeline using Typer and
Rich, allowing users to prepare ID-card photos for OCR, compress photos for
submission, stamp receipt identifiers and manage settings.

This module is part of the Presentation Layer and should only depend on
Core Layer components, not on Integration Layer.

Sample input:
- capture-prep ocr photo.jpg --screen-width 400 --screen-height 800
- capture-prep --json compress photo.jpg --quality 0.7

Expected output:
- Formatted console output of operation results
- Processed files saved to disk
- Structured JSON output for machine consumption
"""

import sys
from typing import Any, Callable, Dict, Optional

import typer
from loguru import logger

from capture_prep.core.codecs import PillowImageBackend
from capture_prep.core.constants import MASK_SETTINGS
from capture_prep.core.errors import CapturePrepError
from capture_prep.core.geometry import compute_crop_rectangle, is_orientation_mismatch
from capture_prep.core.log_utils import configure_logging
from capture_prep.core.models import ProcessedImage, ScreenMaskGeometry
from capture_prep.core.pipeline import ImageTransformPipeline
from capture_prep.core.settings import SettingsStore
from capture_prep.core.specimens import SpecimenStore
from capture_prep.core.watermark import PillowCaptureSurface, WatermarkComposer, generate_receipt_id
from capture_prep.cli.formatters import (
    print_processed_result,
    print_crop_rectangle,
    print_settings_table,
    print_specimens_table,
    print_error,
    print_warning,
    print_info,
    print_json,
    create_progress
)
from capture_prep.cli.validators import (
    validate_file_exists,
    validate_quality_option,
    validate_dimension_option,
    validate_positive_option,
    validate_output_dir,
    validate_json_output
)
from capture_prep.cli.schemas import format_cli_response


app = typer.Typer(
    help="Capture preprocessing for vision-model submission",
    rich_markup_mode="rich",
    add_completion=False
)

settings_app = typer.Typer(help="Compression settings commands", rich_markup_mode="rich")
specimens_app = typer.Typer(help="Specimen receipt commands", rich_markup_mode="rich")

app.add_typer(settings_app, name="settings", help="Compression settings commands")
app.add_typer(specimens_app, name="specimens", help="Specimen receipt commands")


def _payload_summary(payload: ProcessedImage) -> Dict[str, Any]:
    """Payload without the large base64 body."""
    data = payload.model_dump(exclude_none=True)
    data["base64_length"] = len(data.pop("base64"))
    return data


def _render_stamped(data: Dict[str, Any], title: str) -> None:
    """Result panel, plus a warning when the label could not be drawn."""
    print_processed_result(data, title=title)
    if not data.get("has_watermark"):
        print_warning("Watermark could not be applied, the original image was kept")


def _run(
    ctx: typer.Context,
    description: str,
    action: Callable[[], Any],
    render: Callable[[Any], None],
    to_data: Callable[[Any], Dict[str, Any]],
) -> None:
    """Run an action with a progress spinner or in JSON mode, exiting 1 on failure."""
    json_output = ctx.obj.get("json_output", False)
    try:
        if json_output:
            result = action()
            print_json(format_cli_response(True, data=to_data(result)))
        else:
            with create_progress(description) as progress:
                task = progress.add_task(description, total=100)
                result = action()
                progress.update(task, completed=100, description="Done")
            render(result)
    except CapturePrepError as e:
        logger.error(f"{description} failed: {str(e)}")
        if json_output:
            print_json(format_cli_response(False, error=str(e)))
        else:
            print_error(str(e), title=f"{description} failed")
        sys.exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output results as JSON",
        callback=validate_json_output
    ),
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)"
    ),
):
    """
    Capture Prep - prepares captured images for vision models

    Crops ID-card photos to the capture guide, compresses photos by size
    tier, stamps receipt identifiers and encodes the result as base64.
    """
    ctx.ensure_object(dict)
    ctx.obj["json_output"] = json_output
    configure_logging(log_level.upper(), log_file=None)


@app.command("ocr")
def ocr_command(
    ctx: typer.Context,
    image: str = typer.Argument(..., help="Captured ID-card photo", callback=validate_file_exists),
    screen_width: float = typer.Option(
        400, "--screen-width", help="Preview screen width in logical pixels", callback=validate_positive_option
    ),
    screen_height: float = typer.Option(
        800, "--screen-height", help="Preview screen height in logical pixels", callback=validate_positive_option
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Output directory", callback=validate_output_dir
    ),
):
    """
    Crop a photo to the ID-card guide and resize it for text extraction.
    """
    pipeline = ImageTransformPipeline(PillowImageBackend(output))

    def action() -> ProcessedImage:
        mask = ScreenMaskGeometry.for_id_card(screen_width, screen_height)
        return pipeline.build_ocr_payload(pipeline.open_handle(image), mask)

    _run(
        ctx,
        "Processing for OCR",
        action,
        lambda payload: print_processed_result(payload.model_dump(), title="OCR Image Ready"),
        _payload_summary,
    )


@app.command("compress")
def compress_command(
    ctx: typer.Context,
    image: str = typer.Argument(..., help="Photo to compress", callback=validate_file_exists),
    quality: Optional[float] = typer.Option(
        None, "--quality", "-q", help="Override quality (0-1)", callback=validate_quality_option
    ),
    max_width: Optional[int] = typer.Option(
        None, "--max-width", help="Override maximum width", callback=validate_dimension_option
    ),
    max_height: Optional[int] = typer.Option(
        None, "--max-height", help="Override maximum height", callback=validate_dimension_option
    ),
    keep_metadata: Optional[bool] = typer.Option(
        None, "--keep-metadata/--strip-metadata", help="Override EXIF handling"
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Output directory", callback=validate_output_dir
    ),
):
    """
    Compress a photo using the size-tiered strategy and encode it as base64.
    """
    pipeline = ImageTransformPipeline(PillowImageBackend(output))
    overrides = {
        "quality": quality,
        "max_width": max_width,
        "max_height": max_height,
        "keep_metadata": keep_metadata,
    }

    def action() -> ProcessedImage:
        settings = SettingsStore().load()
        return pipeline.build_submission_payload(pipeline.open_handle(image), settings, overrides)

    _run(
        ctx,
        "Compressing image",
        action,
        lambda payload: print_processed_result(payload.model_dump(), title="Image Compressed"),
        _payload_summary,
    )


@app.command("watermark")
def watermark_command(
    ctx: typer.Context,
    image: str = typer.Argument(..., help="Photo to stamp", callback=validate_file_exists),
    label: Optional[str] = typer.Option(
        None, "--label", "-l", help="Label text. A receipt ID is generated when omitted."
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Output directory", callback=validate_output_dir
    ),
):
    """
    Stamp a label onto the bottom-right corner of a photo.
    """
    backend = PillowImageBackend(output)
    pipeline = ImageTransformPipeline(backend)
    composer = WatermarkComposer(surface=PillowCaptureSurface(output), backend=backend)

    def action() -> Dict[str, Any]:
        result = composer.compose(pipeline.open_handle(image), label or generate_receipt_id())
        return {
            "location": result.location,
            "receipt_id": result.label_text,
            "has_watermark": result.has_watermark,
        }

    _run(
        ctx,
        "Adding watermark",
        action,
        lambda data: _render_stamped(data, "Watermark"),
        lambda data: data,
    )


@app.command("receipt")
def receipt_command(
    ctx: typer.Context,
    image: str = typer.Argument(..., help="Receipt photo", callback=validate_file_exists),
    specimen: bool = typer.Option(
        False, "--specimen", help="Store the result as a reference specimen"
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Output directory", callback=validate_output_dir
    ),
):
    """
    Compress a receipt photo, stamp a receipt ID and encode it as base64.
    """
    backend = PillowImageBackend(output)
    pipeline = ImageTransformPipeline(backend)
    composer = WatermarkComposer(surface=PillowCaptureSurface(output), backend=backend)

    def action() -> ProcessedImage:
        payload = pipeline.build_receipt_payload(pipeline.open_handle(image), SettingsStore().load(), composer)
        if specimen:
            count = SpecimenStore().append(payload)
            logger.info(f"Stored as specimen #{count}")
        return payload

    _run(
        ctx,
        "Processing receipt",
        action,
        lambda payload: _render_stamped(payload.model_dump(), "Receipt Ready"),
        _payload_summary,
    )


@app.command("crop-rect")
def crop_rect_command(
    ctx: typer.Context,
    image_width: int = typer.Option(..., "--image-width", help="Native image width", callback=validate_positive_option),
    image_height: int = typer.Option(..., "--image-height", help="Native image height", callback=validate_positive_option),
    screen_width: float = typer.Option(400, "--screen-width", help="Screen width (logical px)", callback=validate_positive_option),
    screen_height: float = typer.Option(800, "--screen-height", help="Screen height (logical px)", callback=validate_positive_option),
    padding_horizontal: float = typer.Option(MASK_SETTINGS["PADDING_HORIZONTAL"], "--padding-h", help="Horizontal padding fraction"),
    padding_vertical: float = typer.Option(MASK_SETTINGS["PADDING_VERTICAL"], "--padding-v", help="Vertical padding fraction"),
):
    """
    Show the crop window the ID-card guide maps to for an image size.
    """
    try:
        mask = ScreenMaskGeometry.for_id_card(screen_width, screen_height)
        rect = compute_crop_rectangle((image_width, image_height), mask, padding_horizontal, padding_vertical)
    except (CapturePrepError, ValueError) as e:
        if ctx.obj.get("json_output", False):
            print_json(format_cli_response(False, error=str(e)))
        else:
            print_error(str(e))
        sys.exit(1)

    mismatch = is_orientation_mismatch((image_width, image_height), mask)
    if ctx.obj.get("json_output", False):
        print_json(format_cli_response(True, data={**rect.model_dump(), "orientation_mismatch": mismatch}))
    else:
        print_crop_rectangle(rect.model_dump(), [image_width, image_height], mismatch)


@settings_app.command("show")
def settings_show(ctx: typer.Context):
    """
    Show the active compression settings.
    """
    settings = SettingsStore().load().model_dump()
    if ctx.obj.get("json_output", False):
        print_json(format_cli_response(True, data=settings))
    else:
        print_settings_table(settings)


@settings_app.command("set")
def settings_set(
    ctx: typer.Context,
    mode: Optional[str] = typer.Option(None, "--mode", help="'fixed' or 'tiered'"),
    quality: Optional[float] = typer.Option(None, "--quality", help="Fixed-mode quality (0-1)"),
    light_quality: Optional[float] = typer.Option(None, "--light-quality", help="Quality under 1 MiB"),
    medium_quality: Optional[float] = typer.Option(None, "--medium-quality", help="Quality from 1 to 5 MiB"),
    aggressive_quality: Optional[float] = typer.Option(None, "--aggressive-quality", help="Quality from 5 MiB"),
    max_width: Optional[int] = typer.Option(None, "--max-width", help="Maximum width"),
    max_height: Optional[int] = typer.Option(None, "--max-height", help="Maximum height"),
    keep_metadata: Optional[bool] = typer.Option(None, "--keep-metadata/--strip-metadata", help="EXIF handling"),
    image_format: Optional[str] = typer.Option(None, "--format", help="JPEG or PNG"),
):
    """
    Change and save compression settings.
    """
    changes = {
        "mode": mode,
        "quality": quality,
        "light_quality": light_quality,
        "medium_quality": medium_quality,
        "aggressive_quality": aggressive_quality,
        "max_width": max_width,
        "max_height": max_height,
        "keep_metadata": keep_metadata,
        "image_format": image_format.upper() if image_format else None,
    }
    changes = {key: value for key, value in changes.items() if value is not None}

    _run(
        ctx,
        "Saving settings",
        lambda: SettingsStore().update(**changes).model_dump(),
        lambda data: print_settings_table(data, title="Settings Saved"),
        lambda data: data,
    )


@settings_app.command("reset")
def settings_reset(ctx: typer.Context):
    """
    Reset compression settings to defaults.
    """
    _run(
        ctx,
        "Resetting settings",
        lambda: SettingsStore().reset().model_dump(),
        lambda data: print_settings_table(data, title="Settings Reset"),
        lambda data: data,
    )


@specimens_app.command("list")
def specimens_list(ctx: typer.Context):
    """
    List stored specimen receipts.
    """
    specimens = SpecimenStore().load()
    if ctx.obj.get("json_output", False):
        summary = [
            {"location": s.get("location"), "timestamp": s.get("timestamp"), "base64_length": len(s.get("base64", ""))}
            for s in specimens
        ]
        print_json(format_cli_response(True, data={"count": len(specimens), "specimens": summary}))
    elif not specimens:
        print_info("No specimen receipts stored")
    else:
        print_specimens_table(specimens)


@specimens_app.command("clear")
def specimens_clear(ctx: typer.Context):
    """
    Remove all stored specimen receipts.
    """
    _run(
        ctx,
        "Clearing specimens",
        lambda: SpecimenStore().clear() or {"cleared": True},
        lambda data: print_info("Specimen receipts cleared"),
        lambda data: data,
    )


if __name__ == "__main__":
    app()
