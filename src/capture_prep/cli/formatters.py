#!/usr/bin/env python3
"""
Formatters for Capture Prep CLI

This module provides rich formatting utilities for the CLI presentation layer.
It includes tables, panels, and progress indicators for pipeline results.

This module is part of the Presentation Layer and should only depend on
Core Layer components, not on Integration Layer.

Sample input:
- Payload dictionaries from the pipeline
- Crop rectangles and settings
- Error messages

Expected output:
- Rich formatted tables, panels, and progress indicators
"""

import os
import json
from typing import Any, Dict, List

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.syntax import Syntax
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TimeElapsedColumn
from rich.text import Text


# Initialize console
console = Console()


# Color scheme
COLORS = {
    "success": "green",
    "error": "red",
    "warning": "yellow",
    "info": "blue",
    "path": "cyan",
    "highlight": "magenta",
    "dim": "grey70",
}


def format_size(size_bytes: int) -> str:
    """Human-readable byte size."""
    if size_bytes >= 1024 * 1024:
        return f"{size_bytes / (1024 * 1024):.2f} MB"
    return f"{size_bytes / 1024:.1f} KB"


def print_processed_result(result: Dict[str, Any], title: str = "Image Processed Successfully") -> None:
    """
    Format and print a processed image payload to the console.

    Args:
        result: Payload dictionary (location, base64, compression_info, ...)
        title: Panel title
    """
    if "error" in result:
        print_error(result["error"])
        return

    file_path = result.get("location", "Unknown")

    info = Text()
    info.append("Filename: ", style=COLORS["dim"])
    info.append(f"{os.path.basename(file_path)}\n", style=COLORS["path"])
    info.append("Directory: ", style=COLORS["dim"])
    info.append(f"{os.path.dirname(file_path)}\n", style=COLORS["path"])

    if "base64" in result:
        info.append("Base64 length: ", style=COLORS["dim"])
        info.append(f"{len(result['base64'])} chars\n", style=COLORS["info"])

    compression = result.get("compression_info")
    if compression:
        info.append("Original: ", style=COLORS["dim"])
        info.append(f"{format_size(compression['original_size'])}\n", style=COLORS["info"])
        info.append("Compressed: ", style=COLORS["dim"])
        info.append(f"{format_size(compression['compressed_size'])}\n", style=COLORS["info"])
        info.append("Ratio: ", style=COLORS["dim"])
        ratio_color = COLORS["success"] if compression["compression_ratio"] >= 0 else COLORS["warning"]
        info.append(f"{compression['compression_ratio']}%\n", style=ratio_color)
        info.append("Strategy: ", style=COLORS["dim"])
        info.append(f"{compression['strategy']} (quality {compression['quality']})", style=COLORS["highlight"])
        if compression.get("is_fallback"):
            info.append("  [fallback codec]", style=COLORS["warning"])

    if result.get("receipt_id"):
        info.append("\nReceipt ID: ", style=COLORS["dim"])
        info.append(result["receipt_id"], style=COLORS["highlight"])
        info.append("  watermark: ", style=COLORS["dim"])
        applied = bool(result.get("has_watermark"))
        info.append("applied" if applied else "skipped", style=COLORS["success"] if applied else COLORS["warning"])

    panel = Panel(
        info,
        title=f"[bold green]{title}",
        border_style=COLORS["success"],
        padding=(1, 2)
    )

    console.print(panel)


def print_crop_rectangle(rect: Dict[str, int], image_size: List[int], mismatch: bool) -> None:
    """
    Format and print a crop rectangle as a table.

    Args:
        rect: Crop rectangle dictionary (x, y, width, height)
        image_size: [width, height] of the source image
        mismatch: Whether the orientation-mismatch branch was used
    """
    table = Table(title=f"Crop Window for {image_size[0]}x{image_size[1]}")

    table.add_column("Field", style=COLORS["highlight"])
    table.add_column("Value", justify="right", style=COLORS["info"])

    for key in ("x", "y", "width", "height"):
        table.add_row(key, str(rect[key]))
    table.add_row("orientation mismatch", "yes" if mismatch else "no")

    console.print(table)


def print_settings_table(settings: Dict[str, Any], title: str = "Compression Settings") -> None:
    """
    Format and print compression settings as a table.

    Args:
        settings: Settings dictionary
        title: Table title
    """
    table = Table(title=title)

    table.add_column("Setting", style=COLORS["highlight"])
    table.add_column("Value", justify="right", style=COLORS["info"])

    for name, value in settings.items():
        table.add_row(name, str(value))

    console.print(table)


def print_specimens_table(specimens: List[Dict[str, Any]]) -> None:
    """Stored specimen receipts, one row each."""
    table = Table(title=f"Stored Specimens ({len(specimens)})")

    table.add_column("#", justify="right", style=COLORS["dim"])
    table.add_column("Location", style=COLORS["path"])
    table.add_column("Base64 length", justify="right", style=COLORS["info"])
    table.add_column("Timestamp", justify="right", style=COLORS["info"])

    for index, specimen in enumerate(specimens, start=1):
        table.add_row(
            str(index),
            str(specimen.get("location", "")),
            str(len(specimen.get("base64", ""))),
            str(specimen.get("timestamp", "")),
        )

    console.print(table)


def print_error(message: str, title: str = "Error") -> None:
    """
    Format and print error message to the console.

    Args:
        message: Error message
        title: Panel title
    """
    panel = Panel(
        Text(message, style=COLORS["error"]),
        title=f"[bold {COLORS['error']}]{title}",
        border_style=COLORS["error"],
        padding=(1, 2)
    )

    console.print(panel)


def print_warning(message: str, title: str = "Warning") -> None:
    """
    Format and print warning message to the console.

    Args:
        message: Warning message
        title: Panel title
    """
    panel = Panel(
        Text(message, style=COLORS["warning"]),
        title=f"[bold {COLORS['warning']}]{title}",
        border_style=COLORS["warning"],
        padding=(1, 2)
    )

    console.print(panel)


def print_info(message: str, title: str = "Info") -> None:
    """
    Format and print info message to the console.

    Args:
        message: Info message
        title: Panel title
    """
    panel = Panel(
        Text(message, style=COLORS["info"]),
        title=f"[bold {COLORS['info']}]{title}",
        border_style=COLORS["info"],
        padding=(1, 2)
    )

    console.print(panel)


def print_json(data: Dict[str, Any], title: str = "JSON Output") -> None:
    """
    Format and print JSON data to the console.

    Args:
        data: JSON data
        title: Panel title
    """
    json_str = json.dumps(data, indent=2)
    syntax = Syntax(json_str, "json", theme="monokai", line_numbers=True)

    panel = Panel(
        syntax,
        title=f"[bold {COLORS['info']}]{title}",
        border_style=COLORS["info"],
        padding=(1, 2)
    )

    console.print(panel)


def create_progress(description: str = "Processing") -> Progress:
    """
    Create a progress indicator.

    Args:
        description: Progress description

    Returns:
        Progress: Rich progress indicator
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        TextColumn("[bold green]{task.completed}/{task.total}"),
        TimeElapsedColumn(),
        console=console,
    )
