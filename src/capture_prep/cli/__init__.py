"""
CLI Layer for Capture Prep Module

This package contains the CLI (Command Line Interface) layer for the
preprocessing pipeline, providing a rich interface for human users.

Usage:
    from capture_prep.cli import app as capture_prep_app

    # Run the CLI app
    capture_prep_app()
"""

from capture_prep.cli.cli import app

from capture_prep.cli.formatters import (
    print_processed_result,
    print_crop_rectangle,
    print_settings_table,
    print_specimens_table,
    print_error,
    print_warning,
    print_info,
    print_json,
    create_progress,
    console
)

from capture_prep.cli.schemas import format_cli_response

__all__ = [
    'app',
    'print_processed_result',
    'print_crop_rectangle',
    'print_settings_table',
    'print_specimens_table',
    'print_error',
    'print_warning',
    'print_info',
    'print_json',
    'create_progress',
    'console',
    'format_cli_response',
]
