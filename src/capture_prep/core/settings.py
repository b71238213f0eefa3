#!/usr/bin/env python3
"""
Settings Storage for Capture Prep Module

This module persists compression settings as a JSON file. Loading merges
stored values over the defaults and never fails: an unreadable or invalid
file yields the defaults. Callers load once per run and pass the resulting
CompressionSettings down explicitly.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- SettingsStore("~/.capture_prep/settings.json").load()

Expected output:
- CompressionSettings(mode="tiered", quality=0.8, ..., max_width=1920, ...)
"""

import os
import json
from typing import Any, Dict, Tuple

from loguru import logger
from pydantic import ValidationError

from capture_prep.core.constants import DEFAULT_COMPRESSION_SETTINGS, SETTINGS_LIMITS, SETTINGS_PATH
from capture_prep.core.errors import SettingsError
from capture_prep.core.models import CompressionSettings

QUALITY_FIELDS = ("quality", "light_quality", "medium_quality", "aggressive_quality")
DIMENSION_FIELDS = ("max_width", "max_height")


def validate_settings(values: Dict[str, Any]) -> Tuple[bool, Dict[str, str]]:
    """
    Validates raw settings values.

    Args:
        values: Settings dictionary, e.g. from user input

    Returns:
        Tuple[bool, Dict[str, str]]: (is_valid, field -> error message)
    """
    errors: Dict[str, str] = {}

    for field in QUALITY_FIELDS:
        value = values.get(field, DEFAULT_COMPRESSION_SETTINGS[field])
        if not isinstance(value, (int, float)) or isinstance(value, bool) or not 0 < value <= 1:
            errors[field] = "Quality must be greater than 0 and at most 1"

    low, high = SETTINGS_LIMITS["MIN_DIMENSION"], SETTINGS_LIMITS["MAX_DIMENSION"]
    for field in DIMENSION_FIELDS:
        value = values.get(field, DEFAULT_COMPRESSION_SETTINGS[field])
        if not isinstance(value, int) or isinstance(value, bool) or not low <= value <= high:
            errors[field] = f"Dimension must be between {low}-{high} pixels"

    if values.get("mode", DEFAULT_COMPRESSION_SETTINGS["mode"]) not in SETTINGS_LIMITS["COMPRESSION_MODES"]:
        errors["mode"] = "Mode must be 'fixed' or 'tiered'"

    if values.get("image_format", DEFAULT_COMPRESSION_SETTINGS["image_format"]) not in SETTINGS_LIMITS["IMAGE_FORMATS"]:
        errors["image_format"] = "Image format must be JPEG or PNG"

    if not isinstance(values.get("keep_metadata", False), bool):
        errors["keep_metadata"] = "keep_metadata must be true or false"

    return len(errors) == 0, errors


class SettingsStore:
    """JSON file holding the user's compression settings."""

    def __init__(self, path: str = SETTINGS_PATH):
        self.path = path

    def load(self) -> CompressionSettings:
        """Stored settings merged over defaults; defaults on any read problem."""
        if not os.path.exists(self.path):
            logger.info("Using default settings")
            return CompressionSettings()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                stored = json.load(f)
            if not isinstance(stored, dict):
                raise ValueError(f"expected a JSON object, got {type(stored).__name__}")
            settings = CompressionSettings(**{**DEFAULT_COMPRESSION_SETTINGS, **stored})
            logger.info(f"Settings loaded from {self.path}")
            return settings
        except (OSError, ValueError, ValidationError) as e:
            logger.error(f"Error loading settings from {self.path}: {str(e)}")
            return CompressionSettings()

    def save(self, settings: CompressionSettings) -> None:
        """
        Persist settings.

        Raises:
            SettingsError: If the file cannot be written
        """
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(settings.model_dump(), f, indent=2)
            logger.info(f"Settings saved to {self.path}")
        except OSError as e:
            logger.error(f"Error saving settings: {str(e)}")
            raise SettingsError(f"Failed to save settings: {str(e)}") from e

    def update(self, **changes: Any) -> CompressionSettings:
        """
        Validate changes, merge them over the current settings and save.

        Raises:
            SettingsError: If validation fails or the file cannot be written
        """
        merged = {**self.load().model_dump(), **changes}
        is_valid, errors = validate_settings(merged)
        if not is_valid:
            details = "; ".join(f"{field}: {message}" for field, message in errors.items())
            raise SettingsError(f"Invalid settings: {details}")
        settings = CompressionSettings(**merged)
        self.save(settings)
        return settings

    def reset(self) -> CompressionSettings:
        """Remove stored settings and return the defaults."""
        try:
            if os.path.exists(self.path):
                os.remove(self.path)
            logger.info("Settings reset to defaults")
        except OSError as e:
            logger.error(f"Error resetting settings: {str(e)}")
            raise SettingsError(f"Failed to reset settings: {str(e)}") from e
        return CompressionSettings()
