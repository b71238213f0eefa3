"""
Specimen storage for the receipt-approval workflow.

Reference receipts are captured one at a time and kept as a JSON list of
{location, base64, timestamp} records until the user clears them.
"""

import os
import json
import time
from typing import Any, Dict, List

from loguru import logger

from capture_prep.core.constants import SPECIMENS_PATH
from capture_prep.core.errors import SettingsError
from capture_prep.core.models import ProcessedImage


def _to_record(specimen: ProcessedImage, timestamp: int) -> Dict[str, Any]:
    return {"location": specimen.location, "base64": specimen.base64, "timestamp": timestamp}


class SpecimenStore:
    def __init__(self, path: str = SPECIMENS_PATH):
        self.path = path

    def _write(self, records: List[Dict[str, Any]]) -> None:
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(records, f)
        except OSError as e:
            logger.error(f"Error saving specimen receipts: {str(e)}")
            raise SettingsError(f"Failed to save specimens: {str(e)}") from e

    def append(self, specimen: ProcessedImage) -> int:
        """Add one specimen; returns the new count."""
        records = self.load()
        records.append(_to_record(specimen, int(time.time() * 1000)))
        self._write(records)
        return len(records)

    def load(self) -> List[Dict[str, Any]]:
        """Stored specimens, or an empty list when none can be read."""
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                records = json.load(f)
            if not isinstance(records, list):
                raise ValueError("specimen file does not hold a list")
            logger.info(f"Loaded {len(records)} specimen receipts")
            return records
        except (OSError, ValueError) as e:
            logger.error(f"Error loading specimen receipts: {str(e)}")
            return []

    def clear(self) -> None:
        try:
            if os.path.exists(self.path):
                os.remove(self.path)
            logger.info("Specimen receipts cleared")
        except OSError as e:
            logger.error(f"Error clearing specimen receipts: {str(e)}")
            raise SettingsError(f"Failed to clear specimens: {str(e)}") from e

    def has_stored(self) -> bool:
        return len(self.load()) > 0
