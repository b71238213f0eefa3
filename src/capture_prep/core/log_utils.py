"""
Logging utilities for the capture preprocessing pipeline.

Configures loguru sinks and keeps large values such as base64 payloads
out of log lines.
"""

import os
import sys
from typing import Any, Dict, Optional

from loguru import logger

from capture_prep.core.constants import LOG_LEVEL, LOG_MAX_STR_LEN


def truncate_large_value(value: Any, max_str_len: int = LOG_MAX_STR_LEN) -> Any:
    """
    Truncates large string values for logging purposes.

    Args:
        value: The value to truncate
        max_str_len: Maximum string length to allow

    Returns:
        Truncated string, or the value unchanged if it is not a long string
    """
    if isinstance(value, str) and len(value) > max_str_len:
        return f"{value[:max_str_len]}... [truncated, {len(value)} chars total]"
    return value


def log_safe_payload(payload: Dict[str, Any], max_str_len: int = LOG_MAX_STR_LEN) -> Dict[str, Any]:
    """Copy of a payload dict with long strings truncated."""
    return {key: truncate_large_value(value, max_str_len) for key, value in payload.items()}


def configure_logging(level: str = LOG_LEVEL, log_file: Optional[str] = "logs/capture_prep.log") -> None:
    """
    Configure logging with proper format and level.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Rotating log file path, or None for stderr only
    """
    logger.remove()

    if log_file:
        directory = os.path.dirname(log_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        logger.add(
            log_file,
            rotation="10 MB",
            retention="1 week",
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}"
        )

    logger.add(
        sys.stderr,
        format="<level>{level: <8}</level> | {message}",
        level=level,
        colorize=True
    )
