#!/usr/bin/env python3
"""
Response Schemas for Capture Prep CLI

This module defines the response envelope printed in --json mode and the
helper building it.

This module is part of the Presentation Layer and should only depend on
Core Layer components, not on Integration Layer.

Sample input:
- format_cli_response(True, data={"location": "processed/resized_1.jpg"})

Expected output:
- {"success": True, "data": {"location": "processed/resized_1.jpg"}}
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error response model"""
    success: bool = False
    error: str
    details: Optional[Dict[str, Any]] = None


class SuccessResponse(BaseModel):
    """Success response model"""
    success: bool = True
    data: Dict[str, Any]


def format_cli_response(
    success: bool,
    data: Optional[Dict[str, Any]] = None,
    error: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Format a standardized CLI response.

    Args:
        success: Whether the operation was successful
        data: Response data (for successful operations)
        error: Error message (for failed operations)
        details: Extra error context such as per-field validation messages

    Returns:
        Dict[str, Any]: Formatted response
    """
    if success and data is not None:
        return SuccessResponse(data=data).model_dump()
    elif not success and error is not None:
        return ErrorResponse(error=error, details=details).model_dump(exclude_none=True)
    else:
        return {"success": success}
