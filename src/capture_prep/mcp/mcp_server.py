#!/usr/bin/env python3
"""
MCP Server Entry Point for Capture Prep Tools

This is the main entry point for the preprocessing MCP server, designed to
be directly referenced in the .mcp.json configuration.

This module is part of the Integration Layer and connects the MCP functionality
to the application core.
"""

import sys
import json
import argparse
from typing import Any, Dict

from loguru import logger

from capture_prep import __version__
from capture_prep.core.constants import LOG_LEVEL
from capture_prep.core.log_utils import configure_logging
from capture_prep.core.utils import get_system_info
from capture_prep.mcp.mcp_tools import create_mcp_server


def get_server_info() -> Dict[str, Any]:
    """
    Get server information.

    Returns:
        Dict[str, Any]: Server information
    """
    return {
        "name": "Capture Prep MCP Server",
        "version": __version__,
        "description": "Adaptive crop, compression and watermarking of captured images for vision models",
        "tools": [
            "process_ocr_image",
            "process_submission_image",
            "process_receipt_image",
            "compute_crop_rectangle",
            "watermark_image",
            "get_compression_settings",
        ],
    }


def health_check() -> Dict[str, Any]:
    """
    Perform a health check by encoding a tiny in-memory image.

    Returns:
        Dict[str, Any]: Health check results
    """
    try:
        import io
        import PIL
        import pydantic
        from PIL import Image

        buffer = io.BytesIO()
        Image.new("RGB", (8, 8), (255, 255, 255)).save(buffer, format="JPEG", quality=85)

        return {
            "status": "healthy",
            **get_system_info(),
            "pil_version": getattr(PIL, "__version__", "unknown"),
            "pydantic_version": getattr(pydantic, "VERSION", "unknown"),
        }
    except Exception as e:
        return {
            "status": "unhealthy",
            "error": str(e),
        }


def main() -> int:
    """
    Main entry point for the MCP server.

    Returns:
        int: Exit code
    """
    parser = argparse.ArgumentParser(description="Capture Prep MCP Server")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    start_parser = subparsers.add_parser("start", help="Start the MCP server")
    start_parser.add_argument("--host", type=str, default="localhost", help="Host to listen on")
    start_parser.add_argument("--port", type=int, default=3000, help="Port to listen on")
    start_parser.add_argument("--debug", action="store_true", help="Enable debug mode")

    subparsers.add_parser("health", help="Check server health")
    subparsers.add_parser("info", help="Display server information")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "start":
        log_level = "DEBUG" if args.debug else LOG_LEVEL
        configure_logging(log_level, log_file="logs/mcp_server.log")

        logger.info("Starting MCP server for capture prep tools")
        logger.info(f"Host: {args.host}, Port: {args.port}, Debug: {args.debug}")

        try:
            mcp = create_mcp_server(host=args.host, port=args.port)
            mcp.run()
        except KeyboardInterrupt:
            logger.info("Server stopped by user")
            return 0
        except Exception as e:
            logger.exception(f"Server failed to start: {str(e)}")
            return 1

    elif args.command == "health":
        result = health_check()
        print(json.dumps(result, indent=2))
        return 0 if result["status"] == "healthy" else 1

    elif args.command == "info":
        print(json.dumps(get_server_info(), indent=2))
        return 0

    return 0


if __name__ == "__main__":
    """
    Direct entry point for the capture prep MCP server.

    Usage:
      python -m capture_prep.mcp.mcp_server start [--host HOST] [--port PORT] [--debug]
      python -m capture_prep.mcp.mcp_server health
      python -m capture_prep.mcp.mcp_server info
    """
    sys.exit(main())
