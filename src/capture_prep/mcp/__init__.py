"""
MCP Layer for Capture Prep Module

This package contains the MCP (Model Context Protocol) layer for the
preprocessing pipeline, providing wrappers for the core functionality to be
used by AI agents.

Usage:
    # Start the MCP server
    python -m capture_prep.mcp.mcp_server start

    # Use the MCP server in Python
    from capture_prep.mcp import create_mcp_server
    mcp = create_mcp_server()
    mcp.run()
"""

from capture_prep.mcp.mcp_tools import create_mcp_server

from capture_prep.mcp.mcp_server import (
    main,
    health_check,
    get_server_info
)

from capture_prep.mcp.wrappers import (
    process_ocr_wrapper,
    process_submission_wrapper,
    process_receipt_wrapper,
    crop_rectangle_wrapper,
    watermark_wrapper,
    settings_wrapper,
    format_mcp_response
)

__all__ = [
    'create_mcp_server',
    'main',
    'health_check',
    'get_server_info',

    'process_ocr_wrapper',
    'process_submission_wrapper',
    'process_receipt_wrapper',
    'crop_rectangle_wrapper',
    'watermark_wrapper',
    'settings_wrapper',
    'format_mcp_response'
]

EXAMPLE_MCP_CONFIG = """
{
  "mcpServers": {
    "capture-prep": {
      "command": "capture-prep-mcp",
      "args": ["start"]
    }
  }
}
"""
