"""
Utility modules for the view.tree MCP server.

This package contains shared utilities used across services:
- error_handler: Decorator-based error handling for MCP entry points
- context_helper: Context access utilities and helpers
- validation: Common validation logic
- file_filter: Which workspace files and events matter
"""

from .context_helper import ContextHelper
from .error_handler import handle_mcp_errors, handle_mcp_resource_errors, handle_mcp_tool_errors
from .file_filter import FileFilter
from .validation import ValidationHelper

__all__ = [
    "handle_mcp_errors",
    "handle_mcp_resource_errors",
    "handle_mcp_tool_errors",
    "ContextHelper",
    "ValidationHelper",
    "FileFilter",
]
