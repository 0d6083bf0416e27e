"""
MCP Types Module
Types and dataclasses for the MCP tool layer.
"""

from .tools import (
    MCPErrorCode,
    TextContent,
    ToolInput,
    ToolContext,
    ToolResult,
    ToolError,
    ToolHandlerResult,
    ToolValidationError,
    ToolValidationResult,
    ToolHandler,
)

__all__ = [
    "MCPErrorCode",
    "TextContent",
    "ToolInput",
    "ToolContext",
    "ToolResult",
    "ToolError",
    "ToolHandlerResult",
    "ToolValidationError",
    "ToolValidationResult",
    "ToolHandler",
]
