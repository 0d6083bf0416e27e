"""
Tool-related types
Results, errors and validation records passed between the MCP server and
the search_vars tool.
"""

from typing import Dict, Any, List, Optional, Callable, Awaitable
from dataclasses import dataclass, field
from enum import Enum


class MCPErrorCode(Enum):
    """Error codes reported back to MCP clients."""
    INVALID_INPUT = "INVALID_INPUT"                # Schema rejected the arguments
    VALIDATION_ERROR = "VALIDATION_ERROR"          # Search criteria rejected
    RESOURCE_UNAVAILABLE = "RESOURCE_UNAVAILABLE"  # Variable server unreachable
    TOOL_EXECUTION_ERROR = "TOOL_EXECUTION_ERROR"  # Handler raised
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass
class TextContent:
    type: str
    text: str


class ToolInput(dict):
    """Tool arguments; keys are also readable as attributes."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        for key, value in kwargs.items():
            setattr(self, key, value)


@dataclass
class ToolContext:
    """Who called the tool and when."""
    userId: str
    requestId: str
    timestamp: float
    toolName: Optional[str] = None


@dataclass
class ToolResult:
    content: List[TextContent]
    isError: bool = False


@dataclass
class ToolError:
    code: MCPErrorCode
    message: str
    details: Optional[str] = None


@dataclass
class ToolHandlerResult:
    """Outcome of one tool call; result carries the text shown to the client."""
    success: bool
    result: Optional[ToolResult] = None
    error: Optional[ToolError] = None


@dataclass
class ToolValidationError:
    field: str
    message: str
    code: str


@dataclass
class ToolValidationResult:
    valid: bool
    errors: List[ToolValidationError] = field(default_factory=list)


ToolHandler = Callable[[Dict[str, Any], ToolContext], Awaitable[ToolHandlerResult]]
