"""
Base Tool Classes
Abstract base classes for tool implementations.
"""

import json
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional

from jsonschema import Draft7Validator

from varquery.mcp_types import (
    ToolInput, ToolResult, ToolError, ToolContext,
    ToolHandlerResult, ToolValidationResult, ToolValidationError,
    MCPErrorCode, TextContent
)


class BaseTool(ABC):
    """Abstract base class for all tool implementations."""

    def __init__(self, logger):
        self.logger = logger

    @property
    @abstractmethod
    def name(self) -> str:
        """Tool name."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Tool description."""
        pass

    @property
    @abstractmethod
    def inputSchema(self) -> Dict[str, Any]:
        """Tool input schema (JSON Schema)."""
        pass

    @abstractmethod
    async def execute(self, input: ToolInput, context: ToolContext) -> ToolHandlerResult:
        """Execute the tool with input and context."""
        pass

    def validateInput(self, input: Dict[str, Any]) -> ToolValidationResult:
        """Validate tool input against inputSchema."""
        validator = Draft7Validator(self.inputSchema)
        errors = []

        for error in sorted(validator.iter_errors(dict(input)), key=lambda e: list(e.path)):
            field = ".".join(str(part) for part in error.path) or "input"
            errors.append(ToolValidationError(
                field=field,
                message=error.message,
                code=str(error.validator).upper()
            ))

        return ToolValidationResult(valid=len(errors) == 0, errors=errors)

    def createSuccessResult(self, data: Any) -> ToolResult:
        """Create a successful tool result - follows MCP specification."""
        try:
            if isinstance(data, str):
                text = data
            else:
                text = json.dumps(data, indent=2, default=str, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            self.logger.warning(f"Failed to serialize tool result: {e}")
            text = json.dumps({"error": "Failed to serialize result"}, indent=2)

        return ToolResult(
            content=[TextContent(type="text", text=text)],
            isError=False
        )

    def createErrorResult(self, error: ToolError) -> ToolResult:
        """Create an error tool result - follows MCP specification."""
        return ToolResult(
            content=[TextContent(type="text", text=error.message)],
            isError=True
        )

    def errorResult(self, code: MCPErrorCode, message: str, details: Optional[str] = None) -> ToolHandlerResult:
        """Wrap an error into a failed handler result."""
        error = ToolError(code=code, message=message, details=details)
        return ToolHandlerResult(
            success=False,
            error=error,
            result=self.createErrorResult(error)
        )
