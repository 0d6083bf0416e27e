"""
Tool Registry
Manages tool registration, discovery, and execution.
"""

import time
from typing import Dict, Any, List, Optional

from mcp.types import Tool as MCPTool

from varquery.mcp_types import (
    ToolHandler, ToolContext, ToolError, ToolHandlerResult, MCPErrorCode
)
from varquery.tools.base import BaseTool


class ToolRegistry:
    """Tool Registry Implementation."""

    def __init__(self, logger):
        self.logger = logger
        self.tools: Dict[str, BaseTool] = {}
        self.handlers: Dict[str, ToolHandler] = {}

    def register(self, tool: BaseTool, handler: Optional[ToolHandler] = None) -> None:
        """Register a tool; its execute method is the default handler."""
        if tool.name in self.tools:
            raise ValueError(f"Tool {tool.name} is already registered")

        self.tools[tool.name] = tool
        self.handlers[tool.name] = handler or tool.execute
        self.logger.info(f"Tool registered: {tool.name}")

    def get(self, toolName: str) -> Optional[BaseTool]:
        """Get a tool by name."""
        return self.tools.get(toolName)

    def listTools(self) -> List[BaseTool]:
        """List all registered tools."""
        return list(self.tools.values())

    def hasTool(self, toolName: str) -> bool:
        """Check if a tool is registered."""
        return toolName in self.tools

    async def execute(self, toolName: str, input: Dict[str, Any], context: ToolContext) -> ToolHandlerResult:
        """Execute a tool; handler exceptions become TOOL_EXECUTION_ERROR results."""
        if not self.hasTool(toolName):
            raise ValueError(f"Tool {toolName} not found")

        handler = self.handlers[toolName]
        started = time.monotonic()

        try:
            result = await handler(input, context)
        except Exception as error:
            self.logger.error(f"Tool {toolName} raised after {self._elapsed_ms(started)}ms: {error}")
            return ToolHandlerResult(
                success=False,
                error=ToolError(code=MCPErrorCode.TOOL_EXECUTION_ERROR, message=str(error))
            )

        status = "completed" if result.success else "failed"
        self.logger.info(
            f"Tool {toolName} {status} in {self._elapsed_ms(started)}ms",
            extra={"request_id": context.requestId}
        )
        return result

    def getToolSchemas(self) -> List[MCPTool]:
        """Get tool schemas for MCP protocol - returns proper MCP Tool objects."""
        return [
            MCPTool(
                name=tool.name,
                description=tool.description,
                inputSchema=tool.inputSchema
            )
            for tool in self.listTools()
        ]

    @staticmethod
    def _elapsed_ms(started: float) -> int:
        return int((time.monotonic() - started) * 1000)
