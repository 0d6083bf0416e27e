#!/usr/bin/env python3
"""
varquery MCP Server
Exposes registry search as an MCP tool over stdio.
"""

import asyncio
import time
from typing import Callable, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.server.models import InitializationOptions
from mcp.server.lowlevel import NotificationOptions
from mcp import types

from varquery import __version__, __package_name__
from varquery.config import ConfigManager
from varquery.mcp_types import ToolContext
from varquery.registry import HttpRegistrySession, RegistrySession
from varquery.tools import ToolRegistry, SearchVarsTool
from varquery.utils import Logger


class VarQueryMCPServer:
    """MCP server wrapping the varquery tool registry."""

    def __init__(self, session_factory: Optional[Callable[[], RegistrySession]] = None):
        self.config = ConfigManager.get_instance()
        config = self.config.load()

        self.server = Server(__package_name__)
        self.logger = Logger(name=__package_name__, level=config.log_level)
        self.session_factory = session_factory or (
            lambda: HttpRegistrySession.from_config(self.config.get(), logger=self.logger)
        )

        self.tool_registry = ToolRegistry(self.logger)
        self.tool_registry.register(SearchVarsTool(self.logger, self.session_factory))

        self._setup_handlers()

    def _setup_handlers(self):
        """Set up MCP protocol request handlers using decorators."""

        @self.server.list_tools()
        async def handle_list_tools() -> list[types.Tool]:
            return self.tool_registry.getToolSchemas()

        @self.server.call_tool()
        async def handle_call_tool(name: str, arguments: dict) -> list[types.TextContent]:
            return await self.call_tool(name, arguments)

    async def call_tool(self, name: str, arguments: Optional[dict]) -> list[types.TextContent]:
        """Execute a tool - MCP tools/call handler."""
        if not self.tool_registry.hasTool(name):
            self.logger.error(f"Tool not found: {name}")
            raise ValueError(f"Tool '{name}' not found")

        context = ToolContext(
            userId="system",
            requestId=f"req_{time.monotonic_ns()}",
            timestamp=time.time(),
            toolName=name
        )

        result = await self.tool_registry.execute(name, arguments or {}, context)

        if result.success and result.result:
            return [
                types.TextContent(type="text", text=item.text)
                for item in result.result.content
            ]

        error_msg = result.error.message if result.error else "Unknown error"
        raise RuntimeError(f"Tool execution failed: {error_msg}")

    async def start(self):
        """Serve MCP over stdio until the client disconnects."""
        self.logger.info(f"Registered {len(self.tool_registry.listTools())} tools")

        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                InitializationOptions(
                    server_name=__package_name__,
                    server_version=__version__,
                    capabilities=self.server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={}
                    ),
                ),
            )


async def run_stdio():
    """Run in stdio mode."""
    server = VarQueryMCPServer()
    await server.start()


def main():
    asyncio.run(run_stdio())


if __name__ == "__main__":
    main()
