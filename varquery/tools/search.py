"""
Search Tool

Search the variable server registry from an MCP client.
"""

import asyncio
import io
from typing import Any, Callable

from varquery.mcp_types import (
    MCPErrorCode,
    ToolContext,
    ToolHandlerResult,
    ToolInput,
)
from varquery.query.types import ErrorKind, ResultCode
from varquery.registry.session import RegistrySession
from varquery.search.service import search_with
from varquery.tools.base import BaseTool
from varquery.utils import Logger

SessionFactory = Callable[[], RegistrySession]


class SearchVarsTool(BaseTool):
    """
    Search for variables.

    Each supplied field enables one criterion; all criteria must match.
    """

    def __init__(self, logger: Logger, session_factory: SessionFactory):
        super().__init__(logger)
        self.session_factory = session_factory

    @property
    def name(self) -> str:
        return "search_vars"

    @property
    def description(self) -> str:
        return """Search the variable server for variables matching all given criteria.

OPTIONAL: name OR regex, flags, tags, instance_id, show_value

With no criteria every variable is listed.
Output is one line per variable in registry order:
- "name" for unqualified variables
- "[3]name" for variables owned by instance 3
- "name=value" when show_value is true

Examples:
- search_vars(regex="^/sys/") - all variables under /sys/
- search_vars(tags="network,config", show_value=true) - tagged variables with values
- search_vars(instance_id=3) - variables owned by instance 3"""

    @property
    def inputSchema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "name": {
                    "type": "string",
                    "description": "Exact variable name to match"
                },
                "regex": {
                    "type": "string",
                    "description": "Regular expression matched against variable names"
                },
                "flags": {
                    "type": "integer",
                    "minimum": 1,
                    "description": "Flag bits that must all be set on the variable"
                },
                "tags": {
                    "type": "string",
                    "description": "Comma separated tags the variable must carry (max 255 characters; longer specs are ignored)"
                },
                "instance_id": {
                    "type": "integer",
                    "minimum": 1,
                    "description": "Owning instance identifier"
                },
                "show_value": {
                    "type": "boolean",
                    "default": False,
                    "description": "Append '=value' to each result"
                }
            },
            "not": {"required": ["name", "regex"]},
            "additionalProperties": False
        }

    async def execute(self, input: ToolInput, context: ToolContext) -> ToolHandlerResult:
        """Execute search."""
        validation = self.validateInput(input)
        if not validation.valid:
            message = "; ".join(f"{e.field}: {e.message}" for e in validation.errors)
            return self.errorResult(MCPErrorCode.INVALID_INPUT, f"Invalid search input: {message}")

        buffer = io.StringIO()
        try:
            result = await asyncio.to_thread(self._search, input, buffer)
        except Exception as e:
            self.logger.error(f"Search error: {e}")
            return self.errorResult(MCPErrorCode.INTERNAL_ERROR, f"Search failed: {str(e)}")

        if not result.ok:
            error = result.error
            code = MCPErrorCode.RESOURCE_UNAVAILABLE
            if result.code == ResultCode.INVALID_ARGUMENTS:
                code = MCPErrorCode.VALIDATION_ERROR if error and error.kind == ErrorKind.VALIDATION else MCPErrorCode.INVALID_INPUT
            return self.errorResult(
                code,
                f"Search failed ({result.code.value}): {error.message if error else 'unknown error'}",
                details=buffer.getvalue() or None,
            )

        return ToolHandlerResult(
            success=True,
            result=self.createSuccessResult({
                "code": result.code.value,
                "lines": result.lines,
                "tag_filter_applied": result.tag_filter_applied,
                "output": buffer.getvalue(),
            })
        )

    def _search(self, input: ToolInput, buffer: io.StringIO):
        # Runs in a worker thread; sessions block on the registry
        with self.session_factory() as session:
            return search_with(
                session,
                buffer,
                name=input.get("name"),
                regex=input.get("regex"),
                flags=input.get("flags"),
                tags=input.get("tags"),
                instance_id=input.get("instance_id"),
                show_value=bool(input.get("show_value", False)),
                log=self.logger,
            )
