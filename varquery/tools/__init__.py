"""
Tools Module

MCP tools for varquery:
- search_vars: Search the variable server registry
"""

from .base import BaseTool
from .registry import ToolRegistry
from .search import SearchVarsTool

__all__ = [
    "BaseTool",
    "ToolRegistry",
    "SearchVarsTool",
]
