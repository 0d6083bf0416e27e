"""
Search Module
Result iteration, rendering, and the caller-facing search operation.
"""

from .sink import OutputSink, as_sink
from .iterator import format_name, render_match, run
from .service import search, search_with

__all__ = [
    "OutputSink",
    "as_sink",
    "format_name",
    "render_match",
    "run",
    "search",
    "search_with",
]
