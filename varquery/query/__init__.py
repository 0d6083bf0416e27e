"""
Query Module
Search specification types and the query builder.
"""

from .types import (
    MAX_TAGSPEC_LEN,
    MAX_TAG_SPEC_CHARS,
    Criteria,
    Cursor,
    ErrorKind,
    Found,
    InvalidArgument,
    IterationState,
    MatchResult,
    NotFound,
    Outcome,
    RegistryReply,
    ResultCode,
    SearchError,
    SearchResult,
    SearchSpecification,
    TransportError,
    ValidationCode,
    ValidationError,
    VarQueryError,
)
from .builder import build, criteria_from_mask, parse_tags

__all__ = [
    "MAX_TAGSPEC_LEN",
    "MAX_TAG_SPEC_CHARS",
    "Criteria",
    "Cursor",
    "ErrorKind",
    "Found",
    "InvalidArgument",
    "IterationState",
    "MatchResult",
    "NotFound",
    "Outcome",
    "RegistryReply",
    "ResultCode",
    "SearchError",
    "SearchResult",
    "SearchSpecification",
    "TransportError",
    "ValidationCode",
    "ValidationError",
    "VarQueryError",
    # Builder
    "build",
    "criteria_from_mask",
    "parse_tags",
]
