"""
Query Types
Search specification, registry replies, and outcome types.
"""

import errno
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, Optional, Tuple, Union


# Size of the tag spec buffer on the variable server. A spec is only kept
# when it fits with room for the terminator.
MAX_TAGSPEC_LEN = 256
MAX_TAG_SPEC_CHARS = MAX_TAGSPEC_LEN - 1


class Criteria(Enum):
    """Criteria kinds, valued by their legacy query bit."""
    NAME_REGEX = 0x01
    NAME_EXACT = 0x02
    FLAGS_MATCH = 0x04
    TAGS_MATCH = 0x08
    SHOW_VALUE = 0x10         # rendering modifier, not a filter
    INSTANCE_ID_MATCH = 0x20

    @property
    def bit(self) -> int:
        return self.value


ALL_CRITERIA_BITS = sum(kind.bit for kind in Criteria)

NAME_CRITERIA = frozenset({Criteria.NAME_REGEX, Criteria.NAME_EXACT})


class ValidationCode(Enum):
    """Reasons the query builder rejects its input."""
    INVALID_CRITERIA = "INVALID_CRITERIA"
    CONFLICTING_CRITERIA = "CONFLICTING_CRITERIA"
    INVALID_VALUE = "INVALID_VALUE"


class ErrorKind(Enum):
    """Failure kinds a caller can tell apart."""
    VALIDATION = "VALIDATION"
    REGISTRY_INVALID_ARGUMENT = "REGISTRY_INVALID_ARGUMENT"
    TRANSPORT_FAILURE = "TRANSPORT_FAILURE"


class VarQueryError(Exception):
    """Base class for varquery errors."""


class ValidationError(VarQueryError):
    """Search criteria were rejected before any registry call."""

    def __init__(self, code: ValidationCode, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class TransportError(VarQueryError):
    """The registry could not be reached or the session is unusable."""


@dataclass(frozen=True)
class SearchSpecification:
    """Validated, immutable search query."""
    criteria: FrozenSet[Criteria] = frozenset()
    name_pattern: Optional[str] = None
    tag_spec: Optional[str] = None
    tags: Tuple[str, ...] = ()
    flags_mask: int = 0
    instance_id: int = 0
    tag_filter_applied: bool = True

    @property
    def filters(self) -> FrozenSet[Criteria]:
        """Enabled filter criteria; empty means every entry matches."""
        return self.criteria - {Criteria.SHOW_VALUE}

    @property
    def show_value(self) -> bool:
        return Criteria.SHOW_VALUE in self.criteria

    @property
    def is_unrestricted(self) -> bool:
        return not self.filters

    def has(self, kind: Criteria) -> bool:
        return kind in self.criteria

    @property
    def mask(self) -> int:
        """Legacy integer form of the enabled criteria."""
        result = 0
        for kind in self.criteria:
            result |= kind.bit
        return result


@dataclass(frozen=True)
class Cursor:
    """Opaque position in the registry's enumeration order."""
    position: Any


@dataclass(frozen=True)
class MatchResult:
    """One registry entry yielded by a cursor advance."""
    name: str
    instance_id: int = 0
    handle: Any = None


@dataclass(frozen=True)
class Found:
    """Registry reply carrying a match and the cursor to continue from."""
    match: MatchResult
    cursor: Cursor


@dataclass(frozen=True)
class NotFound:
    """Registry reply: no (more) matches."""


@dataclass(frozen=True)
class InvalidArgument:
    """Registry reply: the specification was rejected."""
    reason: str = "invalid argument"


RegistryReply = Union[Found, NotFound, InvalidArgument]


@dataclass
class SearchError:
    """Failure details attached to an outcome."""
    kind: ErrorKind
    message: str
    details: Optional[str] = None


class IterationState(Enum):
    """Terminal states of a registry walk."""
    DONE = "done"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass
class Outcome:
    """Result of one iterator run."""
    state: IterationState
    lines: int = 0
    error: Optional[SearchError] = None

    @property
    def succeeded(self) -> bool:
        return self.state in (IterationState.DONE, IterationState.EMPTY)


class ResultCode(Enum):
    """Caller-facing search result codes."""
    SUCCESS = "SUCCESS"
    NO_MATCHES = "NO_MATCHES"
    INVALID_ARGUMENTS = "INVALID_ARGUMENTS"
    TRANSPORT_FAILURE = "TRANSPORT_FAILURE"

    @property
    def errno(self) -> int:
        """Integer status used by variable server tooling."""
        return _ERRNO[self]

    @property
    def ok(self) -> bool:
        return self in (ResultCode.SUCCESS, ResultCode.NO_MATCHES)


_ERRNO = {
    ResultCode.SUCCESS: 0,
    ResultCode.NO_MATCHES: errno.ENOENT,
    ResultCode.INVALID_ARGUMENTS: errno.EINVAL,
    ResultCode.TRANSPORT_FAILURE: errno.EIO,
}


@dataclass
class SearchResult:
    """Caller-facing result of a search."""
    code: ResultCode
    lines: int = 0
    tag_filter_applied: bool = True
    error: Optional[SearchError] = None

    @property
    def ok(self) -> bool:
        return self.code.ok
