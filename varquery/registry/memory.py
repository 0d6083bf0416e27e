"""
Memory Registry

In-process variable registry with the same cursor protocol as the
variable server. Used for embedded registries and test fixtures.
"""

import re
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple

from varquery.query.types import (
    Criteria,
    Cursor,
    Found,
    InvalidArgument,
    MatchResult,
    NotFound,
    RegistryReply,
    SearchSpecification,
)
from varquery.registry.session import RegistrySession


@dataclass
class VarEntry:
    """A registered variable."""
    name: str
    value: Any = None
    instance_id: int = 0
    flags: int = 0
    tags: Tuple[str, ...] = ()


class MemoryRegistry(RegistrySession):
    """Variables kept in registration order; that order is the enumeration order."""

    def __init__(self, entries: Optional[Iterable[VarEntry]] = None):
        self.entries: List[VarEntry] = list(entries or [])

    def add(self, name: str, value: Any = None, instance_id: int = 0,
            flags: int = 0, tags: Iterable[str] = ()) -> VarEntry:
        """Register a variable and return its entry."""
        entry = VarEntry(name=name, value=value, instance_id=instance_id,
                         flags=flags, tags=tuple(tags))
        self.entries.append(entry)
        return entry

    def get_first(self, spec: SearchSpecification) -> RegistryReply:
        return self._scan(spec, 0)

    def get_next(self, spec: SearchSpecification, cursor: Cursor) -> RegistryReply:
        position = cursor.position
        if not isinstance(position, int) or position < 0:
            return InvalidArgument(f"Invalid cursor: {position!r}")
        return self._scan(spec, position)

    def render_value(self, handle: Any, sink) -> None:
        if not isinstance(handle, int) or not 0 <= handle < len(self.entries):
            raise LookupError(f"Unknown variable handle: {handle!r}")
        sink.write(str(self.entries[handle].value))

    def _scan(self, spec: SearchSpecification, start: int) -> RegistryReply:
        try:
            matcher = _compile(spec)
        except ValueError as e:
            return InvalidArgument(str(e))

        for index in range(start, len(self.entries)):
            entry = self.entries[index]
            if matcher(entry):
                return Found(
                    match=MatchResult(name=entry.name, instance_id=entry.instance_id, handle=index),
                    cursor=Cursor(position=index + 1),
                )
        return NotFound()


def _compile(spec: SearchSpecification):
    """Build a predicate for spec, raising ValueError if the registry would reject it."""
    checks = []

    if spec.has(Criteria.NAME_EXACT):
        if not spec.name_pattern:
            raise ValueError("Name match requested without a name")
        name = spec.name_pattern
        checks.append(lambda entry: entry.name == name)

    if spec.has(Criteria.NAME_REGEX):
        if not spec.name_pattern:
            raise ValueError("Regex match requested without a pattern")
        try:
            regex = re.compile(spec.name_pattern)
        except re.error as e:
            raise ValueError(f"Invalid name pattern '{spec.name_pattern}': {e}")
        checks.append(lambda entry: regex.search(entry.name) is not None)

    if spec.has(Criteria.FLAGS_MATCH):
        if spec.flags_mask == 0:
            raise ValueError("Flags match requested without any flags")
        mask = spec.flags_mask
        checks.append(lambda entry: entry.flags & mask == mask)

    # A dropped tag spec leaves no tags and therefore no tag filter
    if spec.has(Criteria.TAGS_MATCH) and spec.tags:
        wanted = set(spec.tags)
        checks.append(lambda entry: wanted.issubset(entry.tags))

    if spec.has(Criteria.INSTANCE_ID_MATCH):
        if spec.instance_id == 0:
            raise ValueError("Instance ID 0 is not a valid match target")
        instance_id = spec.instance_id
        checks.append(lambda entry: entry.instance_id == instance_id)

    return lambda entry: all(check(entry) for check in checks)
