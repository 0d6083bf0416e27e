"""
Search Service

Caller-facing search: build the specification, walk the registry, and
report a result code.
"""

from typing import Optional

from varquery.config import get_log_level
from varquery.query.builder import CriteriaInput, build
from varquery.query.types import (
    Criteria,
    ErrorKind,
    IterationState,
    ResultCode,
    SearchError,
    SearchResult,
    ValidationError,
)
from varquery.registry.session import RegistrySession
from varquery.search.iterator import run
from varquery.search.sink import SinkTarget
from varquery.utils import Logger

logger = Logger("varquery-search", level=get_log_level())

_FAILURE_CODES = {
    ErrorKind.VALIDATION: ResultCode.INVALID_ARGUMENTS,
    ErrorKind.REGISTRY_INVALID_ARGUMENT: ResultCode.INVALID_ARGUMENTS,
    ErrorKind.TRANSPORT_FAILURE: ResultCode.TRANSPORT_FAILURE,
}


def search(
    session: RegistrySession,
    criteria: Optional[CriteriaInput],
    name_pattern: Optional[str],
    tag_spec: Optional[str],
    instance_id: int,
    flags_mask: int,
    sink: SinkTarget,
    log: Optional[Logger] = None,
) -> SearchResult:
    """
    Search the registry and stream matches to sink.
    
    NO_MATCHES is returned when nothing matched. It is not a failure:
    result.ok is True for it, as for SUCCESS.
    """
    log = log or logger

    try:
        spec = build(criteria, name_pattern, tag_spec, instance_id, flags_mask)
    except ValidationError as e:
        log.error(f"Invalid search criteria: {e.message}")
        return SearchResult(
            code=ResultCode.INVALID_ARGUMENTS,
            error=SearchError(kind=ErrorKind.VALIDATION, message=e.message, details=e.code.value),
        )

    log.debug("Searching registry", extra={
        'criteria': sorted(kind.name for kind in spec.criteria),
        'tag_filter_applied': spec.tag_filter_applied,
    })

    outcome = run(session, spec, sink, log=log)

    if outcome.state == IterationState.DONE:
        code = ResultCode.SUCCESS
    elif outcome.state == IterationState.EMPTY:
        code = ResultCode.NO_MATCHES
    else:
        code = _FAILURE_CODES[outcome.error.kind] if outcome.error else ResultCode.TRANSPORT_FAILURE

    return SearchResult(
        code=code,
        lines=outcome.lines,
        tag_filter_applied=spec.tag_filter_applied,
        error=outcome.error,
    )


def search_with(
    session: RegistrySession,
    sink: SinkTarget,
    name: Optional[str] = None,
    regex: Optional[str] = None,
    flags: Optional[int] = None,
    tags: Optional[str] = None,
    instance_id: Optional[int] = None,
    show_value: bool = False,
    log: Optional[Logger] = None,
) -> SearchResult:
    """
    Search using keyword options, each enabling its criteria kind.

    This is the form used by the CLI, the MCP tool and the HTTP endpoint.
    Passing both name and regex is rejected by the builder.
    """
    criteria = set()
    if name is not None:
        criteria.add(Criteria.NAME_EXACT)
    if regex is not None:
        criteria.add(Criteria.NAME_REGEX)
    if flags is not None:
        criteria.add(Criteria.FLAGS_MATCH)
    if tags is not None:
        criteria.add(Criteria.TAGS_MATCH)
    if instance_id is not None:
        criteria.add(Criteria.INSTANCE_ID_MATCH)
    if show_value:
        criteria.add(Criteria.SHOW_VALUE)

    pattern = regex if regex is not None else name
    return search(
        session,
        criteria,
        pattern,
        tags,
        instance_id or 0,
        flags or 0,
        sink,
        log=log,
    )
