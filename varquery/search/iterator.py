"""
Result Iterator

Walks the registry cursor for a specification and renders each match as
one line on the output sink.
"""

from typing import Optional

from varquery.config import get_log_level
from varquery.query.types import (
    ErrorKind,
    Found,
    InvalidArgument,
    IterationState,
    MatchResult,
    NotFound,
    Outcome,
    RegistryReply,
    SearchError,
    SearchSpecification,
    TransportError,
)
from varquery.registry.session import RegistrySession
from varquery.search.sink import SinkTarget, as_sink
from varquery.utils import Logger

logger = Logger("varquery-search", level=get_log_level())


def format_name(match: MatchResult) -> str:
    """Bare name for instance 0, otherwise [id]name."""
    if match.instance_id == 0:
        return match.name
    return f"[{match.instance_id}]{match.name}"


def render_match(session: RegistrySession, spec: SearchSpecification, match: MatchResult, sink) -> None:
    """Write one result line."""
    sink.write(format_name(match))
    if spec.show_value:
        sink.write("=")
        session.render_value(match.handle, sink)
    sink.write("\n")


def _flush_written(out, log: Logger) -> None:
    # The walk already failed; a flush error must not replace that outcome
    try:
        out.flush()
    except OSError as e:
        log.warning(f"Could not flush partial output: {e}")


def run(
    session: RegistrySession,
    spec: SearchSpecification,
    sink: SinkTarget,
    log: Optional[Logger] = None,
) -> Outcome:
    """
    Stream every match for spec to sink.

    Returns an Outcome in state DONE (at least one line), EMPTY (nothing
    matched) or FAILED. Lines written before a failure are not retracted.
    """
    log = log or logger
    out = as_sink(sink)
    lines = 0

    try:
        reply: RegistryReply = session.get_first(spec)
        while isinstance(reply, Found):
            render_match(session, spec, reply.match, out)
            lines += 1
            reply = session.get_next(spec, reply.cursor)
        out.flush()
    except TransportError as e:
        log.error(f"Search aborted after {lines} result(s): {e}")
        _flush_written(out, log)
        return Outcome(
            state=IterationState.FAILED,
            lines=lines,
            error=SearchError(kind=ErrorKind.TRANSPORT_FAILURE, message=str(e)),
        )
    except (OSError, LookupError) as e:
        # Sink writes and value rendering fail the walk like a lost registry
        log.error(f"Search output failed after {lines} result(s): {e}")
        if not isinstance(e, OSError):
            _flush_written(out, log)
        return Outcome(
            state=IterationState.FAILED,
            lines=lines,
            error=SearchError(
                kind=ErrorKind.TRANSPORT_FAILURE,
                message=f"Failed to render result: {e}",
                details=type(e).__name__,
            ),
        )

    if isinstance(reply, InvalidArgument):
        log.error(f"Registry rejected search after {lines} result(s): {reply.reason}")
        return Outcome(
            state=IterationState.FAILED,
            lines=lines,
            error=SearchError(kind=ErrorKind.REGISTRY_INVALID_ARGUMENT, message=reply.reason),
        )

    if not isinstance(reply, NotFound):
        return Outcome(
            state=IterationState.FAILED,
            lines=lines,
            error=SearchError(
                kind=ErrorKind.TRANSPORT_FAILURE,
                message=f"Unexpected registry reply: {reply!r}",
            ),
        )

    state = IterationState.DONE if lines else IterationState.EMPTY
    log.debug(f"Search finished: {state.value}, {lines} result(s)")
    return Outcome(state=state, lines=lines)
