"""Tests for the result iterator and renderer."""

import io

from varquery.query.builder import build
from varquery.query.types import (
    Criteria,
    Cursor,
    ErrorKind,
    InvalidArgument,
    IterationState,
    MatchResult,
    NotFound,
    TransportError,
)
from varquery.registry.memory import MemoryRegistry
from varquery.search.iterator import format_name, run


class TestFormatName:
    """Test instance qualification."""

    def test_instance_zero_is_bare(self):
        assert format_name(MatchResult(name="x", instance_id=0)) == "x"

    def test_instance_is_bracketed(self):
        assert format_name(MatchResult(name="x", instance_id=5)) == "[5]x"

    def test_name_is_not_escaped(self):
        assert format_name(MatchResult(name="a b=[c]\t")) == "a b=[c]\t"


class TestRun:
    """Test run()."""

    def test_unrestricted_scan_lists_every_entry_in_order(self, logger):
        registry = MemoryRegistry()
        for name in ("a", "b", "c"):
            registry.add(name)
        out = io.StringIO()

        outcome = run(registry, build(None), out, log=logger)

        assert out.getvalue() == "a\nb\nc\n"
        assert outcome.state == IterationState.DONE
        assert outcome.lines == 3
        assert outcome.succeeded

    def test_instance_qualified_lines(self, logger):
        registry = MemoryRegistry()
        registry.add("x", instance_id=0)
        registry.add("x", instance_id=5)
        out = io.StringIO()

        run(registry, build(None), out, log=logger)

        assert out.getvalue() == "x\n[5]x\n"

    def test_show_value_appends_value(self, logger):
        registry = MemoryRegistry()
        registry.add("count", 42)
        out = io.StringIO()

        run(registry, build({Criteria.SHOW_VALUE}), out, log=logger)

        assert out.getvalue() == "count=42\n"

    def test_without_show_value_only_names(self, logger):
        registry = MemoryRegistry()
        registry.add("count", 42)
        out = io.StringIO()

        run(registry, build(None), out, log=logger)

        assert out.getvalue() == "count\n"

    def test_qualified_name_with_value(self, logger):
        registry = MemoryRegistry()
        registry.add("temp", 21.5, instance_id=3)
        out = io.StringIO()

        run(registry, build({Criteria.SHOW_VALUE}), out, log=logger)

        assert out.getvalue() == "[3]temp=21.5\n"

    def test_empty_result(self, logger, scripted):
        session = scripted([NotFound()])
        out = io.StringIO()

        outcome = run(session, build(None), out, log=logger)

        assert out.getvalue() == ""
        assert outcome.state == IterationState.EMPTY
        assert outcome.lines == 0
        assert outcome.succeeded
        assert outcome.error is None

    def test_invalid_argument_on_first(self, logger, scripted):
        session = scripted([InvalidArgument("bad pattern")])
        out = io.StringIO()

        outcome = run(session, build(None), out, log=logger)

        assert out.getvalue() == ""
        assert outcome.state == IterationState.FAILED
        assert not outcome.succeeded
        assert outcome.error.kind == ErrorKind.REGISTRY_INVALID_ARGUMENT
        assert outcome.error.message == "bad pattern"
        logger.error.assert_called_once()

    def test_failure_mid_walk_keeps_written_lines(self, logger, scripted, found):
        session = scripted([
            found("a", position=1),
            found("b", position=2),
            InvalidArgument("protocol error"),
        ])
        out = io.StringIO()

        outcome = run(session, build(None), out, log=logger)

        assert out.getvalue() == "a\nb\n"
        assert outcome.lines == 2
        assert outcome.state == IterationState.FAILED
        assert outcome.error.kind == ErrorKind.REGISTRY_INVALID_ARGUMENT
        assert session.calls == ["first", "next", "next"]

    def test_transport_failure_mid_walk(self, logger, scripted, found):
        session = scripted([
            found("a", position=1),
            found("b", position=2),
            TransportError("connection reset"),
        ])
        out = io.StringIO()

        outcome = run(session, build(None), out, log=logger)

        assert out.getvalue() == "a\nb\n"
        assert outcome.lines == 2
        assert outcome.state == IterationState.FAILED
        assert outcome.error.kind == ErrorKind.TRANSPORT_FAILURE

    def test_cursor_is_threaded_through(self, logger, scripted, found):
        session = scripted([found("a", position="c1"), found("b", position="c2"), NotFound()])

        run(session, build(None), io.StringIO(), log=logger)

        assert session.cursors == [Cursor(position="c1"), Cursor(position="c2")]

    def test_value_render_failure_fails_walk(self, logger, scripted, found):
        session = scripted(
            [found("a", handle=1), found("b", handle=2), NotFound()],
            values={1: "ok", 2: TransportError("value lost")},
        )
        out = io.StringIO()

        outcome = run(session, build({Criteria.SHOW_VALUE}), out, log=logger)

        assert out.getvalue() == "a=ok\nb="
        assert outcome.lines == 1
        assert outcome.state == IterationState.FAILED
        assert outcome.error.kind == ErrorKind.TRANSPORT_FAILURE

    def test_specification_not_mutated(self, logger, registry):
        spec = build({Criteria.NAME_REGEX}, name_pattern="^/app")
        before = build({Criteria.NAME_REGEX}, name_pattern="^/app")

        run(registry, spec, io.StringIO(), log=logger)

        assert spec == before

    def test_writes_to_byte_stream(self, logger):
        registry = MemoryRegistry()
        registry.add("größe", 3)
        out = io.BytesIO()

        run(registry, build({Criteria.SHOW_VALUE}), out, log=logger)

        assert out.getvalue() == "größe=3\n".encode("utf-8")


class BrokenPipeStream(io.StringIO):
    """Text stream whose reader has gone away."""

    def __init__(self, fail_writes: bool = False):
        super().__init__()
        self.fail_writes = fail_writes
        self.flushes = 0

    def write(self, text):
        if self.fail_writes:
            raise BrokenPipeError(32, "Broken pipe")
        return super().write(text)

    def flush(self):
        self.flushes += 1
        raise BrokenPipeError(32, "Broken pipe")


class TestRunFlush:
    """Test flushing the sink at the end of a walk."""

    def test_flush_failure_fails_walk(self, logger):
        registry = MemoryRegistry()
        registry.add("a")
        out = BrokenPipeStream()

        outcome = run(registry, build(None), out, log=logger)

        assert out.getvalue() == "a\n"
        assert outcome.state == IterationState.FAILED
        assert outcome.lines == 1
        assert outcome.error.kind == ErrorKind.TRANSPORT_FAILURE
        assert outcome.error.details == "BrokenPipeError"

    def test_flush_failure_after_write_failure_keeps_outcome(self, logger):
        registry = MemoryRegistry()
        registry.add("a")
        out = BrokenPipeStream(fail_writes=True)

        outcome = run(registry, build(None), out, log=logger)

        assert outcome.state == IterationState.FAILED
        assert outcome.lines == 0
        assert outcome.error.kind == ErrorKind.TRANSPORT_FAILURE

    def test_flush_failure_after_transport_failure_keeps_outcome(self, logger, scripted, found):
        session = scripted([found("a", position=1), TransportError("connection reset")])
        out = BrokenPipeStream()

        outcome = run(session, build(None), out, log=logger)

        assert out.getvalue() == "a\n"
        assert out.flushes == 1
        assert outcome.lines == 1
        assert outcome.error.kind == ErrorKind.TRANSPORT_FAILURE
        assert outcome.error.message == "connection reset"
        logger.warning.assert_called_once()
