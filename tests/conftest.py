"""
Shared pytest fixtures for varquery tests

Fixture registries, scripted sessions for failure injection, and the
standard mock logger and tool context.
"""

import sys
from pathlib import Path
import pytest
from unittest.mock import Mock
from typing import Any, List

# Add project root to Python path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


# ============================================================================
# Mock Helper Classes
# ============================================================================

from varquery.query.types import Cursor, Found, MatchResult  # noqa: E402
from varquery.registry.session import RegistrySession  # noqa: E402


class ScriptedSession(RegistrySession):
    """
    Registry session that replays a fixed list of replies.

    Each item is either a reply (Found / NotFound / InvalidArgument) or an
    exception instance to raise. get_first consumes the first item, every
    get_next call the following one.

    Usage:
        session = ScriptedSession([found("a"), found("b"), NotFound()])
    """

    def __init__(self, replies: List[Any], values: Any = None):
        self.replies = list(replies)
        self.values = values or {}
        self.calls: List[str] = []
        self.cursors: List[Cursor] = []
        self.closed = False

    def _next_reply(self):
        if not self.replies:
            raise AssertionError("ScriptedSession ran out of replies")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    def get_first(self, spec):
        self.calls.append("first")
        return self._next_reply()

    def get_next(self, spec, cursor):
        self.calls.append("next")
        self.cursors.append(cursor)
        return self._next_reply()

    def render_value(self, handle, sink):
        self.calls.append("value")
        value = self.values[handle]
        if isinstance(value, Exception):
            raise value
        sink.write(str(value))

    def close(self):
        self.closed = True


def found(name: str, instance_id: int = 0, handle: Any = None, position: int = 0) -> Found:
    """Shorthand for a Found reply."""
    return Found(
        match=MatchResult(name=name, instance_id=instance_id, handle=handle if handle is not None else name),
        cursor=Cursor(position=position),
    )


# ============================================================================
# Base Fixtures
# ============================================================================

@pytest.fixture
def logger():
    """
    Standard mock logger for all tests.
    """
    from varquery.utils.logger import Logger
    return Mock(spec=Logger)


@pytest.fixture
def mock_config():
    """
    Standard mock configuration for all tests.
    """
    from varquery.config.settings import Config

    config = Mock(spec=Config)
    config.environment = "test"
    config.log_level = "DEBUG"
    config.server_url = "http://varserver.test"
    config.request_timeout = None
    config.http_port = 8000
    config.is_production = False
    config.is_development = False
    return config


@pytest.fixture
def registry():
    """
    In-memory registry with a small mixed set of variables.

    Order: /sys/uptime, /sys/net/ip[3], /app/count, /app/name[5], /app/secret
    """
    from varquery.registry.memory import MemoryRegistry

    reg = MemoryRegistry()
    reg.add("/sys/uptime", 86400, flags=0x01, tags=("system",))
    reg.add("/sys/net/ip", "10.0.0.7", instance_id=3, flags=0x03, tags=("system", "network"))
    reg.add("/app/count", 42, flags=0x02, tags=("app", "metric"))
    reg.add("/app/name", "demo", instance_id=5, tags=("app",))
    reg.add("/app/secret", "hunter2", flags=0x40, tags=("app", "secret"))
    return reg


@pytest.fixture
def mock_context():
    """
    Standard mock ToolContext for all tests.
    """
    from varquery.mcp_types.tools import ToolContext

    return ToolContext(
        userId='test_user',
        requestId='test_req_123',
        timestamp=1234567890.0,
        toolName=None
    )


@pytest.fixture
def scripted():
    """
    Factory for ScriptedSession.

    Usage:
        def test_something(scripted, found):
            session = scripted([found("a"), NotFound()])
    """
    return ScriptedSession


@pytest.fixture(name="found")
def found_fixture():
    """The found() reply shorthand."""
    return found


@pytest.fixture
def gated_registry():
    """
    Factory for a one-entry registry whose get_first blocks until the
    returned gate is set (or five seconds pass).

    Usage:
        registry, gate = gated_registry()
    """
    import threading

    from varquery.registry.memory import MemoryRegistry

    class GatedRegistry(MemoryRegistry):
        def __init__(self, gate):
            super().__init__()
            self.gate = gate
            self.add("a")

        def get_first(self, spec):
            self.gate.wait(timeout=5)
            return super().get_first(spec)

    def make():
        gate = threading.Event()
        return GatedRegistry(gate), gate

    return make
