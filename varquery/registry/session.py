"""
Registry Session
Abstract collaborator giving cursor access to the variable server.
"""

from abc import ABC, abstractmethod
from typing import Any

from varquery.query.types import Cursor, RegistryReply, SearchSpecification


class RegistrySession(ABC):
    """
    An open session with a variable registry.

    Implementations return Found / NotFound / InvalidArgument replies and
    raise TransportError when the registry cannot be reached. A cursor
    belongs to one walk; concurrent searches each start their own.
    """

    @abstractmethod
    def get_first(self, spec: SearchSpecification) -> RegistryReply:
        """Return the first entry matching spec."""
        pass

    @abstractmethod
    def get_next(self, spec: SearchSpecification, cursor: Cursor) -> RegistryReply:
        """Return the next entry after cursor matching spec."""
        pass

    @abstractmethod
    def render_value(self, handle: Any, sink) -> None:
        """Write the current value of the variable behind handle to sink."""
        pass

    def close(self) -> None:
        """Release the session."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
