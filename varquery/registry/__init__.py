"""
Registry Module
Sessions giving cursor access to a variable registry.
"""

from .session import RegistrySession
from .memory import MemoryRegistry, VarEntry
from .http import HttpRegistrySession, spec_to_payload

__all__ = [
    "RegistrySession",
    "MemoryRegistry",
    "VarEntry",
    "HttpRegistrySession",
    "spec_to_payload",
]
