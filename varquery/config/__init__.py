"""
Config Module
Configuration management.
"""

from .settings import ConfigManager, Config, get_log_level, get_server_url, get_request_timeout

__all__ = [
    "ConfigManager",
    "Config",
    "get_log_level",
    "get_server_url",
    "get_request_timeout",
]
