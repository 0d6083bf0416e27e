"""
Settings
Configuration management for varquery.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load .env file
load_dotenv()


DEFAULT_SERVER_URL = "http://localhost:8080"


def get_server_url() -> str:
    """
    Get the base URL of the variable server.
    
    VARSERVER_URL wins when set, otherwise the local default is used.
    """
    explicit_url = os.getenv("VARSERVER_URL")
    if explicit_url:
        return explicit_url.rstrip("/")
    return DEFAULT_SERVER_URL


def get_log_level() -> str:
    """Get LOG_LEVEL, defaulting to INFO."""
    return os.getenv("LOG_LEVEL", "INFO").upper()


def get_request_timeout() -> Optional[float]:
    """Get the per-request timeout in seconds, or None to block indefinitely."""
    raw = os.getenv("VARSERVER_TIMEOUT")
    if not raw:
        return None
    try:
        timeout = float(raw)
    except ValueError:
        raise ValueError(f"VARSERVER_TIMEOUT must be a number of seconds, got '{raw}'")
    return timeout if timeout > 0 else None


@dataclass
class Config:
    """Runtime configuration."""
    environment: str = "development"
    log_level: str = "INFO"
    server_url: str = ""  # Set in __post_init__
    request_timeout: Optional[float] = None
    http_port: int = 8000
    
    def __post_init__(self):
        if not self.server_url:
            self.server_url = get_server_url()
    
    @property
    def is_production(self) -> bool:
        return self.environment == "production"
    
    @property
    def is_development(self) -> bool:
        return self.environment == "development"


class ConfigManager:
    """Configuration manager - loads and provides config."""
    
    _instance: Optional["ConfigManager"] = None
    
    def __init__(self):
        self._config: Optional[Config] = None
    
    @classmethod
    def get_instance(cls) -> "ConfigManager":
        """Get singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance
    
    def load(self) -> Config:
        """Load configuration from environment."""
        env = os.getenv("ENVIRONMENT", "development")
        self._config = Config(
            environment=env,
            log_level=get_log_level(),
            server_url=get_server_url(),
            request_timeout=get_request_timeout(),
            http_port=int(os.getenv("VARQUERY_PORT", "8000")),
        )
        return self._config
    
    def get(self) -> Config:
        """Get current configuration."""
        if self._config is None:
            # Create default config if not loaded
            self._config = Config()
        return self._config
