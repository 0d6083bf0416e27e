"""Tests for configuration."""

import pytest

from varquery.config.settings import Config, ConfigManager, get_log_level, get_request_timeout, get_server_url


class TestSettings:
    """Test environment parsing."""

    def test_default_server_url(self, monkeypatch):
        monkeypatch.delenv("VARSERVER_URL", raising=False)
        assert get_server_url() == "http://localhost:8080"

    def test_server_url_override(self, monkeypatch):
        monkeypatch.setenv("VARSERVER_URL", "http://vars.local:7000/")
        assert get_server_url() == "http://vars.local:7000"

    def test_timeout_unset_blocks(self, monkeypatch):
        monkeypatch.delenv("VARSERVER_TIMEOUT", raising=False)
        assert get_request_timeout() is None

    def test_timeout_parsed(self, monkeypatch):
        monkeypatch.setenv("VARSERVER_TIMEOUT", "2.5")
        assert get_request_timeout() == 2.5

    def test_log_level_defaults_to_info(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        assert get_log_level() == "INFO"

    def test_log_level_override(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert get_log_level() == "DEBUG"

    def test_timeout_invalid(self, monkeypatch):
        monkeypatch.setenv("VARSERVER_TIMEOUT", "soon")
        with pytest.raises(ValueError):
            get_request_timeout()


class TestConfigManager:
    """Test ConfigManager."""

    def test_load_production(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.setenv("VARQUERY_PORT", "9001")

        config = ConfigManager().load()

        assert config.is_production
        assert config.log_level == "INFO"
        assert config.http_port == 9001

    def test_get_without_load(self):
        assert isinstance(ConfigManager().get(), Config)

    def test_singleton(self):
        assert ConfigManager.get_instance() is ConfigManager.get_instance()
