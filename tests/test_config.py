"""Configuration: tests for Settings and the composition root.

Tests cover:
    - ENDWARE_* environment variables override defaults
    - build_config wires the logging hook only when enabled
    - create_app accepts an injected EndwareConfig
"""

from endware.config import Settings
from endware.core.context import EndwareConfig
from endware.core.diagnostics import ignore_internal_error
from endware.infrastructure.observability import log_internal_error
from endware.main import build_config, create_app


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("ENDWARE_LOG_FORMAT", raising=False)
    settings = Settings(_env_file=None)
    assert settings.log_level == "INFO"
    assert settings.log_format == "json"
    assert settings.log_internal_errors is True


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("ENDWARE_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("ENDWARE_LOG_FORMAT", "text")
    monkeypatch.setenv("ENDWARE_LOG_INTERNAL_ERRORS", "false")
    settings = Settings(_env_file=None)
    assert settings.log_level == "DEBUG"
    assert settings.log_format == "text"
    assert settings.log_internal_errors is False


def test_build_config_with_logging_hook():
    config = build_config(Settings(_env_file=None, log_internal_errors=True))
    assert config.log_error is log_internal_error


def test_build_config_without_logging_hook():
    config = build_config(Settings(_env_file=None, log_internal_errors=False))
    assert config.log_error is ignore_internal_error


def test_create_app_registers_routes(config: EndwareConfig):
    app = create_app(config)
    paths = {route.path for route in app.routes}
    assert {"/api/v1/health/", "/api/v1/widgets", "/api/v1/widgets/{widget_id}"} <= paths
