"""Configuration tests."""

import pytest
from pydantic import ValidationError

from stylebridge.core import Settings, get_settings


def test_settings_defaults():
    """Test default settings load correctly."""
    settings = Settings()

    assert settings.default_breakpoint == "breakpoint_base"
    assert settings.fallback_unknown_breakpoints is True
    assert settings.gap_maps_both_axes is True
    assert settings.strict_unknown_properties is False
    assert settings.default_length_unit == "px"
    assert settings.id_prefix == "el"
    assert settings.max_request_size == 512 * 1024
    assert settings.max_json_depth == 40


def test_settings_from_environment():
    """Test STYLEBRIDGE_ variables set in conftest are picked up."""
    settings = Settings()
    assert settings.log_level == "DEBUG"
    assert settings.json_logs is False


def test_settings_env_override(monkeypatch):
    """Test environment overrides of compilation policy."""
    monkeypatch.setenv("STYLEBRIDGE_STRICT_UNKNOWN_PROPERTIES", "true")
    monkeypatch.setenv("STYLEBRIDGE_DEFAULT_LENGTH_UNIT", "rem")
    monkeypatch.setenv("STYLEBRIDGE_MAX_JSON_DEPTH", "8")

    settings = Settings()
    assert settings.strict_unknown_properties is True
    assert settings.default_length_unit == "rem"
    assert settings.max_json_depth == 8


def test_settings_validation():
    """Test settings validation."""
    assert Settings(max_request_size=1024).max_request_size == 1024

    with pytest.raises(ValidationError):
        Settings(max_request_size=0)

    with pytest.raises(ValidationError):
        Settings(max_json_depth=-1)

    with pytest.raises(ValidationError):
        Settings(id_prefix="")


def test_get_settings_cached():
    """Test settings instance is shared."""
    assert get_settings() is get_settings()
