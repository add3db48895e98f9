import pytest

from eva.config import Settings, get_settings
from eva.errors import ConfigurationError


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("EVA_TOOL_DELAY_SECONDS", raising=False)
    settings = Settings(_env_file=None)
    assert settings.default_role == "borrower"
    assert settings.tool_delay_seconds == 2.0
    assert settings.max_detected_tools == 3
    assert settings.min_token_length == 3


def test_environment_prefix(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EVA_TOOL_DELAY_SECONDS", "0.5")
    monkeypatch.setenv("EVA_DEFAULT_ROLE", "vendor")
    settings = Settings(_env_file=None)
    assert settings.tool_delay_seconds == 0.5
    assert settings.default_role == "vendor"


def test_invalid_settings_raise_configuration_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EVA_MAX_DETECTED_TOOLS", "0")
    with pytest.raises(ConfigurationError):
        get_settings()
