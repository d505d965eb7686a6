import pytest
from pydantic import ValidationError

from user_api.core.config import Settings, validate_settings


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.PORT == 3000
    assert settings.STRICT_STARTUP is False
    assert settings.is_development
    assert validate_settings(settings) is True


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("MONGODB_URI", "mongodb://db:27017")
    monkeypatch.setenv("ENVIRONMENT", "production")

    settings = Settings(_env_file=None)

    assert settings.PORT == 8080
    assert settings.MONGODB_URI == "mongodb://db:27017"
    assert settings.is_production


def test_log_level_is_normalized():
    assert Settings(LOG_LEVEL="debug", _env_file=None).LOG_LEVEL == "DEBUG"
    with pytest.raises(ValidationError):
        Settings(LOG_LEVEL="chatty", _env_file=None)


def test_validate_settings_collects_errors():
    settings = Settings(MONGODB_URI="localhost", PORT=0, MONGODB_CONNECT_RETRIES=0, _env_file=None)
    with pytest.raises(ValueError) as exc_info:
        validate_settings(settings)
    message = str(exc_info.value)
    assert "MONGODB_URI" in message
    assert "PORT" in message
    assert "MONGODB_CONNECT_RETRIES" in message
