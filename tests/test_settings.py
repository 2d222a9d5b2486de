"""Tests for configuration and logging setup."""

import pytest
from uuid import UUID

from pydantic import ValidationError

from paycycle.config import (
    EngineSettings,
    LoggingSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)
from paycycle.log import configure_logging, create_refresh_id, get_logger


class TestEngineSettings:
    """Tests for engine settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("PAYCYCLE_WINDOW_WEEKS", raising=False)
        settings = EngineSettings()
        assert settings.window_weeks == 6
        assert settings.include_current_week is True

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("PAYCYCLE_WINDOW_WEEKS", "8")
        monkeypatch.setenv("PAYCYCLE_INCLUDE_CURRENT_WEEK", "false")
        settings = EngineSettings()
        assert settings.window_weeks == 8
        assert settings.include_current_week is False

    def test_window_bounds(self):
        with pytest.raises(ValidationError):
            EngineSettings(window_weeks=0)
        with pytest.raises(ValidationError):
            EngineSettings(window_weeks=53)


class TestLoggingSettings:
    """Tests for logging settings."""

    def test_level_is_normalized(self):
        assert LoggingSettings(level=" debug ").level == "DEBUG"

    def test_unknown_level_rejected(self):
        with pytest.raises(ValidationError):
            LoggingSettings(level="chatty")


class TestStorageSettings:
    """Tests for the storage retry policy."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("PAYCYCLE_STORAGE_RETRY_ATTEMPTS", raising=False)
        settings = StorageSettings()
        assert settings.retry_attempts == 3
        assert settings.retry_max_wait == 10.0

    def test_attempts_must_be_positive(self):
        with pytest.raises(ValidationError):
            StorageSettings(retry_attempts=0)


class TestSettingsAccess:
    """Tests for the cached settings container."""

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        assert get_settings() is get_settings()

    def test_sections(self):
        settings = get_settings()
        assert isinstance(settings.engine, EngineSettings)
        assert isinstance(settings.logging, LoggingSettings)
        assert isinstance(settings.storage, StorageSettings)

    def test_validate_all_settings(self, monkeypatch):
        monkeypatch.setenv("PAYCYCLE_STORAGE_RETRY_ATTEMPTS", "0")
        results = validate_all_settings()
        assert results["engine"] is True
        assert results["storage"] is False
        assert "storage_error" in results


class TestLogging:
    """Tests for structlog setup."""

    def test_console_logging(self):
        configure_logging(LoggingSettings(level="DEBUG", json_output=False))
        logger = get_logger("paycycle.tests")
        logger.info("settings_test_event", value=1)

    def test_json_logging(self):
        configure_logging(LoggingSettings(level="INFO", json_output=True))
        get_logger("paycycle.tests").info("settings_test_event", value=2)

    def test_refresh_ids_are_unique(self):
        first = create_refresh_id()
        assert isinstance(first, UUID)
        assert first != create_refresh_id()
