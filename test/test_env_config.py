import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from pathstore.utils.env_config import AppSettings, get_settings, reload_settings


class TestAppSettings:
    """Test suite for AppSettings class."""

    def test_app_settings_default_values(self) -> None:
        """Test that AppSettings has correct default values."""
        with patch.dict(os.environ, {}, clear=True):
            settings = AppSettings()

        assert settings.environment == "development"
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert settings.log_json_format is False
        assert settings.config_file == "pathstore.json"
        assert settings.auth_file == "users.json"
        assert settings.root_data_dir is None

    def test_app_settings_from_env_vars(self) -> None:
        """Test that AppSettings correctly reads from environment variables."""
        env_vars = {
            "PATHSTORE_ENVIRONMENT": "production",
            "PATHSTORE_LOG_LEVEL": "WARNING",
            "PATHSTORE_LOG_JSON_FORMAT": "true",
            "PATHSTORE_CONFIG_FILE": "/etc/pathstore/config.json",
            "PATHSTORE_AUTH_FILE": "/etc/pathstore/users.json",
            "PATHSTORE_ROOT_DATA_DIR": "/srv/data",
        }

        with patch.dict(os.environ, env_vars, clear=True):
            settings = AppSettings()

        assert settings.environment == "production"
        assert settings.log_level == "WARNING"
        assert settings.log_json_format is True
        assert settings.config_file == "/etc/pathstore/config.json"
        assert settings.auth_file == "/etc/pathstore/users.json"
        assert settings.root_data_dir == "/srv/data"

    def test_invalid_log_level(self) -> None:
        with patch.dict(os.environ, {"PATHSTORE_LOG_LEVEL": "LOUD"}, clear=True):
            with pytest.raises(ValidationError):
                AppSettings()

    def test_logging_config_debug_overrides_level(self) -> None:
        with patch.dict(os.environ, {"PATHSTORE_DEBUG": "1", "PATHSTORE_LOG_LEVEL": "ERROR"}, clear=True):
            settings = AppSettings()

        assert settings.get_logging_config() == {"level": "DEBUG", "json_format": False}


class TestSettingsSingleton:
    """Test suite for the global settings accessors."""

    def test_get_settings_is_cached(self) -> None:
        first = reload_settings()
        assert get_settings() is first

    def test_reload_settings_reads_environment(self) -> None:
        with patch.dict(os.environ, {"PATHSTORE_AUTH_FILE": "other.json"}):
            settings = reload_settings()
        assert settings.auth_file == "other.json"
        assert get_settings() is settings
        reload_settings()
