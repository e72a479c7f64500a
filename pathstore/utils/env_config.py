"""
Environment-based settings for pathstore.

Process-level knobs (logging, where the configuration and user files live,
an optional storage root override) come from ``PATHSTORE_*`` environment
variables.
"""

from typing import Literal, Optional

import structlog
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger(__name__)


class AppSettings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_prefix="PATHSTORE_", case_sensitive=False, extra="ignore")

    # Environment
    environment: Literal["development", "staging", "production"] = Field(default="development")
    debug: bool = Field(default=False)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_json_format: bool = Field(default=False, description="Render log events as JSON")

    # Files
    config_file: str = Field(default="pathstore.json", description="JSON configuration record")
    auth_file: str = Field(default="users.json", description="JSON user list")
    root_data_dir: Optional[str] = Field(default=None, description="Overrides rootDataDir from the config file")

    def get_logging_config(self) -> dict:
        """Get logging configuration as a dictionary."""
        return {
            "level": "DEBUG" if self.debug else self.log_level,
            "json_format": self.log_json_format,
        }


# Global settings instance
_settings: Optional[AppSettings] = None


def get_settings() -> AppSettings:
    """Get the global application settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings()
        logger.debug("Loaded settings", environment=_settings.environment)
    return _settings


def reload_settings() -> AppSettings:
    """Rebuild the global settings from the current environment."""
    global _settings
    _settings = AppSettings()
    logger.debug("Reloaded settings", environment=_settings.environment)
    return _settings
